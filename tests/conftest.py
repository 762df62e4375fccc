"""
Shared pytest fixtures for contractrest tests.

This module provides:
- A FabCar-style metadata snapshot with cross-referencing component schemas
- An in-memory backend populated with that snapshot and operation handlers
- Settings / app / client fixtures for end-to-end HTTP tests

Usage:
    Fixtures are auto-discovered by pytest; request them by argument name.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from contractrest.api.app import create_app
from contractrest.api.settings import ContractRestSettings
from contractrest.backend.memory import InMemoryBackend

NETWORK = "mychannel"
CONTRACT_GROUP = "fabcar"

CAR = {"make": "Toyota", "model": "Prius", "owner": {"name": "Tomoko"}}

_FABCAR_METADATA: dict[str, Any] = {
    "$schema": "https://hyperledger.github.io/fabric-chaincode-node/main/api/contract-schema.json",
    "contracts": {
        "FabCar": {
            "name": "FabCar",
            "transactions": [
                {
                    "name": "queryCar",
                    "parameters": [{"name": "carNumber", "schema": {"type": "string"}}],
                    "returns": {"$ref": "#/components/schemas/Car"},
                    "tag": ["evaluateTx"],
                },
                {
                    "name": "createCar",
                    "parameters": [
                        {"name": "carNumber", "schema": {"type": "string"}},
                        {"name": "car", "schema": {"$ref": "#/components/schemas/Car"}},
                        {"name": "year", "schema": {"type": "integer"}},
                    ],
                    "tag": ["submitTx"],
                },
                {"name": "queryAllCars"},
                {"name": "describe"},
            ],
        },
    },
    "components": {
        "schemas": {
            "Car": {
                "$id": "Car",
                "type": "object",
                "properties": {
                    "make": {"type": "string"},
                    "model": {"type": "string"},
                    "owner": {"$ref": "#/components/schemas/Owner"},
                },
            },
            "Owner": {
                "$id": "Owner",
                "type": "object",
                "properties": {"name": {"type": "string"}},
            },
            "Unused": {"type": "object", "properties": {}},
        },
    },
}


@pytest.fixture
def fabcar_metadata() -> dict[str, Any]:
    """A fresh copy of the FabCar metadata snapshot."""
    return copy.deepcopy(_FABCAR_METADATA)


@pytest.fixture
def metadata_file(tmp_path: Path, fabcar_metadata: dict[str, Any]) -> Path:
    path = tmp_path / "metadata.json"
    path.write_text(json.dumps(fabcar_metadata), encoding="utf-8")
    return path


def _query_car(car_number: str) -> dict[str, Any]:
    if car_number != "CAR0":
        raise ValueError(f"{car_number} does not exist\nquery rejected by peer")
    return CAR


@pytest.fixture
def backend(fabcar_metadata: dict[str, Any]) -> InMemoryBackend:
    """In-memory backend serving mychannel/fabcar."""
    b = InMemoryBackend()
    b.add_contract_group(NETWORK, CONTRACT_GROUP, fabcar_metadata)
    b.register(NETWORK, CONTRACT_GROUP, "FabCar", "queryCar", _query_car)
    b.register(NETWORK, CONTRACT_GROUP, "FabCar", "createCar", lambda *args: None)
    b.register(NETWORK, CONTRACT_GROUP, "FabCar", "queryAllCars", lambda: "ok: 3 cars")
    # Not valid UTF-8: decoding the result fails after the backend call.
    b.register(NETWORK, CONTRACT_GROUP, "FabCar", "describe", lambda: b"\xff\xfe")
    return b


@pytest.fixture
def settings() -> ContractRestSettings:
    return ContractRestSettings(debug=True, api_title="FabCar REST", api_version="1.2.3")


@pytest.fixture
def app(settings: ContractRestSettings, backend: InMemoryBackend) -> FastAPI:
    return create_app(settings=settings, backend=backend)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Client with the lifespan run, so the route tree is mounted."""
    with TestClient(app) as c:
        yield c
