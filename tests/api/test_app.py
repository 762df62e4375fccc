"""
Tests for the FastAPI application factory and the synthesized HTTP surface.
"""

from __future__ import annotations

import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from contractrest.api.app import create_app
from contractrest.api.settings import ContractRestSettings
from contractrest.backend.memory import InMemoryBackend
from contractrest.core.errors import MetadataError
from contractrest.metadata.models import InvocationMode

BASE = "/mychannel/fabcar/FabCar"


class TestCreateApp:
    def test_returns_fastapi_instance(self, app):
        assert isinstance(app, FastAPI)

    def test_document_and_docs_urls(self, app):
        assert app.openapi_url == "/swagger.json"
        assert app.docs_url == "/api-docs"
        assert app.redoc_url is None

    def test_settings_on_state(self, app, settings, backend):
        assert app.state.settings is settings
        assert app.state.backend is backend
        assert app.state.route_tree is None

    def test_cors_middleware_present(self, app):
        middleware_classes = [m.cls.__name__ for m in app.user_middleware]
        assert "CORSMiddleware" in middleware_classes
        assert "RequestIDMiddleware" in middleware_classes

    def test_operation_routes_not_mounted_before_startup(self, app):
        paths = [r.path for r in app.routes]
        assert f"{BASE}/queryCar" not in paths
        assert "/health" in paths


class TestLifespan:
    def test_startup_mounts_tree(self, app, backend):
        with TestClient(app):
            assert app.state.route_tree is not None
            assert backend.connected
            assert f"{BASE}/queryCar" in [r.path for r in app.routes]
        assert not backend.connected

    def test_startup_fails_on_bad_metadata(self, settings):
        class Broken(InMemoryBackend):
            async def list_groups(self):
                return ["mychannel"]

            async def list_contract_groups(self, group_id):
                return ["fabcar"]

        with pytest.raises(MetadataError, match="Unable to fetch metadata"):
            with TestClient(create_app(settings=settings, backend=Broken())):
                pass

    def test_output_file_written(self, backend, tmp_path):
        target = tmp_path / "out" / "swagger.json"
        app = create_app(settings=ContractRestSettings(output_file=str(target)), backend=backend)
        with TestClient(app):
            pass
        document = json.loads(target.read_text(encoding="utf-8"))
        assert f"{BASE}/createCar" in document["paths"]


class TestInterfaceDocument:
    def test_served_at_document_url(self, client):
        response = client.get("/swagger.json")
        assert response.status_code == 200
        doc = response.json()
        assert doc["openapi"] == "3.0.0"
        assert doc["info"] == {"title": "FabCar REST", "version": "1.2.3"}

    def test_contains_only_synthesized_paths(self, client):
        doc = client.get("/swagger.json").json()
        assert set(doc["paths"]) == {
            f"{BASE}/queryCar",
            f"{BASE}/createCar",
            f"{BASE}/queryAllCars",
            f"{BASE}/describe",
        }

    def test_schemas_namespaced_and_closed(self, client):
        schemas = client.get("/swagger.json").json()["components"]["schemas"]
        assert set(schemas) == {"mychannel.fabcar.FabCar.Car", "mychannel.fabcar.FabCar.Owner"}
        owner = schemas["mychannel.fabcar.FabCar.Car"]["properties"]["owner"]
        assert owner == {"$ref": "#/components/schemas/mychannel.fabcar.FabCar.Owner"}
        assert "$id" not in schemas["mychannel.fabcar.FabCar.Car"]

    def test_operation_entry(self, client):
        post = client.get("/swagger.json").json()["paths"][f"{BASE}/createCar"]["post"]
        assert post["operationId"] == "createCar"
        assert post["tags"] == ["mychannel/fabcar"]
        props = post["requestBody"]["content"]["application/json"]["schema"]["properties"]
        assert props["car"] == {"$ref": "#/components/schemas/mychannel.fabcar.FabCar.Car"}
        assert props["year"] == {"type": "integer"}

    def test_docs_ui(self, client):
        response = client.get("/api-docs")
        assert response.status_code == 200
        assert "/swagger.json" in response.text


class TestOperationRoutes:
    def test_query_returns_json(self, client, backend):
        response = client.post(f"{BASE}/queryCar", json={"carNumber": "CAR0"})
        assert response.status_code == 200
        assert response.json() == {"make": "Toyota", "model": "Prius", "owner": {"name": "Tomoko"}}
        assert backend.calls[-1] == (InvocationMode.EVALUATE, "mychannel", "fabcar", "FabCar", "queryCar", ("CAR0",))

    def test_submit_mode_and_wire_arguments(self, client, backend):
        response = client.post(
            f"{BASE}/createCar",
            json={"carNumber": "CAR12", "car": {"make": "Honda", "model": "Accord"}, "year": 2020},
        )
        assert response.status_code == 204
        assert backend.calls[-1] == (
            InvocationMode.SUBMIT,
            "mychannel",
            "fabcar",
            "FabCar",
            "createCar",
            ("CAR12", '{"make":"Honda","model":"Accord"}', "2020"),
        )

    def test_missing_parameters(self, client, backend):
        response = client.post(f"{BASE}/createCar", json={"carNumber": "CAR12"})
        assert response.status_code == 400
        assert response.json() == {"msg": ["Bad request. Missing parameters: car, year"]}
        assert backend.calls == []

    def test_raw_text_result(self, client):
        response = client.post(f"{BASE}/queryAllCars")
        assert response.status_code == 200
        assert response.text == "ok: 3 cars"
        assert response.headers["content-type"].startswith("text/plain")

    def test_backend_failure(self, client):
        response = client.post(f"{BASE}/queryCar", json={"carNumber": "CAR7"})
        assert response.status_code == 500
        assert response.json() == {"msg": ["CAR7 does not exist", "query rejected by peer"]}

    def test_get_not_allowed(self, client):
        assert client.get(f"{BASE}/queryCar").status_code == 405

    def test_unknown_operation(self, client):
        assert client.post(f"{BASE}/deleteCar", json={}).status_code == 404

    def test_request_id_header(self, client):
        response = client.post(f"{BASE}/queryAllCars", headers={"X-Request-ID": "req-1"})
        assert response.headers["X-Request-ID"] == "req-1"


class TestUnhandledErrors:
    def test_render_failure_is_problem_detail(self, app):
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.post(f"{BASE}/describe")
        assert response.status_code == 500
        body = response.json()
        assert body["title"] == "Internal Server Error"
        assert body["status"] == 500
        assert "utf-8" in body["detail"]

    def test_detail_hidden_without_debug(self, backend):
        app = create_app(settings=ContractRestSettings(debug=False), backend=backend)
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.post(f"{BASE}/describe")
        assert response.json()["detail"] == "An unexpected error occurred."


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "FabCar REST", "version": "1.2.3", "paths": 4}

    def test_live(self, client):
        assert client.get("/health/live").json() == {"ok": True}

    def test_ready(self, client):
        assert client.get("/health/ready").status_code == 200

    def test_not_ready_before_startup(self, app):
        response = TestClient(app).get("/health/ready")
        assert response.status_code == 503
        assert response.json()["status"] == "starting"
