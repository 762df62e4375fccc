"""
Operation descriptor model — the typed shape of discovered ledger metadata.

A contract group (chaincode) describes itself with a JSON document listing
its contracts, each contract's operations (transactions) and their
parameters, plus a shared pool of reusable schema definitions.  This module
parses that document into frozen pydantic models.

Manifesto:
    Malformed metadata must fail loudly at boot.  A partially parsed snapshot
    would silently expose routes that can never succeed, so every structural
    problem is reported as a single :class:`MetadataError` naming the
    offending location.

Features:
    - Accepts both the ledger's native keys (``transactions``, ``tag``) and
      the neutral ones (``operations``, ``tags``)
    - Contract ``name`` defaults to its key in ``contracts``
    - ``$id`` is stripped from component schemas before publication
    - :class:`InvocationMode` resolved once per operation, not per request

Examples:
    >>> meta = parse_metadata({
    ...     "contracts": {
    ...         "FabCar": {
    ...             "name": "FabCar",
    ...             "transactions": [
    ...                 {"name": "queryCar", "parameters": [{"name": "key", "schema": {"type": "string"}}]},
    ...                 {"name": "createCar", "tag": ["submitTx"]},
    ...             ],
    ...         }
    ...     },
    ... })
    >>> meta.contracts["FabCar"].operations[1].invocation_mode()
    <InvocationMode.SUBMIT: 'submit'>

Tags:
    metadata, pydantic, descriptor, contractrest

Doc-Types:
    api-reference
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from contractrest.core.errors import MetadataError

# A JSON-Schema-shaped node: ``{"type": ...}``, ``{"type": "array", "items": ...}``,
# ``{"type": "object", "properties": {...}}`` or ``{"$ref": "#/components/schemas/<name>"}``.
SchemaNode = dict[str, Any]

DEFAULT_MUTATING_TAG = "submitTx"


class InvocationMode(str, Enum):
    """How an operation is sent to the backend."""

    SUBMIT = "submit"  # state-mutating, ordered and committed
    EVALUATE = "evaluate"  # read-only query

    @classmethod
    def for_tags(cls, tags: Iterable[str], mutating_tag: str = DEFAULT_MUTATING_TAG) -> InvocationMode:
        return cls.SUBMIT if mutating_tag in tags else cls.EVALUATE


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class OperationParameter(_Frozen):
    """One named input of an operation."""

    name: str
    schema_: SchemaNode = Field(alias="schema")

    @property
    def is_string(self) -> bool:
        """Declared ``type: string`` parameters are passed to the backend verbatim."""
        return self.schema_.get("type") == "string"


class OperationDescriptor(_Frozen):
    """One callable operation (transaction) of a contract."""

    name: str
    parameters: tuple[OperationParameter, ...] = ()
    tags: frozenset[str] = Field(default=frozenset(), validation_alias=AliasChoices("tags", "tag"))
    returns: SchemaNode | None = None

    @field_validator("parameters", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return () if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_none_is_empty(cls, value: Any) -> Any:
        return frozenset() if value is None else value

    def invocation_mode(self, mutating_tag: str = DEFAULT_MUTATING_TAG) -> InvocationMode:
        return InvocationMode.for_tags(self.tags, mutating_tag)


class ContractDescriptor(_Frozen):
    """A named grouping of operations."""

    name: str
    operations: tuple[OperationDescriptor, ...] = Field(
        default=(),
        validation_alias=AliasChoices("operations", "transactions"),
    )


class ComponentMetadata(_Frozen):
    """Reusable schema definitions shared by every contract of a contract group."""

    schemas: dict[str, SchemaNode] = Field(default_factory=dict)

    @field_validator("schemas", mode="after")
    @classmethod
    def _strip_ids(cls, schemas: dict[str, SchemaNode]) -> dict[str, SchemaNode]:
        return {name: {k: v for k, v in schema.items() if k != "$id"} for name, schema in schemas.items()}


class ChaincodeMetadata(_Frozen):
    """The full metadata snapshot of one contract group."""

    contracts: dict[str, ContractDescriptor]
    components: ComponentMetadata = Field(default_factory=ComponentMetadata)

    @model_validator(mode="before")
    @classmethod
    def _default_contract_names(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        contracts = data.get("contracts")
        if not isinstance(contracts, Mapping):
            return data
        named = {}
        for key, contract in contracts.items():
            if isinstance(contract, Mapping) and "name" not in contract:
                contract = {**contract, "name": key}
            named[key] = contract
        return {**data, "contracts": named}

    @field_validator("components", mode="before")
    @classmethod
    def _components_none_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value


def _describe(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "<root>"
        problems.append(f"{loc}: {err['msg']}")
    return "; ".join(problems)


def parse_metadata(raw: Mapping[str, Any] | str | bytes) -> ChaincodeMetadata:
    """Parse a raw metadata snapshot, failing fast on any structural problem.

    Args:
        raw: Decoded JSON mapping, or the JSON text/bytes returned by the backend.

    Raises:
        MetadataError: The snapshot is not JSON, not an object, or does not
            match the descriptor model.
    """
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise MetadataError(f"Metadata is not valid JSON: {exc}", cause=exc) from exc

    if not isinstance(raw, Mapping):
        raise MetadataError(f"Metadata must be a JSON object, got {type(raw).__name__}")

    try:
        return ChaincodeMetadata.model_validate(raw)
    except ValidationError as exc:
        raise MetadataError(f"Malformed metadata: {_describe(exc)}", cause=exc) from exc


__all__ = [
    "DEFAULT_MUTATING_TAG",
    "ChaincodeMetadata",
    "ComponentMetadata",
    "ContractDescriptor",
    "InvocationMode",
    "OperationDescriptor",
    "OperationParameter",
    "SchemaNode",
    "parse_metadata",
]
