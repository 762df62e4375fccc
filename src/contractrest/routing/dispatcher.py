"""
Operation dispatcher — the leaf handler behind every synthesized route.

For one :class:`~contractrest.metadata.models.OperationDescriptor` this
module builds:

- an async endpoint that validates the JSON body against the declared
  parameters, marshals arguments to the backend's textual wire form,
  invokes the backend in the operation's mode and maps the outcome to an
  HTTP response;
- the operation's ``paths`` entry for the interface document.

Response mapping:
    ==========================  ======  ===============================
    Outcome                     Status  Body
    ==========================  ======  ===============================
    missing parameters          400     ``{"msg": ["Bad request. ..."]}``
    result parses as JSON       200     parsed JSON value
    result is not JSON text     200     raw text (``text/plain``)
    empty / absent result       204     empty
    backend raised              500     ``{"msg": [<message lines>]}``
    ==========================  ======  ===============================

Tags:
    dispatch, marshalling, fastapi, endpoint, contractrest

Doc-Types:
    api-reference
"""

from __future__ import annotations

import json
import math
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from contractrest.backend.protocol import LedgerBackend
from contractrest.core.errors import ContractRestError, ErrorCategory
from contractrest.core.logging import get_logger
from contractrest.metadata.models import InvocationMode, OperationDescriptor, OperationParameter

logger = get_logger(__name__)

MISSING_PARAMETERS = "Bad request. Missing parameters: "
INVALID_JSON = "Bad request. Request body is not valid JSON"
NOT_AN_OBJECT = "Bad request. Request body must be a JSON object"

Invoker = Callable[..., Awaitable[bytes | None]]


class BadRequestError(ContractRestError):
    """The request body cannot be turned into operation arguments."""

    default_category = ErrorCategory.VALIDATION


@dataclass(frozen=True, slots=True)
class OperationBinding:
    """Ledger coordinates an operation endpoint is bound to."""

    network: str
    contract_group: str
    contract: str

    @property
    def tag(self) -> str:
        return f"{self.network}/{self.contract_group}"

    def log_context(self) -> dict[str, str]:
        return {"network": self.network, "contract_group": self.contract_group, "contract": self.contract}


# ── Marshalling ──────────────────────────────────────────────────────────


def _normalize_numbers(value: Any) -> Any:
    # JSON has a single number type: 1.0 is written as 1, non-finite values as null.
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value) if value.is_integer() else value
    if isinstance(value, dict):
        return {key: _normalize_numbers(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_normalize_numbers(item) for item in value]
    return value


def to_wire(value: Any) -> str:
    """Compact JSON text, the backend's wire form for non-string arguments."""
    return json.dumps(_normalize_numbers(value), separators=(",", ":"), ensure_ascii=False)


def find_missing(parameters: Sequence[OperationParameter], body: Mapping[str, Any]) -> list[str]:
    """Names of declared parameters absent from *body*, in declaration order."""
    return [param.name for param in parameters if param.name not in body]


def coerce_arguments(parameters: Sequence[OperationParameter], body: Mapping[str, Any]) -> list[Any]:
    """Positional backend arguments in declaration order.

    Declared-string parameters pass through unchanged; everything else is
    re-serialized as JSON text.
    """
    return [body[param.name] if param.is_string else to_wire(body[param.name]) for param in parameters]


async def read_json_object(request: Request) -> dict[str, Any]:
    """Decode the request body as a JSON object (empty body is ``{}``)."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise BadRequestError(INVALID_JSON, cause=exc) from exc
    if not isinstance(body, dict):
        raise BadRequestError(NOT_AN_OBJECT)
    return body


def select_invoker(backend: LedgerBackend, mode: InvocationMode) -> Invoker:
    if mode is InvocationMode.SUBMIT:
        return backend.invoke_mutating
    return backend.invoke_read_only


# ── Response mapping ─────────────────────────────────────────────────────


def bad_request(messages: list[str]) -> JSONResponse:
    return JSONResponse(status_code=400, content={"msg": messages})


def failure_response(exc: BaseException) -> JSONResponse:
    """500 with the error message split into one string per line."""
    message = exc.message if isinstance(exc, ContractRestError) else str(exc)
    return JSONResponse(status_code=500, content={"msg": message.split("\n")})


def render_result(data: bytes | bytearray | str | None) -> Response:
    """Map a backend result buffer to an HTTP response.

    Only a JSON syntax error selects the raw-text path; any other failure
    (undecodable bytes, a value that cannot be re-serialized) propagates.
    """
    if not data:
        return Response(status_code=204)

    text = data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data
    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        return PlainTextResponse(text)
    return JSONResponse(content=value)


# ── Endpoint + document entry ───────────────────────────────────────────


def build_operation_endpoint(
    operation: OperationDescriptor,
    binding: OperationBinding,
    invoke: Invoker,
) -> Callable[[Request], Awaitable[Response]]:
    """Create the request handler for one operation."""
    parameters = operation.parameters
    log = logger.bind(**binding.log_context(), operation=operation.name)

    async def endpoint(request: Request) -> Response:
        try:
            body = await read_json_object(request)
        except BadRequestError as exc:
            return bad_request([exc.message])

        missing = find_missing(parameters, body)
        if missing:
            return bad_request([MISSING_PARAMETERS + ", ".join(missing)])

        args = coerce_arguments(parameters, body)
        try:
            data = await invoke(binding.network, binding.contract_group, binding.contract, operation.name, *args)
        except Exception as exc:
            log.warning("operation_failed", error=str(exc), error_type=type(exc).__name__)
            return failure_response(exc)

        log.debug("operation_completed", result_bytes=len(data or b""))
        return render_result(data)

    endpoint.__name__ = f"invoke_{operation.name}"
    return endpoint


def request_body(parameters: Iterable[OperationParameter]) -> dict[str, Any]:
    """Request-body schema: one object property per declared parameter, no required list."""
    properties = {param.name: param.schema_ for param in parameters}
    return {
        "content": {
            "application/json": {
                "schema": {
                    "properties": properties,
                    "type": "object",
                },
            },
        },
    }


def operation_paths(operation: OperationDescriptor, tags: list[str]) -> dict[str, Any]:
    """The ``paths`` entry an operation contributes to its contract's fragment.

    The 200 response carries no schema even when the operation declares
    ``returns``.
    """
    return {
        f"/{operation.name}": {
            "post": {
                "operationId": operation.name,
                "requestBody": request_body(operation.parameters),
                "responses": {
                    "200": {
                        "description": "successful operation",
                    },
                },
                "tags": tags,
            },
        },
    }
