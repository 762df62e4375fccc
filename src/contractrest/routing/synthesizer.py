"""
Route-tree synthesizer — builds the HTTP surface from ledger metadata.

Walks network → contract group → contract → operation.  Every level
returns a :class:`RouteNode` (an ``APIRouter`` plus the interface-document
fragment it produced); the parent namespaces each child's fragment under
the child's identifier, merges them, and mounts each child's router at
``/<identifier>``.

Architecture:
    ::

        synthesize(backend)
          └─ network "mychannel"                  /mychannel
               └─ contract group "fabcar"         /mychannel/fabcar
                    │  (one fetch_metadata call)
                    └─ contract "FabCar"          /mychannel/fabcar/FabCar
                         └─ operation "queryCar"  POST .../FabCar/queryCar

    Definition ``Car`` used by ``FabCar`` is published as
    ``mychannel.fabcar.FabCar.Car``; refs to it are rewritten level by level.

Manifesto:
    Synthesis runs exactly once, at boot, before the listener accepts
    traffic.  The tree it returns is never mutated afterwards, so request
    handlers share it without locks.

Tags:
    routing, synthesis, fastapi, openapi, route-tree, contractrest

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from fastapi import APIRouter

from contractrest.backend.protocol import LedgerBackend
from contractrest.core.errors import InvalidIdentifierError, MetadataError
from contractrest.core.logging import get_logger
from contractrest.metadata.models import DEFAULT_MUTATING_TAG, ContractDescriptor, SchemaNode
from contractrest.openapi.document import merge_fragments, schema_closure
from contractrest.openapi.namespace import Fragment, namespace
from contractrest.routing.dispatcher import (
    OperationBinding,
    build_operation_endpoint,
    operation_paths,
    select_invoker,
)

logger = get_logger(__name__)

# Starlette reads braces as path parameters.
_FORBIDDEN_CHARS = ("/", "{", "}")


@dataclass(frozen=True)
class RouteNode:
    """A composed sub-router and the document fragment it contributes."""

    router: APIRouter
    fragment: Fragment

    @property
    def path_count(self) -> int:
        return len(self.fragment.get("paths") or {})


def validate_identifier(kind: str, identifier: str) -> str:
    """Reject identifiers that cannot be used as a single path segment."""
    if not identifier or any(char in identifier for char in _FORBIDDEN_CHARS):
        raise InvalidIdentifierError(kind, identifier)
    return identifier


def compose(children: Iterable[tuple[str, RouteNode]], *, kind: str) -> RouteNode:
    """Namespace, merge and mount child nodes under their identifiers."""
    router = APIRouter()
    fragments = []
    for identifier, child in children:
        validate_identifier(kind, identifier)
        fragments.append(namespace(identifier, child.fragment))
        router.include_router(child.router, prefix=f"/{identifier}")
    return RouteNode(router=router, fragment=merge_fragments(fragments))


def build_contract_routes(
    backend: LedgerBackend,
    contract: ContractDescriptor,
    definitions: Mapping[str, SchemaNode],
    binding: OperationBinding,
    *,
    mutating_tag: str = DEFAULT_MUTATING_TAG,
) -> RouteNode:
    """Leaf level: one POST route per operation of *contract*.

    The fragment's schemas are the definitions reachable from the
    operations' parameter and return schemas.
    """
    router = APIRouter()
    paths: dict = {}
    roots: list[SchemaNode] = []
    tags = [binding.tag]

    for operation in contract.operations:
        validate_identifier("operation", operation.name)
        invoke = select_invoker(backend, operation.invocation_mode(mutating_tag))
        router.add_api_route(
            f"/{operation.name}",
            build_operation_endpoint(operation, binding, invoke),
            methods=["POST"],
            name=f"{binding.network}.{binding.contract_group}.{binding.contract}.{operation.name}",
            include_in_schema=False,
        )
        paths.update(operation_paths(operation, tags))
        roots.extend(param.schema_ for param in operation.parameters)
        if operation.returns is not None:
            roots.append(operation.returns)

    return RouteNode(
        router=router,
        fragment={"paths": paths, "components": {"schemas": schema_closure(roots, definitions)}},
    )


async def build_contract_group_routes(
    backend: LedgerBackend,
    network: str,
    contract_group: str,
    *,
    mutating_tag: str = DEFAULT_MUTATING_TAG,
) -> RouteNode:
    """Fetch one metadata snapshot and build a node per contract in it."""
    try:
        metadata = await backend.fetch_metadata(network, contract_group)
    except MetadataError as exc:
        raise exc.with_context(network=network, contract_group=contract_group)
    except Exception as exc:
        raise MetadataError(
            f"Unable to fetch metadata for {network}/{contract_group}: {exc}",
            cause=exc,
        ).with_context(network=network, contract_group=contract_group) from exc

    definitions = metadata.components.schemas
    children = []
    for key, contract in metadata.contracts.items():
        binding = OperationBinding(network=network, contract_group=contract_group, contract=contract.name)
        children.append((key, build_contract_routes(backend, contract, definitions, binding, mutating_tag=mutating_tag)))

    node = compose(children, kind="contract")
    logger.debug(
        "contract_group_routes_built",
        network=network,
        contract_group=contract_group,
        contracts=len(children),
        paths=node.path_count,
    )
    return node


async def build_network_routes(
    backend: LedgerBackend,
    network: str,
    *,
    mutating_tag: str = DEFAULT_MUTATING_TAG,
) -> RouteNode:
    children = []
    for contract_group in await backend.list_contract_groups(network):
        validate_identifier("contract group", contract_group)
        children.append(
            (contract_group, await build_contract_group_routes(backend, network, contract_group, mutating_tag=mutating_tag))
        )
    return compose(children, kind="contract group")


async def synthesize(backend: LedgerBackend, *, mutating_tag: str = DEFAULT_MUTATING_TAG) -> RouteNode:
    """Build the complete route tree and merged fragment, sequentially.

    Raises:
        MetadataError: Any metadata snapshot is unreachable or malformed.
        InvalidIdentifierError: An identifier cannot be used as a path segment.
    """
    children = []
    for network in await backend.list_groups():
        validate_identifier("network", network)
        children.append((network, await build_network_routes(backend, network, mutating_tag=mutating_tag)))

    root = compose(children, kind="network")
    logger.info(
        "route_tree_built",
        networks=len(children),
        paths=root.path_count,
        schemas=len(root.fragment["components"]["schemas"]),
    )
    return root


__all__ = [
    "RouteNode",
    "build_contract_group_routes",
    "build_contract_routes",
    "build_network_routes",
    "compose",
    "synthesize",
    "validate_identifier",
]
