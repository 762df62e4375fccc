"""
Reference-rewriting namespacer for interface-document fragments.

Each level of the route tree produces a fragment (``paths`` plus
``components.schemas``).  Before a parent merges its children's fragments,
every child fragment is namespaced under the child's identifier:

- path ``/op`` under prefix ``FabCar`` becomes ``/FabCar/op``
- definition ``Car`` becomes ``FabCar.Car``
- every ``{"$ref": "#/components/schemas/Car"}`` inside the fragment becomes
  ``{"$ref": "#/components/schemas/FabCar.Car"}``

Refs to definitions not owned by the fragment are left untouched.

Manifesto:
    Ref rewriting is a typed recursive descent over the schema shapes
    (ref / object / array / scalar).  A ``$ref`` value is a leaf of the
    visitor, never descended into, and the input tree is never mutated:
    every visit returns a fresh structure.

Guardrails:
    ❌ DON'T: Namespace the same fragment twice at one level (double prefix)
    ✅ DO: Namespace exactly once per tree level, then merge

Tags:
    openapi, swagger, namespacing, json-schema, visitor, contractrest

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

REF_KEY = "$ref"
SCHEMA_REF_PREFIX = "#/components/schemas/"

Fragment = dict[str, Any]


class SchemaVisitor:
    """Recursive-descent visitor over JSON-Schema-shaped trees.

    Dispatches on node shape; the default handlers rebuild the tree
    unchanged.  Subclasses override :meth:`visit_ref` to act on references.
    """

    def visit(self, node: Any) -> Any:
        match node:
            case {"$ref": str() as target}:
                return self.visit_ref(node, target)
            case Mapping():
                return self.visit_object(node)
            case list() | tuple():
                return self.visit_array(node)
            case _:
                return node

    def visit_ref(self, node: Mapping[str, Any], target: str) -> Any:
        return {key: (self.ref_target(target) if key == REF_KEY else self.visit(value)) for key, value in node.items()}

    def visit_object(self, node: Mapping[str, Any]) -> Any:
        return {key: self.visit(value) for key, value in node.items()}

    def visit_array(self, node: list[Any] | tuple[Any, ...]) -> Any:
        return [self.visit(item) for item in node]

    def ref_target(self, target: str) -> str:
        return target


class RefRewriter(SchemaVisitor):
    """Repoints refs to renamed definitions; all other refs are kept byte-identical."""

    def __init__(self, renames: Mapping[str, str]):
        self._targets = {SCHEMA_REF_PREFIX + old: SCHEMA_REF_PREFIX + new for old, new in renames.items()}

    def ref_target(self, target: str) -> str:
        return self._targets.get(target, target)


class RefCollector(SchemaVisitor):
    """Records the definition names a tree references."""

    def __init__(self) -> None:
        self.names: set[str] = set()

    def ref_target(self, target: str) -> str:
        if target.startswith(SCHEMA_REF_PREFIX):
            self.names.add(target[len(SCHEMA_REF_PREFIX):])
        return target


def collect_refs(node: Any) -> set[str]:
    """Return the names of all ``#/components/schemas/<name>`` refs in *node*."""
    collector = RefCollector()
    collector.visit(node)
    return collector.names


def namespace(prefix: str, fragment: Mapping[str, Any]) -> Fragment:
    """Namespace a fragment under *prefix* so it can merge into a parent.

    Absent ``paths`` / ``components`` keys stay absent in the output.
    Path keys are prefixed verbatim (``"/" + prefix + key``); callers are
    expected to have rejected identifiers containing ``/``.
    """
    result: Fragment = {}

    if "paths" in fragment:
        result["paths"] = {f"/{prefix}{path}": entry for path, entry in fragment["paths"].items()}

    renames: dict[str, str] = {}
    if "components" in fragment:
        schemas = fragment["components"].get("schemas") or {}
        renames = {name: f"{prefix}.{name}" for name in schemas}
        result["components"] = {"schemas": {renames[name]: schema for name, schema in schemas.items()}}

    return RefRewriter(renames).visit(result)


__all__ = [
    "REF_KEY",
    "SCHEMA_REF_PREFIX",
    "Fragment",
    "RefCollector",
    "RefRewriter",
    "SchemaVisitor",
    "collect_refs",
    "namespace",
]
