"""
Fragment merging and the top-level interface document envelope.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from contractrest.openapi.namespace import Fragment, collect_refs

OPENAPI_VERSION = "3.0.0"


def empty_fragment() -> Fragment:
    return {"paths": {}, "components": {"schemas": {}}}


def merge_fragments(fragments: Iterable[Mapping[str, Any]]) -> Fragment:
    """Merge path maps and schema maps; later fragments win on key collision."""
    merged = empty_fragment()
    for fragment in fragments:
        merged["paths"].update(fragment.get("paths") or {})
        components = fragment.get("components") or {}
        merged["components"]["schemas"].update(components.get("schemas") or {})
    return merged


def schema_closure(roots: Iterable[Any], definitions: Mapping[str, Any]) -> dict[str, Any]:
    """Return the definitions reachable from *roots* through refs.

    Refs naming unknown definitions are ignored; the result keeps the
    order of *definitions*.  Definitions no root reaches are dropped, so
    a contract group's unreferenced component schemas are not published.
    """
    reachable: set[str] = set()
    pending = set()
    for root in roots:
        pending |= collect_refs(root)

    while pending:
        name = pending.pop()
        if name in reachable or name not in definitions:
            continue
        reachable.add(name)
        pending |= collect_refs(definitions[name]) - reachable

    return {name: schema for name, schema in definitions.items() if name in reachable}


def build_document(fragment: Mapping[str, Any], *, title: str, version: str) -> dict[str, Any]:
    """Wrap the root fragment in an OpenAPI envelope."""
    components = fragment.get("components") or {}
    return {
        "openapi": OPENAPI_VERSION,
        "info": {"title": title, "version": version},
        "paths": dict(fragment.get("paths") or {}),
        "components": {"schemas": dict(components.get("schemas") or {})},
    }


def write_document(document: Mapping[str, Any], path: str | Path) -> Path:
    """Write *document* as indented JSON, overwriting any existing file."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
    return target
