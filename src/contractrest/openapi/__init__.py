"""
Interface-document (OpenAPI) fragments: namespacing, merging, envelope.
"""

from contractrest.openapi.document import (
    OPENAPI_VERSION,
    build_document,
    empty_fragment,
    merge_fragments,
    schema_closure,
    write_document,
)
from contractrest.openapi.namespace import (
    SCHEMA_REF_PREFIX,
    Fragment,
    RefRewriter,
    collect_refs,
    namespace,
)

__all__ = [
    "OPENAPI_VERSION",
    "SCHEMA_REF_PREFIX",
    "Fragment",
    "RefRewriter",
    "build_document",
    "collect_refs",
    "empty_fragment",
    "merge_fragments",
    "namespace",
    "schema_closure",
    "write_document",
]
