"""
contractrest - REST server synthesized from smart-contract metadata.

- contractrest.metadata: Metadata model and parser
- contractrest.openapi: Interface-document fragments
- contractrest.routing: Route-tree synthesis and operation dispatch
- contractrest.backend: Ledger backend protocol and implementations
- contractrest.api: FastAPI application factory
"""

__version__ = "0.1.0"
