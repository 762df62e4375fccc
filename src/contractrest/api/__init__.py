"""
REST API layer for contractrest.

Provides a FastAPI application factory whose operation routes are
synthesized at startup from the ledger backend's metadata.

Quick start::

    from contractrest.api import create_app

    app = create_app()  # ready for uvicorn

Tags:
    contractrest, api, REST, FastAPI, transport-layer

Doc-Types:
    api-reference
"""

from contractrest.api.app import create_app

__all__ = ["create_app"]
