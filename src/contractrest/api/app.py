"""
FastAPI application factory.

``create_app()`` wires middleware, error handlers, the health router and a
lifespan that performs the boot-time synthesis pass: connect the backend,
walk its metadata into a route tree, mount the tree and publish the merged
interface document.  uvicorn does not accept traffic until the lifespan
startup completes, so requests never see a partially built tree.

Manifesto:
    The app factory is the single composition root.  The route tree and the
    document are built once, stored on ``app.state`` and never mutated.

Tags:
    contractrest, api, app-factory, composition-root, FastAPI

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contractrest.api.deps import get_settings
from contractrest.api.middleware.errors import unhandled_exception_handler
from contractrest.api.middleware.request_id import RequestIDMiddleware
from contractrest.api.routers import health
from contractrest.api.settings import ContractRestSettings
from contractrest.backend.factory import create_backend
from contractrest.backend.protocol import LedgerBackend
from contractrest.core.logging import get_logger
from contractrest.openapi.document import build_document, write_document
from contractrest.routing.synthesizer import RouteNode, synthesize

log = get_logger("contractrest.api")


def mount_route_tree(app: FastAPI, tree: RouteNode, document: dict[str, Any]) -> None:
    """Attach the synthesized tree and publish its document."""
    app.include_router(tree.router)
    app.state.route_tree = tree
    app.state.document = document
    # FastAPI serves ``openapi_schema`` verbatim at ``openapi_url`` and in the docs UI.
    app.openapi_schema = document


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan — boot-time synthesis / backend shutdown."""
    settings: ContractRestSettings = app.state.settings
    backend: LedgerBackend = app.state.backend

    log.info("contractrest_starting", version=app.version)
    await backend.connect()
    try:
        tree = await synthesize(backend, mutating_tag=settings.mutating_tag)
        document = build_document(tree.fragment, title=settings.api_title, version=settings.api_version)
        mount_route_tree(app, tree, document)

        if settings.output_file:
            path = write_document(document, settings.output_file)
            log.info("document_written", path=str(path))

        yield
    finally:
        await backend.close()
        log.info("contractrest_shutting_down")


def create_app(
    *,
    settings: ContractRestSettings | None = None,
    backend: LedgerBackend | None = None,
) -> FastAPI:
    """Build and return a fully-configured FastAPI application.

    Parameters
    ----------
    settings : ContractRestSettings | None
        Override settings (useful for testing).  When ``None`` the cached
        singleton from :func:`get_settings` is used.
    backend : LedgerBackend | None
        Ledger backend to synthesize from.  When ``None`` one is created
        from *settings* (see :func:`~contractrest.backend.factory.create_backend`).
    """
    if settings is None:
        settings = get_settings()
    if backend is None:
        backend = create_backend(settings)

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url=settings.docs_url,
        redoc_url=None,
        openapi_url=settings.document_url,
    )

    app.state.settings = settings
    app.state.backend = backend
    app.state.route_tree = None
    app.state.document = None

    app.dependency_overrides[get_settings] = lambda: settings

    # ── Middleware (outermost → innermost) ────────────────────────────
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Exception handlers ───────────────────────────────────────────
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Routers ──────────────────────────────────────────────────────
    app.include_router(health.router)

    return app
