"""
FastAPI dependency injection — settings singleton and boot-time state.

Usage in routers::

    from contractrest.api.deps import Settings

    @router.get("/things")
    def list_things(settings: Settings):
        ...
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from contractrest.api.settings import ContractRestSettings
from contractrest.routing.synthesizer import RouteNode

# ── Settings (singleton) ─────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_settings() -> ContractRestSettings:
    """Cached settings — loaded once per process."""
    return ContractRestSettings()


# ── Boot-time state (read-only after startup) ───────────────────────────


def get_route_tree(request: Request) -> RouteNode | None:
    """The synthesized route tree, or ``None`` while startup is in progress."""
    return getattr(request.app.state, "route_tree", None)


# ── Convenience type aliases ─────────────────────────────────────────────

Settings = Annotated[ContractRestSettings, Depends(get_settings)]
RouteTree = Annotated[RouteNode | None, Depends(get_route_tree)]
