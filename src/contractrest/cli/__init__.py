"""contractrest command-line interface."""

from contractrest.cli.app import app

__all__ = ["app"]
