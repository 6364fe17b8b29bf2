"""Web layer for URL shortener."""

from .app_factory import create_app
from .diagnostics import create_diagnostic_app

__all__ = ["create_app", "create_diagnostic_app"]
