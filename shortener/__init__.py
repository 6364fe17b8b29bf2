"""Core business logic for URL shortener."""

from .shortcode import ShortCodeGenerator
from .service import URLShortenerService
from .health import LivenessMonitor

__all__ = ["ShortCodeGenerator", "URLShortenerService", "LivenessMonitor"]
