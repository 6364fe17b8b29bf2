"""Diagnostic application served on its own port."""

from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from shortener.health import LivenessMonitor


def create_diagnostic_app(monitor: LivenessMonitor) -> FastAPI:
    """Create the app exposing /healthz and /readyz.

    Args:
        monitor: Liveness monitor backing both probes

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener diagnostics",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.monitor = monitor

    async def probe(request: Request):
        if not request.app.state.monitor.alive:
            return PlainTextResponse(
                HTTPStatus.INTERNAL_SERVER_ERROR.phrase,
                status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            )
        return PlainTextResponse("ok")

    app.add_api_route("/healthz", probe, methods=["GET"])
    app.add_api_route("/readyz", probe, methods=["GET"])

    return app
