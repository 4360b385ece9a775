"""Main application entry point for the SpaceAPI service.

This module defines the FastAPI application, configures logging, builds the
facility template once at import time and serves the SpaceAPI document.

Endpoints:
  - ``/v14`` and ``/v15``: the status document (both versions share one shape).
  - ``/healthz``: simple health check endpoint.

Every document request queries the upstream door state. When that fails the
response is a plain-text 500 rather than a document with a guessed state.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.responses import PlainTextResponse, Response

from .config import settings
from .errors import TranslationError
from .facility import load_template
from .models import StatusDocument
from .state_client import StateFetcher, state_source_from_settings
from .translator import render

logger = logging.getLogger("spaceapi")
logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

# Built once per process and only ever read afterwards.
_template = load_template(settings)
_state_source = state_source_from_settings(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close the upstream connection pool on shutdown."""
    yield
    _state_source.close()


app = FastAPI(title="SpaceAPI Status Service", lifespan=lifespan)


def get_template() -> StatusDocument:
    """Return the shared facility template."""
    return _template


def get_state_source() -> StateFetcher:
    """Return the configured upstream state source."""
    return _state_source


@app.exception_handler(TranslationError)
async def translation_error_handler(request: Request, exc: TranslationError) -> PlainTextResponse:
    # The state client has already logged the upstream failure.
    logger.info("Cannot serve %s: %s", request.url.path, exc)
    return PlainTextResponse(str(exc), status_code=500)


@app.get("/v14")
@app.get("/v15")
def spaceapi_document(
    template: StatusDocument = Depends(get_template),
    source: StateFetcher = Depends(get_state_source),
) -> Response:
    """Return the status document with the current open state."""
    body = render(template, source)
    return Response(
        content=body,
        media_type="application/json",
        headers={"Access-Control-Allow-Origin": "*"},
    )


@app.get("/healthz")
def healthz() -> Dict[str, Any]:
    """Health check endpoint for monitoring."""
    return {"ok": True, "time": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")}


if __name__ == "__main__":
    import uvicorn

    logger.info("Server starting on %s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
