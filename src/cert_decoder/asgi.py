"""
FastAPI + Uvicorn ASGI application exposing the decoder over HTTP.

Endpoints:
  POST /decode  {"pem": "..."} → decoded record + validity status
  GET  /health  liveness probe
  GET  /info    application metadata

Entry point: uvicorn cert_decoder.asgi:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from cert_decoder import __version__
from cert_decoder.config import DecoderSettings
from cert_decoder.decoder import PemCertificateDecoder
from cert_decoder.domain.ports import CertificateDecoder
from cert_decoder.main import configure_structlog

# ─────────────────────── Global State ───────────────────────
# Set during startup; tests replace the decoder with a fake.

_settings: DecoderSettings | None = None
_decoder: CertificateDecoder | None = None
log = structlog.get_logger()


class DecodeRequest(BaseModel):
    pem: str = Field(description="PEM-armored X.509 certificate")


def _get_decoder() -> CertificateDecoder:
    global _decoder, _settings
    if _decoder is None:
        _settings = _settings or DecoderSettings()
        _decoder = PemCertificateDecoder(strict=_settings.strict_tags)
    return _decoder


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load settings, configure logging and build the decoder once at startup."""
    global _settings

    try:
        _settings = DecoderSettings()
    except Exception as e:
        log.error("asgi.startup_error", error=f"Configuration error: {e}")
        raise

    configure_structlog(_settings.log_level)
    decoder = _get_decoder()
    log.info("asgi.startup_complete", version=__version__, strict_tags=_settings.strict_tags, decoder=type(decoder).__name__)

    yield

    log.info("asgi.shutdown_complete")


# ─────────────────────── FastAPI Application ───────────────────────

app = FastAPI(
    title="cert-decoder",
    description="X.509 certificate decoder — PEM in, structured certificate out",
    version=__version__,
    lifespan=lifespan,
)


@app.post("/decode")
async def decode(request: DecodeRequest) -> JSONResponse:
    """
    Decode one certificate.

    Returns 200 with the record and its validity status on success.
    Returns 422 with the error kind and message when decoding fails.
    """
    result = _get_decoder().decode(request.pem)

    if result.is_failure():
        failure = result.error()
        log.info("asgi.decode_failed", kind=failure.kind.value)
        return JSONResponse(
            status_code=422,
            content={
                "status": "failed",
                "error_code": failure.kind.value,
                "message": failure.message,
            },
        )

    record = result.value()
    report = record.validity.classify()
    body = record.to_dict()
    body["validity"]["status"] = report.status.value
    body["validity"]["days_remaining"] = report.days_remaining
    return JSONResponse(status_code=200, content={"status": "success", "certificate": body})


@app.get("/health")
async def health() -> JSONResponse:
    return JSONResponse(status_code=200, content={"status": "healthy"})


@app.get("/info")
async def info() -> dict[str, Any]:
    """Application metadata, used for debugging."""
    decoder = _get_decoder()
    return {
        "name": "cert-decoder",
        "version": __version__,
        "strict_tags": getattr(decoder, "strict", None),
    }


if __name__ == "__main__":
    # For local testing: python -m uvicorn cert_decoder.asgi:app --reload
    import uvicorn

    uvicorn.run(
        "cert_decoder.asgi:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
        log_level="info",
    )
