"""
Shared test fixtures and helpers for the cert-decoder test suite.

Provides path resolution for the PEM fixture files and the DigiCert Global
Root CA, a widely published self-signed root used as the known vector.
"""

from __future__ import annotations

import ssl
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

FIXTURES_DIR = Path(__file__).parent / "fixtures"

DIGICERT_SERIAL = "08:3B:E0:56:90:42:46:B1:A1:75:6A:C9:59:91:C7:4A"
DIGICERT_CN = "DigiCert Global Root CA"


def fixture_path(filename: str) -> Path:
    """
    Resolve the absolute path to a test fixture file.

    Raises FileNotFoundError if the fixture does not exist.
    """
    path = FIXTURES_DIR / filename
    if not path.exists():
        raise FileNotFoundError(f"Test fixture not found: {path}")
    return path


@pytest.fixture()
def fixtures_dir() -> Path:
    """Return the absolute path to the test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture()
def digicert_pem() -> str:
    """PEM text of the DigiCert Global Root CA."""
    return fixture_path("digicert_global_root_ca.pem").read_text(encoding="ascii")


@pytest.fixture()
def digicert_der(digicert_pem: str) -> bytes:
    """DER bytes of the DigiCert Global Root CA, decoded by the standard library."""
    return ssl.PEM_cert_to_DER_cert(digicert_pem)


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """
    Restore structlog's default configuration after each test.

    The CLI and the ASGI lifespan bind the logger factory to the stream
    that is current at configuration time; capsys streams are closed
    once their test ends.
    """
    yield
    structlog.reset_defaults()
