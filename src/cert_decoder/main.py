"""
Command-line entry point — decode a PEM certificate and print a report.

Composition root for the CLI: loads settings, configures structlog, builds
the PemCertificateDecoder and renders its Result.

    cert-decoder cert.pem
    cert-decoder --json < cert.pem
    CERT_DECODER_STRICT_TAGS=true cert-decoder cert.pem
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

import structlog

from cert_decoder import __version__
from cert_decoder.config import DecoderSettings
from cert_decoder.decoder import PemCertificateDecoder
from cert_decoder.report import render_text


def configure_structlog(log_level: str = "INFO") -> None:
    """
    Configure structlog for structured logging to stderr.

    stdout carries the report, so log lines never mix with it.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cert-decoder",
        description="Decode a PEM-encoded X.509 certificate.",
    )
    parser.add_argument("file", nargs="?", help="PEM file to read (default: stdin)")
    parser.add_argument("--json", action="store_true", help="print the decoded record as JSON")
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="verify every required DER tag (overrides CERT_DECODER_STRICT_TAGS)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _read_input(path: str | None) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as handle:
        return handle.read()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI. Returns the process exit code."""
    args = _build_parser().parse_args(argv)

    try:
        settings = DecoderSettings()
    except Exception as e:
        print(f"FATAL: Configuration error — {e}", file=sys.stderr)  # noqa: T201
        return 2

    configure_structlog(settings.log_level)
    log = structlog.get_logger()

    try:
        pem_text = _read_input(args.file)
    except (OSError, UnicodeDecodeError) as e:
        log.error("cli.read_failed", file=args.file, error=str(e))
        print(f"Cannot read {args.file}: {e}", file=sys.stderr)  # noqa: T201
        return 1

    strict = settings.strict_tags if args.strict is None else args.strict
    result = PemCertificateDecoder(strict=strict).decode(pem_text)

    if result.is_failure():
        failure = result.error()
        print(f"Error parsing certificate: {failure.message}", file=sys.stderr)  # noqa: T201
        return 1

    record = result.value()
    if args.json:
        output = json.dumps(record.to_dict(), indent=2, ensure_ascii=False) + "\n"
    else:
        output = render_text(record, settings=settings)
    sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
