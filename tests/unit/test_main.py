"""
Unit tests for the main module — structlog setup and the command line.

The CLI is driven through main(argv) with capsys; nothing is spawned.
"""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
import structlog

from cert_decoder import __version__
from cert_decoder.main import configure_structlog, main
from tests.conftest import DIGICERT_SERIAL, fixture_path
from tests.der_builder import build_certificate, build_tbs, to_pem


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("STRICT_TAGS", "EXTENSION_VALUE_LIMIT", "EXTENSION_VALUE_PREVIEW", "SIGNATURE_LINE_WIDTH"):
        monkeypatch.delenv(f"CERT_DECODER_{name}", raising=False)


class TestConfigureStructlog:
    def test_configure_structlog_sets_log_level(self) -> None:
        """
        GIVEN log_level="WARNING"
        WHEN configure_structlog is called
        THEN structlog is configured (no exception raised).
        """
        configure_structlog("WARNING")
        assert structlog.get_logger() is not None

    def test_configure_structlog_invalid_level_falls_back(self) -> None:
        configure_structlog("NONEXISTENT")
        assert structlog.is_configured()


# ─────────────────────── Text and JSON output ───────────────────────


class TestCommandLine:
    def test_text_report_from_file(self, capsys: pytest.CaptureFixture[str]) -> None:
        """
        GIVEN the DigiCert PEM file
        WHEN the CLI runs on it
        THEN the report goes to stdout and the exit code is 0.
        """
        exit_code = main([str(fixture_path("digicert_global_root_ca.pem"))])

        captured = capsys.readouterr()
        assert exit_code == 0
        assert captured.out.startswith("Certificate Information\n")
        assert DIGICERT_SERIAL in captured.out
        assert "decoder.decoded" in captured.err

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = main([str(fixture_path("digicert_global_root_ca.pem")), "--json"])

        data = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert data["serial_number"] == DIGICERT_SERIAL
        assert data["public_key"]["bits"] == 2160
        assert [ext["name"] for ext in data["extensions"]][:2] == ["Key Usage", "Basic Constraints"]

    def test_reads_stdin(
        self, digicert_pem: str, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(digicert_pem))
        assert main([]) == 0
        assert "DigiCert Global Root CA" in capsys.readouterr().out

    def test_version_flag(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


# ─────────────────────── Failures ───────────────────────


class TestCommandLineFailures:
    def test_invalid_pem_exits_1(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        pem_file = tmp_path / "broken.pem"
        pem_file.write_text("not a certificate", encoding="utf-8")

        exit_code = main([str(pem_file)])

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out == ""
        assert "Error parsing certificate: Invalid PEM format" in captured.err

    def test_missing_file_exits_1(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(tmp_path / "absent.pem")]) == 1
        assert "Cannot read" in capsys.readouterr().err

    def test_non_utf8_file_exits_1(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """
        GIVEN a file whose bytes are not valid UTF-8
        WHEN the CLI reads it
        THEN it reports the read error and exits 1 without a traceback.
        """
        pem_file = tmp_path / "latin1.pem"
        pem_file.write_bytes(b"-----BEGIN CERTIFICATE-----\n\xff\xfe\n-----END CERTIFICATE-----\n")

        assert main([str(pem_file)]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Cannot read" in captured.err

    def test_strict_flag_overrides_settings(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """
        GIVEN a certificate whose TBSCertificate carries a SET tag
        WHEN decoded with and without --strict
        THEN only the strict run fails.
        """
        der = build_certificate(b"\x31" + build_tbs(version=None)[1:])
        pem_file = tmp_path / "set-tbs.pem"
        pem_file.write_text(to_pem(der), encoding="ascii")

        assert main([str(pem_file)]) == 0
        assert main([str(pem_file), "--strict"]) == 1
        assert "Expected tag" in capsys.readouterr().err

    def test_configuration_error_exits_2(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("CERT_DECODER_EXTENSION_VALUE_LIMIT", "10")
        assert main([str(fixture_path("digicert_global_root_ca.pem"))]) == 2
        assert "FATAL: Configuration error" in capsys.readouterr().err
