"""
pytest helpers for Result values.

    result = PemCertificateDecoder().decode("   ")
    ResultAssertions.assert_failure(result, ErrorKind.EMPTY_INPUT)
"""

from __future__ import annotations

from typing import TypeVar

from cert_decoder.domain.errors import ErrorKind
from cert_decoder.railway.failure import FailureDescription
from cert_decoder.railway.result import Result

T = TypeVar("T")


def _describe(result: Result[T]) -> str:
    return result.either(lambda v: f"Success({v!r})", lambda e: f"Failure({e.kind.value}: {e.message!r})")


class ResultAssertions:
    @staticmethod
    def assert_success(result: Result[T], message: str = "") -> T:
        """Fail the test unless `result` is a Success; return its value."""
        assert result.is_success(), f"expected Success, got {_describe(result)} {message}".rstrip()
        return result.value()

    @staticmethod
    def assert_failure(
        result: Result[T],
        expected_kind: ErrorKind | None = None,
        message: str = "",
    ) -> FailureDescription:
        """Fail the test unless `result` is a Failure (of `expected_kind`, if given)."""
        assert result.is_failure(), f"expected Failure, got {_describe(result)} {message}".rstrip()
        error = result.error()
        if expected_kind is not None:
            assert error.kind is expected_kind, (
                f"expected {expected_kind.value}, got {_describe(result)} {message}".rstrip()
            )
        return error

    @staticmethod
    def assert_failure_message_contains(result: Result[T], substring: str) -> None:
        """Case-insensitive substring check on the failure message."""
        error = ResultAssertions.assert_failure(result)
        assert substring.lower() in error.message.lower(), (
            f"{substring!r} not found in failure message {error.message!r}"
        )
