"""
What a Failure carries: the ErrorKind, a readable message, the exception
behind it (if any) and when it was recorded.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime

from cert_decoder.domain.errors import CertificateDecodeError, ErrorKind


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    >>> FailureDescription(ErrorKind.EMPTY_INPUT, "Please enter a PEM encoded certificate").kind
    <ErrorKind.EMPTY_INPUT: 'EMPTY_INPUT'>
    """

    kind: ErrorKind
    message: str
    exception: BaseException | None = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_exception(cls, exception: BaseException, message: str = "") -> FailureDescription:
        """
        Describe a raised exception. Decode errors keep their own kind and
        message; anything else is INTERNAL_ERROR.
        """
        if isinstance(exception, CertificateDecodeError):
            return cls(exception.kind, exception.message, exception)
        return cls(ErrorKind.INTERNAL_ERROR, message or str(exception), exception)

    @property
    def offset(self) -> int | None:
        """Buffer offset of a decode error, when the decoder reported one."""
        if isinstance(self.exception, CertificateDecodeError):
            return self.exception.offset
        return None

    def full_stack_trace(self) -> str:
        if self.exception is None:
            return self.message
        formatted = traceback.format_exception(self.exception)
        return self.message + "\n" + "".join(formatted)
