"""
Result monad for the decode boundary.

The decoding core raises CertificateDecodeError. Callers that want a value
instead of an exception go through a Result: Success carries the decoded
value, Failure carries a FailureDescription, and every combinator on a
Failure hands the same failure straight back.

    Result.from_computation(lambda: decode(pem))
        .map(lambda record: record.subject_common_name)
        .get_or_else("<unknown>")
"""

from __future__ import annotations

from typing import Any, Callable, Generic, NoReturn, TypeVar

from cert_decoder.domain.errors import ErrorKind
from cert_decoder.railway.failure import FailureDescription

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")


class Result(Generic[T]):
    """
    Base of Success and Failure; never instantiated directly.

        >>> Result.success(3).map(lambda v: v + 1).value()
        4
    """

    __slots__ = ()

    def is_success(self) -> bool:
        return isinstance(self, Success)

    def is_failure(self) -> bool:
        return isinstance(self, Failure)

    def value(self) -> T:
        """The success value; ValueError on a Failure."""
        raise NotImplementedError

    def error(self) -> FailureDescription:
        """The failure description; ValueError on a Success."""
        raise NotImplementedError

    def either(
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[FailureDescription], R],
    ) -> R:
        raise NotImplementedError

    def map(self, mapper: Callable[[T], U]) -> Result[U]:
        return self.flat_map(lambda v: Success(mapper(v)))

    def flat_map(self, mapper: Callable[[T], Result[U]]) -> Result[U]:
        raise NotImplementedError

    def ensure(self, predicate: Callable[[T], bool], kind: ErrorKind, message: str) -> Result[T]:
        """Turn a Success into a Failure of `kind` when `predicate` rejects the value."""
        return self.flat_map(lambda v: self if predicate(v) else Result.failure(kind, message))

    def peek(self, action: Callable[[T], Any]) -> Result[T]:
        """Run `action` on a success value (logging); the Result is returned unchanged."""
        return self

    def peek_failure(self, action: Callable[[FailureDescription], Any]) -> Result[T]:
        return self

    def get_or_else(self, default: T) -> T:
        return self.either(lambda v: v, lambda _: default)

    @staticmethod
    def success(value: T) -> Result[T]:
        return Success(value)

    @staticmethod
    def failure(
        kind: ErrorKind,
        message: str,
        exception: BaseException | None = None,
    ) -> Result[T]:
        return Failure(FailureDescription(kind=kind, message=message, exception=exception))

    @staticmethod
    def from_computation(computation: Callable[[], T], error_message: str = "") -> Result[T]:
        """
        Run `computation` and capture what it raises.

        A CertificateDecodeError keeps its kind and message; any other
        exception becomes INTERNAL_ERROR with `error_message`.
        """
        try:
            return Success(computation())
        except Exception as e:
            return Failure(FailureDescription.from_exception(e, error_message))

    def __bool__(self) -> bool:
        return self.is_success()


class Success(Result[T]):
    """A decoded value."""

    __slots__ = ("_value",)
    __match_args__ = ("_value",)

    def __init__(self, value: T) -> None:
        if value is None:
            raise TypeError("Success value must not be None")
        self._value = value

    def value(self) -> T:
        return self._value

    def error(self) -> NoReturn:
        raise ValueError(f"Cannot get error from a Success: {self._value!r}")

    def either(
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[FailureDescription], R],
    ) -> R:
        return on_success(self._value)

    def flat_map(self, mapper: Callable[[T], Result[U]]) -> Result[U]:
        return mapper(self._value)

    def peek(self, action: Callable[[T], Any]) -> Result[T]:
        action(self._value)
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Success):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash((Success, self._value))

    def __repr__(self) -> str:
        return f"Success({self._value!r})"


class Failure(Result[T]):
    """A decode that did not produce a value."""

    __slots__ = ("_error",)
    __match_args__ = ("_error",)

    def __init__(self, error: FailureDescription) -> None:
        if error is None:
            raise TypeError("Failure error must not be None")
        self._error = error

    def value(self) -> NoReturn:
        raise ValueError(f"Cannot get value from a Failure: {self._error.message}")

    def error(self) -> FailureDescription:
        return self._error

    def either(
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[FailureDescription], R],
    ) -> R:
        return on_failure(self._error)

    def flat_map(self, mapper: Callable[[T], Result[U]]) -> Result[U]:
        return Failure(self._error)

    def peek_failure(self, action: Callable[[FailureDescription], Any]) -> Result[T]:
        action(self._error)
        return self

    def __eq__(self, other: object) -> bool:
        """Failures compare by kind and message; the timestamp is ignored."""
        if not isinstance(other, Failure):
            return NotImplemented
        return (self._error.kind, self._error.message) == (other._error.kind, other._error.message)

    def __hash__(self) -> int:
        return hash((Failure, self._error.kind, self._error.message))

    def __repr__(self) -> str:
        return f"Failure({self._error.kind.value}: {self._error.message!r})"
