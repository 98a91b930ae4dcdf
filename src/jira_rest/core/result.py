"""
Result - Tagged success/failure values.

Expected failures (a dropped connection, an unexpected status code) are
returned as ``Err`` instead of being raised, so callers branch on the
variant rather than on a boolean-or-object return.

Usage:
    result = client.execute("issuetype")
    if result.is_ok():
        response = result.unwrap()
    else:
        failure = result.unwrap_err()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Generic, TypeVar


T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


class ResultError(Exception):
    """Raised when a Result is unwrapped as the wrong variant."""


class Result(ABC, Generic[T, E]):
    """Base class for Ok and Err."""

    __slots__ = ()

    @abstractmethod
    def is_ok(self) -> bool:
        ...

    def is_err(self) -> bool:
        return not self.is_ok()

    @abstractmethod
    def ok(self) -> T | None:
        """Return the value, or None for Err."""
        ...

    @abstractmethod
    def err(self) -> E | None:
        """Return the error, or None for Ok."""
        ...

    @abstractmethod
    def unwrap(self) -> T:
        ...

    @abstractmethod
    def unwrap_err(self) -> E:
        ...

    def unwrap_or(self, default: T) -> T:
        return self.ok() if self.is_ok() else default  # type: ignore[return-value]

    def expect(self, message: str) -> T:
        if self.is_ok():
            return self.unwrap()
        raise ResultError(f"{message}: {self.err()!r}")

    def map(self, fn: Callable[[T], U]) -> Result[U, E]:
        """Transform the Ok value, leaving Err untouched."""
        if self.is_ok():
            return Ok(fn(self.unwrap()))
        return self  # type: ignore[return-value]

    def and_then(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Chain another fallible step; short-circuits on Err."""
        if self.is_ok():
            return fn(self.unwrap())
        return self  # type: ignore[return-value]

    def __bool__(self) -> bool:
        return self.is_ok()


class Ok(Result[T, Any]):
    """Successful result holding a value."""

    __slots__ = ("_value",)

    def __init__(self, value: T):
        self._value = value

    def is_ok(self) -> bool:
        return True

    def ok(self) -> T:
        return self._value

    def err(self) -> None:
        return None

    def unwrap(self) -> T:
        return self._value

    def unwrap_err(self) -> Any:
        raise ResultError(f"Called unwrap_err on Ok: {self._value!r}")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Ok) and other._value == self._value

    def __hash__(self) -> int:
        return hash(("Ok", self._value))

    def __repr__(self) -> str:
        return f"Ok({self._value!r})"


class Err(Result[Any, E]):
    """Failed result holding an error."""

    __slots__ = ("_error",)

    def __init__(self, error: E):
        self._error = error

    def is_ok(self) -> bool:
        return False

    def ok(self) -> None:
        return None

    def err(self) -> E:
        return self._error

    def unwrap(self) -> Any:
        raise ResultError(f"Called unwrap on Err: {self._error!r}")

    def unwrap_err(self) -> E:
        return self._error

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Err) and other._error == self._error

    def __hash__(self) -> int:
        return hash(("Err", self._error))

    def __repr__(self) -> str:
        return f"Err({self._error!r})"
