"""
Value-typed lookup results.

Lookups whose failure is an expected outcome (a vault that should be gone
after a purge) return one of :class:`Ok`, :class:`NotFound` or
:class:`OtherError` so callers branch on the value instead of catching.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Callable, Union

from pydantic import BaseModel, ConfigDict

from vaultcycle.base.exceptions import (
    UnexpectedResultError,
    VaultManagerError,
)


class Ok(BaseModel):
    """The call succeeded and produced *value*."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Any


class NotFound(BaseModel):
    """The provider reported the resource as not found (404)."""

    model_config = ConfigDict(frozen=True)

    message: str = ""

    @property
    def code(self) -> int:
        return int(HTTPStatus.NOT_FOUND)


class OtherError(BaseModel):
    """The provider returned a structured error other than not found."""

    model_config = ConfigDict(frozen=True)

    code: int | None = None
    message: str = ""

    def to_exception(self) -> VaultManagerError:
        return VaultManagerError(self.message, status_code=self.code)


Result = Union[Ok, NotFound, OtherError]


def capture(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Result:
    """Run *fn* and fold provider errors into a :data:`Result`.

    Only :class:`VaultManagerError` is folded; any other exception propagates.
    """
    try:
        return Ok(value=fn(*args, **kwargs))
    except VaultManagerError as exc:
        if exc.status_code == HTTPStatus.NOT_FOUND:
            return NotFound(message=exc.message)
        return OtherError(code=exc.status_code, message=exc.message)


def expect_status(result: Result, expected_status: int, what: str = "resource") -> None:
    """Check that *result* is a failure with *expected_status*.

    Raises:
        UnexpectedResultError: If *result* is :class:`Ok` or carries another code.
        VaultManagerError: Rebuilt from an :class:`OtherError` whose code does
            not match.
    """
    if isinstance(result, Ok):
        raise UnexpectedResultError(
            f"Expected {what} lookup to fail with {expected_status}, but it succeeded"
        )
    if result.code == expected_status:
        return
    if isinstance(result, OtherError):
        raise result.to_exception()
    raise UnexpectedResultError(
        f"Expected {what} lookup to fail with {expected_status}, got {result.code}"
    )


__all__ = ["Ok", "NotFound", "OtherError", "Result", "capture", "expect_status"]
