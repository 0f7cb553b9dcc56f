"""Status-code assertions on caught provider failures."""

from __future__ import annotations

from azure.core.exceptions import HttpResponseError

from vaultcycle.base.exceptions import VaultManagerError
from vaultcycle.base.logger import vc_logger


def _status_of(exc: BaseException) -> int | None:
    if isinstance(exc, VaultManagerError):
        return exc.status_code
    return getattr(exc, "status_code", None)


def verify_expected_status(exc: BaseException, expected_status: int) -> None:
    """Swallow *exc* only if it is a provider error carrying *expected_status*.

    Structured provider errors are :class:`VaultManagerError` and the SDK's
    ``HttpResponseError``. Anything else, or a structured error with another
    status code, is logged and re-raised unchanged.

    Args:
        exc: The caught exception.
        expected_status: HTTP status code the caller anticipated (e.g. 404).

    Raises:
        BaseException: *exc* itself, when it does not match.
    """
    if not isinstance(exc, (VaultManagerError, HttpResponseError)):
        vc_logger.error(
            f"Unexpected exception encountered: {exc}",
            operation="verify_expected_status",
        )
        raise exc

    actual = _status_of(exc)
    if actual != expected_status:
        vc_logger.error(
            f"Unexpected provider error; expected status {expected_status}, actual {actual}",
            operation="verify_expected_status",
            status_code=actual,
        )
        raise exc

    vc_logger.debug(
        f"Provider error with expected status {expected_status} observed",
        operation="verify_expected_status",
        status_code=actual,
    )
