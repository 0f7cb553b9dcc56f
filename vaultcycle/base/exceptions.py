"""
Vaultcycle exception hierarchy.

Provider failures surface as :class:`VaultManagerError`, which carries the
HTTP status code returned by the management API, with sub-exceptions for the
not-found cases the lifecycle scenarios assert on.
"""

from __future__ import annotations

from http import HTTPStatus


# ── Base ──────────────────────────────────────────────────────────────
class VaultcycleError(Exception):
    """Root exception for all Vaultcycle errors."""


# ── Vault management ──────────────────────────────────────────────────
class VaultManagerError(VaultcycleError):
    """Structured error returned by the management API.

    Attributes:
        status_code: HTTP status code reported by the provider, or ``None``
            when the failure never produced a response.
        message: Provider error message.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"({self.status_code}) {self.message}"


class VaultNotFoundError(VaultManagerError):
    """Live vault not found."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=int(HTTPStatus.NOT_FOUND))


class DeletedVaultNotFoundError(VaultManagerError):
    """Deleted vault record not found."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=int(HTTPStatus.NOT_FOUND))


class ResourceGroupError(VaultManagerError):
    """Resource group could not be created or updated."""


class OperationTimeoutError(VaultcycleError):
    """A long-running operation or readiness poll did not finish in time."""


# ── Scenarios ─────────────────────────────────────────────────────────
class ScenarioError(VaultcycleError):
    """A lifecycle scenario observed a post-condition it did not expect."""


class UnexpectedResultError(ScenarioError):
    """A lookup succeeded (or failed) where the opposite was expected."""
