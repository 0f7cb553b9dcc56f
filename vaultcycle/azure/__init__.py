"""Azure provider implementations."""

from .vault_manager import VaultManager

__all__ = [
    "VaultManager",
]
