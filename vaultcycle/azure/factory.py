"""Azure service factory.

Maps service names to their Azure SDK implementations.
``SERVICE_REGISTRY`` is consumed by :func:`vaultcycle.factory.universal_factory`.
"""

from vaultcycle.azure.vault_manager import VaultManager


# Service registry for Azure
SERVICE_REGISTRY: dict[str, type] = {
    "vault_manager": VaultManager,
}
