"""Abstract service blueprint and core utilities.

Every provider implementation inherits from the blueprint defined here.
Import it to type-hint your own code or to create custom providers.
"""

from .vault_manager import VaultManagerBlueprint
from .supported_services import existing_services, existing_cloud_providers, existing_scenarios


__all__ = [
    "VaultManagerBlueprint",
    "existing_services",
    "existing_cloud_providers",
    "existing_scenarios",
]
