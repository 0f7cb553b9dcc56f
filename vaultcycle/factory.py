"""Universal service factory.

Provides :func:`universal_factory`, the single entry-point for creating
vault management clients. The function dispatches to provider-specific
factories based on ``cloud_provider`` and returns the provider's
:class:`VaultManagerBlueprint` implementation.
"""

from vaultcycle.base import (
    VaultManagerBlueprint,
    existing_services,
    existing_cloud_providers,
)
from vaultcycle.base.config import validate_config
from vaultcycle.azure.factory import SERVICE_REGISTRY as AZURE_SERVICES


# Nested factory registry: cloud_provider -> service registry
_FACTORY_REGISTRY: dict[str, dict[str, type]] = {
    "azure": AZURE_SERVICES,
}


def universal_factory(
    service_name: existing_services,
    cloud_provider: existing_cloud_providers,
    config: dict,
) -> VaultManagerBlueprint:
    """
    Universal factory function to create service instances based on cloud provider and service name.
    Args:
        service_name: The name of the service (e.g., 'vault_manager').
        cloud_provider: The cloud provider (e.g., 'azure').
        config: Configuration dictionary to initialize the service instance.
    Returns:
        An instance of the requested service class.
    Raises:
        ValueError: If the cloud provider or service is not supported.
    """
    if cloud_provider not in _FACTORY_REGISTRY:
        raise ValueError(f"Unsupported cloud provider: {cloud_provider}")

    provider_services = _FACTORY_REGISTRY[cloud_provider]

    if service_name not in provider_services:
        raise ValueError(
            f"Unsupported service '{service_name}' for provider '{cloud_provider}'"
        )

    service_class = provider_services[service_name]
    configObj = validate_config(cloud_provider, config)
    return service_class(configObj)
