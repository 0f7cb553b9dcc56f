"""
Pydantic configuration models for the vault lifecycle runner.

Validates provider and scenario configs at initialization time instead of
silently passing bad values to SDK clients. Both models are built once and
passed explicitly to the objects that need them.
"""

from __future__ import annotations

import os
import re
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Key Vault names: 3-24 chars, letters/digits/hyphens, start with a letter,
# end with a letter or digit, no consecutive hyphens.
_VAULT_NAME_RE = re.compile(r"^[A-Za-z](?!.*--)[A-Za-z0-9-]{1,22}[A-Za-z0-9]$")


class AzureConfig(BaseModel):
    """Configuration for the Azure management plane.

    Credentials are resolved in order:
    1. Explicit values passed in the config dict.
    2. Environment variables (AZURE_SUBSCRIPTION_ID, AZURE_TENANT_ID,
       AZURE_CLIENT_ID, AZURE_CLIENT_SECRET, AZURE_OBJECT_ID).
    3. If no client secret is set, ``DefaultAzureCredential`` is used so the
       SDK can fall back to its own chain (managed identity, az login, etc.).
    """

    model_config = ConfigDict(extra="forbid")

    subscription_id: str | None = Field(default=None, description="Azure subscription ID")
    tenant_id: str | None = Field(default=None, description="Azure AD tenant ID")
    client_id: str | None = Field(default=None, description="Service principal application ID")
    client_secret: str | None = Field(default=None, description="Service principal secret")
    object_id: str | None = Field(
        default=None, description="Principal object ID granted access to created vaults"
    )
    operation_timeout: float = Field(
        default=300.0, gt=0, description="Seconds to wait for a long-running operation"
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing credentials."""
        env_map = {
            "subscription_id": "AZURE_SUBSCRIPTION_ID",
            "tenant_id": "AZURE_TENANT_ID",
            "client_id": "AZURE_CLIENT_ID",
            "client_secret": "AZURE_CLIENT_SECRET",
            "object_id": "AZURE_OBJECT_ID",
        }
        for field, env_var in env_map.items():
            if not values.get(field):
                values[field] = os.environ.get(env_var)
        return values

    @model_validator(mode="after")
    def validate_subscription_and_tenant(self) -> AzureConfig:
        """Ensure the identifiers every vault call needs are present."""
        if self.subscription_id is None:
            raise ValueError(
                "Azure subscription_id is required. Set it explicitly or via "
                "the AZURE_SUBSCRIPTION_ID environment variable."
            )
        if self.tenant_id is None:
            raise ValueError(
                "Azure tenant_id is required. Set it explicitly or via "
                "the AZURE_TENANT_ID environment variable."
            )
        if bool(self.client_id) != bool(self.client_secret):
            raise ValueError("client_id and client_secret must be set together.")
        return self


class ScenarioConfig(BaseModel):
    """Names, region and timing for the lifecycle scenarios.

    ``resource_group_name`` and ``vault_name`` fall back to the
    VAULTCYCLE_RESOURCE_GROUP and VAULTCYCLE_VAULT_NAME environment variables,
    ``location`` to VAULTCYCLE_LOCATION.
    """

    model_config = ConfigDict(extra="forbid")

    resource_group_name: str = Field(description="Resource group that holds the vault")
    vault_name: str = Field(description="Globally unique key vault name")
    location: str = Field(default="eastus", description="Azure region")
    sku_name: str = Field(default="standard", description="Vault SKU ('standard' or 'premium')")
    settle_timeout: float = Field(
        default=120.0, gt=0, description="Seconds to wait for a new vault to become readable"
    )
    settle_initial_delay: float = Field(default=2.0, ge=0)
    settle_max_delay: float = Field(default=15.0, ge=0)
    settle_backoff_factor: float = Field(default=2.0, ge=1)
    verify_repeat_purge: bool = Field(
        default=True, description="Check that purging an already purged vault reports not found"
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing names."""
        env_map = {
            "resource_group_name": "VAULTCYCLE_RESOURCE_GROUP",
            "vault_name": "VAULTCYCLE_VAULT_NAME",
            "location": "VAULTCYCLE_LOCATION",
        }
        for field, env_var in env_map.items():
            if not values.get(field) and os.environ.get(env_var):
                values[field] = os.environ[env_var]
        return values

    @field_validator("vault_name")
    @classmethod
    def validate_vault_name(cls, value: str) -> str:
        if not _VAULT_NAME_RE.match(value):
            raise ValueError(
                f"Invalid key vault name {value!r}: use 3-24 letters, digits and "
                "hyphens, starting with a letter and without consecutive hyphens."
            )
        return value

    @field_validator("sku_name")
    @classmethod
    def validate_sku_name(cls, value: str) -> str:
        value = value.lower()
        if value not in ("standard", "premium"):
            raise ValueError(f"Unsupported vault SKU: {value!r}")
        return value


# Map provider names to their config models for dynamic validation
CONFIG_REGISTRY: dict[str, type[BaseModel]] = {
    "azure": AzureConfig,
}


def validate_config(cloud_provider: str, config: dict) -> BaseModel:
    """Validate and return a typed config model for the given provider.

    Args:
        cloud_provider: The cloud provider name (e.g. 'azure').
        config: Raw configuration dictionary.

    Returns:
        A validated Pydantic config model.

    Raises:
        ValueError: If the provider is unknown.
        pydantic.ValidationError: If the config is invalid.
    """
    model = CONFIG_REGISTRY.get(cloud_provider)
    if model is None:
        raise ValueError(f"No config model registered for provider: {cloud_provider}")
    return model(**config)


__all__ = [
    "AzureConfig",
    "ScenarioConfig",
    "CONFIG_REGISTRY",
    "validate_config",
]
