"""
Pydantic response and request models for vault lifecycle operations.

Provider SDK objects are converted into these thin models at the client
boundary so scenario code never touches SDK types directly.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from vaultcycle.base.identifiers import VaultId


def _value(member: Any) -> str:
    """Return the wire value of an SDK enum member or plain string."""
    return str(getattr(member, "value", member))


class CreateMode(str, Enum):
    """Creation mode for a create-or-update vault call."""

    DEFAULT = "default"
    RECOVER = "recover"


class VaultSku(BaseModel):
    """Vault pricing tier."""

    model_config = ConfigDict(frozen=True)

    family: str = Field(default="A", description="SKU family")
    name: str = Field(default="standard", description="SKU name ('standard' or 'premium')")


class VaultProperties(BaseModel):
    """Input properties for a create-or-update vault call.

    ``enable_soft_delete`` left as ``None`` lets the provider apply its own
    default. ``object_id``, when set, grants that principal full key and
    secret permissions through an access policy.
    """

    model_config = ConfigDict(extra="forbid")

    location: str
    tenant_id: str
    sku: VaultSku = Field(default_factory=VaultSku)
    enable_soft_delete: bool | None = None
    create_mode: CreateMode = CreateMode.DEFAULT
    object_id: str | None = None
    tags: dict[str, str] = Field(default_factory=dict)


class ResourceGroup(BaseModel):
    """Resource group that contains the vault."""

    id: str | None = None
    name: str
    location: str
    provisioning_state: str | None = None

    @classmethod
    def from_sdk(cls, group: Any) -> ResourceGroup:
        properties = getattr(group, "properties", None)
        return cls(
            id=group.id,
            name=group.name,
            location=group.location,
            provisioning_state=getattr(properties, "provisioning_state", None),
        )


class Vault(BaseModel):
    """Live key vault."""

    id: str
    name: str
    location: str
    resource_group: str | None = None
    tenant_id: str | None = None
    sku: VaultSku | None = None
    enable_soft_delete: bool | None = None
    soft_delete_retention_in_days: int | None = None
    enable_purge_protection: bool | None = None
    vault_uri: str | None = None
    tags: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_sdk(cls, vault: Any) -> Vault:
        """Build a :class:`Vault` from an ``azure.mgmt.keyvault`` ``Vault``."""
        props = vault.properties
        sku = None
        if props is not None and props.sku is not None:
            sku = VaultSku(family=_value(props.sku.family), name=_value(props.sku.name))
        try:
            resource_group: str | None = VaultId.parse(vault.id or "").resource_group
        except ValueError:
            resource_group = None
        return cls(
            id=vault.id,
            name=vault.name,
            location=vault.location,
            resource_group=resource_group,
            tenant_id=str(props.tenant_id) if props is not None and props.tenant_id else None,
            sku=sku,
            enable_soft_delete=getattr(props, "enable_soft_delete", None),
            soft_delete_retention_in_days=getattr(props, "soft_delete_retention_in_days", None),
            enable_purge_protection=getattr(props, "enable_purge_protection", None),
            vault_uri=getattr(props, "vault_uri", None),
            tags=dict(vault.tags or {}),
        )


class DeletedVault(BaseModel):
    """Tombstone kept by the provider for a soft-deleted vault."""

    id: str
    name: str
    vault_id: str | None = None
    location: str | None = None
    deleted_on: datetime | None = None
    scheduled_purge_on: datetime | None = None
    purge_protection_enabled: bool | None = None
    tags: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_sdk(cls, deleted: Any) -> DeletedVault:
        """Build a :class:`DeletedVault` from an ``azure.mgmt.keyvault`` ``DeletedVault``."""
        props = deleted.properties
        if props is None:
            return cls(id=deleted.id, name=deleted.name)
        return cls(
            id=deleted.id,
            name=deleted.name,
            vault_id=props.vault_id,
            location=props.location,
            deleted_on=props.deletion_date,
            scheduled_purge_on=props.scheduled_purge_date,
            purge_protection_enabled=getattr(props, "purge_protection_enabled", None),
            tags=dict(props.tags or {}),
        )


__all__ = [
    "CreateMode",
    "VaultSku",
    "VaultProperties",
    "ResourceGroup",
    "Vault",
    "DeletedVault",
]
