"""ARM resource identifiers for live and deleted vaults."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

_PROVIDER = "Microsoft.KeyVault"


def _segments(resource_id: str) -> list[str]:
    return [part for part in resource_id.strip().split("/") if part]


class VaultId(BaseModel):
    """Identifier of a live vault.

    Renders as
    ``/subscriptions/{subscription}/resourceGroups/{group}/providers/Microsoft.KeyVault/vaults/{name}``.
    """

    model_config = ConfigDict(frozen=True)

    subscription_id: str
    resource_group: str
    name: str

    def __str__(self) -> str:
        return (
            f"/subscriptions/{self.subscription_id}"
            f"/resourceGroups/{self.resource_group}"
            f"/providers/{_PROVIDER}/vaults/{self.name}"
        )

    @classmethod
    def parse(cls, resource_id: str) -> VaultId:
        """Parse a live vault resource ID.

        Raises:
            ValueError: If *resource_id* is not a Key Vault resource ID.
        """
        parts = _segments(resource_id)
        keys = [p.lower() for p in parts[0::2]]
        if (
            len(parts) != 8
            or keys != ["subscriptions", "resourcegroups", "providers", "vaults"]
            or parts[5].lower() != _PROVIDER.lower()
        ):
            raise ValueError(f"Not a key vault resource ID: {resource_id!r}")
        return cls(subscription_id=parts[1], resource_group=parts[3], name=parts[7])


class DeletedVaultId(BaseModel):
    """Identifier of a soft-deleted vault record.

    Renders as
    ``/subscriptions/{subscription}/providers/Microsoft.KeyVault/locations/{location}/deletedVaults/{name}``.
    """

    model_config = ConfigDict(frozen=True)

    subscription_id: str
    location: str
    name: str

    def __str__(self) -> str:
        return (
            f"/subscriptions/{self.subscription_id}"
            f"/providers/{_PROVIDER}/locations/{self.location}"
            f"/deletedVaults/{self.name}"
        )

    @classmethod
    def parse(cls, resource_id: str) -> DeletedVaultId:
        """Parse a deleted vault resource ID.

        Raises:
            ValueError: If *resource_id* is not a deleted vault resource ID.
        """
        parts = _segments(resource_id)
        if (
            len(parts) != 8
            or parts[0].lower() != "subscriptions"
            or parts[2].lower() != "providers"
            or parts[3].lower() != _PROVIDER.lower()
            or parts[4].lower() != "locations"
            or parts[6].lower() != "deletedvaults"
        ):
            raise ValueError(f"Not a deleted key vault resource ID: {resource_id!r}")
        return cls(subscription_id=parts[1], location=parts[5], name=parts[7])

    @classmethod
    def for_vault(cls, vault_id: VaultId, location: str) -> DeletedVaultId:
        """Return the tombstone identifier a deleted *vault_id* would get."""
        return cls(subscription_id=vault_id.subscription_id, location=location, name=vault_id.name)


__all__ = ["VaultId", "DeletedVaultId"]
