"""Vault manager service blueprint."""

from abc import ABC, abstractmethod

from vaultcycle.base.identifiers import DeletedVaultId, VaultId
from vaultcycle.base.models import (
    CreateMode,
    DeletedVault,
    ResourceGroup,
    Vault,
    VaultProperties,
    VaultSku,
)
from vaultcycle.base.results import Result, capture


class VaultManagerBlueprint(ABC):
    """Abstract interface for the vault management plane.

    Maps to the Azure Key Vault management API. Every mutating call blocks
    until the provider's long-running operation reaches a terminal state.
    Provider failures raise :class:`~vaultcycle.base.exceptions.VaultManagerError`
    carrying the provider status code.
    """

    subscription_id: str
    tenant_id: str

    @abstractmethod
    def create_or_update_resource_group(self, name: str, location: str) -> ResourceGroup:
        """Create the resource group, or update it if it already exists.

        Args:
            name: Resource group name.
            location: Region (e.g. ``eastus``).

        Returns:
            The resource group.
        """

    @abstractmethod
    def create_or_update_vault(
        self, resource_group: str, name: str, properties: VaultProperties
    ) -> Vault:
        """Create or update a vault; idempotent by name.

        Args:
            resource_group: Resource group that holds the vault.
            name: Vault name.
            properties: SKU, tenant, soft-delete flag and creation mode.

        Returns:
            The vault once the operation has completed.
        """

    @abstractmethod
    def update_vault(self, vault_id: VaultId, *, enable_soft_delete: bool) -> Vault:
        """Patch properties of an existing vault.

        Args:
            vault_id: Live vault identifier.
            enable_soft_delete: New soft-delete setting.

        Returns:
            The updated vault.
        """

    @abstractmethod
    def get_vault(self, vault_id: VaultId) -> Vault:
        """Fetch a live vault.

        Raises:
            VaultNotFoundError: If the vault does not exist.
        """

    @abstractmethod
    def delete_vault(self, vault_id: VaultId) -> None:
        """Delete a vault; soft-deleted if the vault has soft delete enabled.

        Raises:
            VaultNotFoundError: If the vault does not exist.
        """

    @abstractmethod
    def get_deleted_vault(self, deleted_vault_id: DeletedVaultId) -> DeletedVault:
        """Fetch the tombstone of a soft-deleted vault.

        Raises:
            DeletedVaultNotFoundError: If no such tombstone exists.
        """

    @abstractmethod
    def purge_deleted_vault(self, deleted_vault_id: DeletedVaultId) -> None:
        """Permanently remove a soft-deleted vault.

        Raises:
            DeletedVaultNotFoundError: If no such tombstone exists.
        """

    @abstractmethod
    def list_deleted_vaults(self) -> list[DeletedVault]:
        """List soft-deleted vaults in the subscription."""

    def recover_vault(
        self,
        resource_group: str,
        name: str,
        location: str,
        sku: VaultSku | None = None,
    ) -> Vault:
        """Restore a soft-deleted vault under its original name and region.

        Recovery is a create-or-update call with ``create_mode=recover``.
        """
        properties = VaultProperties(
            location=location,
            tenant_id=self.tenant_id,
            sku=sku or VaultSku(),
            create_mode=CreateMode.RECOVER,
        )
        return self.create_or_update_vault(resource_group, name, properties)

    def find_vault(self, vault_id: VaultId) -> Result:
        """Like :meth:`get_vault` but returns ``Ok``/``NotFound``/``OtherError``."""
        return capture(self.get_vault, vault_id)

    def find_deleted_vault(self, deleted_vault_id: DeletedVaultId) -> Result:
        """Like :meth:`get_deleted_vault` but returns a result value."""
        return capture(self.get_deleted_vault, deleted_vault_id)

    def vault_id(self, resource_group: str, name: str) -> VaultId:
        """Build the identifier of a vault in this manager's subscription."""
        return VaultId(subscription_id=self.subscription_id, resource_group=resource_group, name=name)

    def deleted_vault_id(self, location: str, name: str) -> DeletedVaultId:
        """Build the identifier of a deleted vault in this manager's subscription."""
        return DeletedVaultId(subscription_id=self.subscription_id, location=location, name=name)
