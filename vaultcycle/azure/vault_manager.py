"""Azure Key Vault management-plane implementation of the VaultManager blueprint."""

from __future__ import annotations

from typing import Any, NoReturn

from azure.core.exceptions import AzureError, HttpResponseError
from azure.identity import ClientSecretCredential, DefaultAzureCredential
from azure.mgmt.keyvault import KeyVaultManagementClient
from azure.mgmt.keyvault.models import (
    AccessPolicyEntry,
    Permissions,
    Sku,
    VaultCreateOrUpdateParameters,
    VaultPatchParameters,
    VaultPatchProperties,
    VaultProperties as SdkVaultProperties,
)
from azure.mgmt.resource import ResourceManagementClient

from vaultcycle.base import VaultManagerBlueprint
from vaultcycle.base.config import AzureConfig
from vaultcycle.base.exceptions import (
    DeletedVaultNotFoundError,
    OperationTimeoutError,
    ResourceGroupError,
    VaultManagerError,
    VaultNotFoundError,
)
from vaultcycle.base.identifiers import DeletedVaultId, VaultId
from vaultcycle.base.logger import vc_logger
from vaultcycle.base.models import DeletedVault, ResourceGroup, Vault, VaultProperties


def _handle(
    e: AzureError,
    msg: str,
    not_found: type[VaultManagerError] | None = None,
    error: type[VaultManagerError] = VaultManagerError,
) -> NoReturn:
    status = e.status_code if isinstance(e, HttpResponseError) else None
    detail = f"{msg}: {e.message}"
    if not_found is not None and status == 404:
        # an expected outcome for find_vault and find_deleted_vault
        vc_logger.debug(detail, status_code=status)
        raise not_found(detail) from e
    vc_logger.error(detail, status_code=status)
    raise error(detail, status_code=status) from e


def _build_credential(config: AzureConfig) -> Any:
    if config.client_id and config.client_secret:
        return ClientSecretCredential(
            tenant_id=config.tenant_id,
            client_id=config.client_id,
            client_secret=config.client_secret,
        )
    return DefaultAzureCredential()


class VaultManager(VaultManagerBlueprint):
    """Azure Key Vault management service.

    Attributes:
        subscription_id: Subscription the vaults live in.
        tenant_id: Azure AD tenant that owns created vaults.
        object_id: Optional principal granted an access policy on created vaults.
        operation_timeout: Seconds to wait for each long-running operation.
        client: ``KeyVaultManagementClient``.
        resource_client: ``ResourceManagementClient`` for resource groups.
    """

    def __init__(self, config: AzureConfig) -> None:
        """Initialize the management clients.

        Args:
            config: Azure configuration object.
                   Expected attributes:
                   - subscription_id: Azure subscription ID
                   - tenant_id: Azure AD tenant ID
                   - client_id / client_secret: Optional service principal
                   - object_id: Optional access-policy principal
        """
        assert config.subscription_id is not None  # guaranteed by AzureConfig validator
        assert config.tenant_id is not None
        self.subscription_id: str = config.subscription_id
        self.tenant_id: str = config.tenant_id
        self.object_id = config.object_id
        self.operation_timeout = config.operation_timeout
        credential = _build_credential(config)
        self.client = KeyVaultManagementClient(credential, self.subscription_id)
        self.resource_client = ResourceManagementClient(credential, self.subscription_id)

    def _wait(self, poller: Any, description: str) -> Any:
        """Block until a long-running operation completes and return its result."""
        poller.wait(timeout=self.operation_timeout)
        if not poller.done():
            raise OperationTimeoutError(
                f"{description} did not complete within {self.operation_timeout:.0f}s"
            )
        return poller.result()

    def _to_sdk_properties(self, properties: VaultProperties) -> SdkVaultProperties:
        access_policies = []
        if properties.object_id:
            access_policies.append(
                AccessPolicyEntry(
                    tenant_id=properties.tenant_id,
                    object_id=properties.object_id,
                    permissions=Permissions(
                        keys=["all"], secrets=["all"], certificates=["all"]
                    ),
                )
            )
        return SdkVaultProperties(
            tenant_id=properties.tenant_id,
            sku=Sku(family=properties.sku.family, name=properties.sku.name),
            access_policies=access_policies,
            enable_soft_delete=properties.enable_soft_delete,
            create_mode=properties.create_mode.value,
        )

    def create_or_update_resource_group(self, name: str, location: str) -> ResourceGroup:
        """Create or update a resource group.

        Raises:
            ResourceGroupError: On management API failure.
        """
        vc_logger.info(
            f"Ensuring resource group '{name}' in {location}",
            operation="create_or_update_resource_group",
        )
        try:
            group = self.resource_client.resource_groups.create_or_update(
                resource_group_name=name,
                parameters={"location": location},
            )
        except AzureError as e:
            _handle(e, f"Failed to create resource group '{name}'", error=ResourceGroupError)
        return ResourceGroup.from_sdk(group)

    def create_or_update_vault(
        self, resource_group: str, name: str, properties: VaultProperties
    ) -> Vault:
        """Create, update or recover a key vault and wait for completion.

        When ``properties.object_id`` is unset the manager's configured
        ``object_id`` is used for the access policy.

        Raises:
            VaultManagerError: On management API failure.
            OperationTimeoutError: If the operation outlives ``operation_timeout``.
        """
        if properties.object_id is None and self.object_id:
            properties = properties.model_copy(update={"object_id": self.object_id})
        parameters = VaultCreateOrUpdateParameters(
            location=properties.location,
            properties=self._to_sdk_properties(properties),
            tags=properties.tags or None,
        )
        vc_logger.info(
            f"Creating or updating vault (create_mode={properties.create_mode.value}, "
            f"soft_delete={properties.enable_soft_delete})",
            operation="create_or_update_vault",
            vault=name,
        )
        try:
            poller = self.client.vaults.begin_create_or_update(
                resource_group_name=resource_group,
                vault_name=name,
                parameters=parameters,
            )
            vault = self._wait(poller, f"Create or update of vault '{name}'")
        except AzureError as e:
            _handle(e, f"Failed to create or update vault '{name}'")
        return Vault.from_sdk(vault)

    def update_vault(self, vault_id: VaultId, *, enable_soft_delete: bool) -> Vault:
        """Patch soft-delete on an existing vault.

        Raises:
            VaultNotFoundError: If the vault does not exist.
            VaultManagerError: On any other management API failure.
        """
        vc_logger.info(
            f"Setting enable_soft_delete={enable_soft_delete}",
            operation="update_vault",
            vault=str(vault_id),
        )
        try:
            vault = self.client.vaults.update(
                resource_group_name=vault_id.resource_group,
                vault_name=vault_id.name,
                parameters=VaultPatchParameters(
                    properties=VaultPatchProperties(enable_soft_delete=enable_soft_delete)
                ),
            )
        except AzureError as e:
            _handle(e, f"Failed to update vault '{vault_id.name}'", VaultNotFoundError)
        return Vault.from_sdk(vault)

    def get_vault(self, vault_id: VaultId) -> Vault:
        """Fetch a live vault.

        Raises:
            VaultNotFoundError: If the vault does not exist.
            VaultManagerError: On any other management API failure.
        """
        try:
            vault = self.client.vaults.get(
                resource_group_name=vault_id.resource_group,
                vault_name=vault_id.name,
            )
        except AzureError as e:
            _handle(e, f"Failed to get vault '{vault_id.name}'", VaultNotFoundError)
        return Vault.from_sdk(vault)

    def delete_vault(self, vault_id: VaultId) -> None:
        """Delete a vault.

        Raises:
            VaultNotFoundError: If the vault does not exist.
            VaultManagerError: On any other management API failure.
        """
        vc_logger.info("Deleting vault", operation="delete_vault", vault=str(vault_id))
        try:
            self.client.vaults.delete(
                resource_group_name=vault_id.resource_group,
                vault_name=vault_id.name,
            )
        except AzureError as e:
            _handle(e, f"Failed to delete vault '{vault_id.name}'", VaultNotFoundError)

    def get_deleted_vault(self, deleted_vault_id: DeletedVaultId) -> DeletedVault:
        """Fetch a deleted vault record.

        Raises:
            DeletedVaultNotFoundError: If the record does not exist.
            VaultManagerError: On any other management API failure.
        """
        try:
            deleted = self.client.vaults.get_deleted(
                vault_name=deleted_vault_id.name,
                location=deleted_vault_id.location,
            )
        except AzureError as e:
            _handle(
                e,
                f"Failed to get deleted vault '{deleted_vault_id.name}'",
                DeletedVaultNotFoundError,
            )
        return DeletedVault.from_sdk(deleted)

    def purge_deleted_vault(self, deleted_vault_id: DeletedVaultId) -> None:
        """Purge a deleted vault and wait for completion.

        Raises:
            DeletedVaultNotFoundError: If the record does not exist.
            VaultManagerError: On any other management API failure.
            OperationTimeoutError: If the purge outlives ``operation_timeout``.
        """
        vc_logger.info(
            "Purging deleted vault",
            operation="purge_deleted_vault",
            vault=str(deleted_vault_id),
        )
        try:
            poller = self.client.vaults.begin_purge_deleted(
                vault_name=deleted_vault_id.name,
                location=deleted_vault_id.location,
            )
            self._wait(poller, f"Purge of vault '{deleted_vault_id.name}'")
        except AzureError as e:
            _handle(
                e,
                f"Failed to purge deleted vault '{deleted_vault_id.name}'",
                DeletedVaultNotFoundError,
            )

    def list_deleted_vaults(self) -> list[DeletedVault]:
        """List soft-deleted vaults in the subscription.

        Raises:
            VaultManagerError: On management API failure.
        """
        try:
            return [DeletedVault.from_sdk(v) for v in self.client.vaults.list_deleted()]
        except AzureError as e:
            _handle(e, "Failed to list deleted vaults")
