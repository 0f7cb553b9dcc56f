"""Shared fixtures: an in-memory provider that models soft-delete semantics."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from vaultcycle.base import VaultManagerBlueprint
from vaultcycle.base.config import ScenarioConfig
from vaultcycle.base.exceptions import (
    DeletedVaultNotFoundError,
    VaultManagerError,
    VaultNotFoundError,
)
from vaultcycle.base.identifiers import DeletedVaultId, VaultId
from vaultcycle.base.models import (
    CreateMode,
    DeletedVault,
    ResourceGroup,
    Vault,
    VaultProperties,
)

SUBSCRIPTION = "00000000-0000-0000-0000-000000000000"
TENANT = "11111111-1111-1111-1111-111111111111"


class FakeVaultManager(VaultManagerBlueprint):
    """Keeps vaults and tombstones in memory.

    ``hidden_reads`` makes a newly created vault report not found that many
    times before it becomes visible, like DNS propagation does.
    """

    def __init__(self, hidden_reads: int = 0) -> None:
        self.subscription_id = SUBSCRIPTION
        self.tenant_id = TENANT
        self.groups: dict[str, ResourceGroup] = {}
        self.vaults: dict[str, Vault] = {}
        self.deleted: dict[tuple[str, str], DeletedVault] = {}
        self.calls: list[str] = []
        self.hidden_reads = hidden_reads
        self._hidden: dict[str, int] = {}

    def create_or_update_resource_group(self, name: str, location: str) -> ResourceGroup:
        self.calls.append("create_or_update_resource_group")
        group = ResourceGroup(
            id=f"/subscriptions/{SUBSCRIPTION}/resourceGroups/{name}",
            name=name,
            location=location,
            provisioning_state="Succeeded",
        )
        self.groups[name] = group
        return group

    def create_or_update_vault(
        self, resource_group: str, name: str, properties: VaultProperties
    ) -> Vault:
        self.calls.append(f"create_or_update_vault:{properties.create_mode.value}")
        key = (properties.location, name)
        soft_delete = properties.enable_soft_delete
        if properties.create_mode is CreateMode.RECOVER:
            if key not in self.deleted:
                raise VaultManagerError(f"No deleted vault '{name}' to recover", 404)
            del self.deleted[key]
            soft_delete = True
        elif key in self.deleted:
            raise VaultManagerError(f"Vault name '{name}' is in a deleted state", 409)
        vault = Vault(
            id=str(VaultId(subscription_id=SUBSCRIPTION, resource_group=resource_group, name=name)),
            name=name,
            location=properties.location,
            resource_group=resource_group,
            tenant_id=properties.tenant_id,
            sku=properties.sku,
            enable_soft_delete=True if soft_delete is None else soft_delete,
        )
        self.vaults[name] = vault
        self._hidden[name] = self.hidden_reads if properties.create_mode is CreateMode.DEFAULT else 0
        return vault

    def update_vault(self, vault_id: VaultId, *, enable_soft_delete: bool) -> Vault:
        self.calls.append("update_vault")
        vault = self._live(vault_id)
        updated = vault.model_copy(update={"enable_soft_delete": enable_soft_delete})
        self.vaults[vault_id.name] = updated
        return updated

    def get_vault(self, vault_id: VaultId) -> Vault:
        self.calls.append("get_vault")
        vault = self._live(vault_id)
        if self._hidden.get(vault_id.name, 0) > 0:
            self._hidden[vault_id.name] -= 1
            raise VaultNotFoundError(f"Vault '{vault_id.name}' not found")
        return vault

    def delete_vault(self, vault_id: VaultId) -> None:
        self.calls.append("delete_vault")
        vault = self._live(vault_id)
        del self.vaults[vault_id.name]
        if vault.enable_soft_delete:
            now = datetime(2026, 1, 1, tzinfo=timezone.utc)
            deleted_id = DeletedVaultId(
                subscription_id=SUBSCRIPTION, location=vault.location, name=vault.name
            )
            self.deleted[(vault.location, vault.name)] = DeletedVault(
                id=str(deleted_id),
                name=vault.name,
                vault_id=vault.id,
                location=vault.location,
                deleted_on=now,
                scheduled_purge_on=now + timedelta(days=90),
            )

    def get_deleted_vault(self, deleted_vault_id: DeletedVaultId) -> DeletedVault:
        self.calls.append("get_deleted_vault")
        key = (deleted_vault_id.location, deleted_vault_id.name)
        if key not in self.deleted:
            raise DeletedVaultNotFoundError(f"Deleted vault '{deleted_vault_id.name}' not found")
        return self.deleted[key]

    def purge_deleted_vault(self, deleted_vault_id: DeletedVaultId) -> None:
        self.calls.append("purge_deleted_vault")
        key = (deleted_vault_id.location, deleted_vault_id.name)
        if key not in self.deleted:
            raise DeletedVaultNotFoundError(f"Deleted vault '{deleted_vault_id.name}' not found")
        del self.deleted[key]

    def list_deleted_vaults(self) -> list[DeletedVault]:
        return list(self.deleted.values())

    def _live(self, vault_id: VaultId) -> Vault:
        if vault_id.name not in self.vaults:
            raise VaultNotFoundError(f"Vault '{vault_id.name}' not found")
        return self.vaults[vault_id.name]


@pytest.fixture
def fake_manager():
    return FakeVaultManager()


@pytest.fixture
def scenario_config():
    return ScenarioConfig(
        resource_group_name="rg-vaultcycle",
        vault_name="kv-vaultcycle",
        location="eastus",
        settle_initial_delay=0,
        settle_max_delay=0,
        settle_timeout=5,
    )


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr("vaultcycle.base.polling.time.sleep", lambda _: None)
