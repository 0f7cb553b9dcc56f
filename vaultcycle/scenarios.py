"""Soft-delete lifecycle scenarios.

:class:`ScenarioRunner` drives a key vault through
create -> delete -> recover -> delete -> purge against a
:class:`~vaultcycle.base.VaultManagerBlueprint`, re-fetching remote state
before every assertion. Two scenarios are provided:

* ``new_vault``: the vault is created with soft delete enabled.
* ``existing_vault``: the vault is created without soft delete, which is
  then enabled on the live vault before the lifecycle starts.

Execution is sequential; any failure aborts the scenario and leaves the
remote vault in the state of the last successful step.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from http import HTTPStatus
from typing import Iterator

from pydantic import BaseModel, Field

from vaultcycle.base import VaultManagerBlueprint, existing_scenarios
from vaultcycle.base.assertions import verify_expected_status
from vaultcycle.base.config import ScenarioConfig
from vaultcycle.base.exceptions import ScenarioError, UnexpectedResultError
from vaultcycle.base.identifiers import DeletedVaultId, VaultId
from vaultcycle.base.logger import vc_logger
from vaultcycle.base.models import Vault, VaultProperties, VaultSku
from vaultcycle.base.polling import poll_until
from vaultcycle.base.results import NotFound, Ok, expect_status


class ScenarioReport(BaseModel):
    """What a completed scenario did and observed."""

    scenario: str
    vault_name: str
    resource_group: str
    location: str
    steps: list[str] = Field(default_factory=list)
    deleted_on: datetime | None = None
    scheduled_purge_on: datetime | None = None
    soft_delete_retrofitted: bool = False


class ScenarioRunner:
    """Runs the lifecycle scenarios for one resource group / vault pair.

    Attributes:
        manager: Vault management client.
        config: Names, region and polling options.
    """

    def __init__(self, manager: VaultManagerBlueprint, config: ScenarioConfig) -> None:
        self.manager = manager
        self.config = config
        self.vault_id: VaultId = manager.vault_id(config.resource_group_name, config.vault_name)
        self.deleted_vault_id: DeletedVaultId = manager.deleted_vault_id(
            config.location, config.vault_name
        )
        self._sku = VaultSku(name=config.sku_name)
        self._log = vc_logger

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def run(self, name: existing_scenarios) -> ScenarioReport:
        """Run a scenario by name.

        Raises:
            ValueError: If *name* is not a known scenario.
        """
        scenarios = {
            "new_vault": self.run_new_vault,
            "existing_vault": self.run_existing_vault,
        }
        if name not in scenarios:
            raise ValueError(f"Unknown scenario: {name}")
        return scenarios[name]()

    def run_new_vault(self) -> ScenarioReport:
        """Create a soft-delete vault, then delete, recover, delete and purge it."""
        report = self._new_report("new_vault")
        with self._guarded(report):
            self._create_and_confirm(report, enable_soft_delete=True)
            self._delete_recover_purge(report)
            self._verify_purged(report)
        return report

    def run_existing_vault(self) -> ScenarioReport:
        """Create a vault without soft delete, enable it, then run the lifecycle."""
        report = self._new_report("existing_vault")
        with self._guarded(report):
            self._create_and_confirm(report, enable_soft_delete=False)
            self._enable_soft_delete(report)
            self._delete_recover_purge(report)
            self._verify_purged(report)
        return report

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _new_report(self, scenario: str) -> ScenarioReport:
        self._log = vc_logger.bind(scenario=scenario, vault=self.config.vault_name)
        self._log.info(
            f"Operating with vault name '{self.config.vault_name}' in resource group "
            f"'{self.config.resource_group_name}' and location '{self.config.location}'"
        )
        return ScenarioReport(
            scenario=scenario,
            vault_name=self.config.vault_name,
            resource_group=self.config.resource_group_name,
            location=self.config.location,
        )

    def _step(self, report: ScenarioReport, step: str, message: str) -> None:
        report.steps.append(step)
        self._log.info(message, operation=step)

    @contextmanager
    def _guarded(self, report: ScenarioReport) -> Iterator[None]:
        try:
            yield
        except Exception as e:
            self._log.error(
                f"Unexpected exception encountered running the scenario: {e}",
                status_code=getattr(e, "status_code", None),
            )
            raise

    def _create_and_confirm(self, report: ScenarioReport, *, enable_soft_delete: bool) -> None:
        cfg = self.config
        self.manager.create_or_update_resource_group(cfg.resource_group_name, cfg.location)
        self._step(report, "ensure_resource_group", "Resource group ready")

        properties = VaultProperties(
            location=cfg.location,
            tenant_id=self.manager.tenant_id,
            sku=self._sku,
            enable_soft_delete=enable_soft_delete,
        )
        self.manager.create_or_update_vault(cfg.resource_group_name, cfg.vault_name, properties)
        self._step(report, "create_vault", f"Vault created (soft_delete={enable_soft_delete})")

        self._wait_until_readable(report)
        self._step(report, "wait_for_vault", "Vault is readable")

        vault = self.manager.get_vault(self.vault_id)
        if vault.name != cfg.vault_name:
            raise ScenarioError(
                f"Retrieved vault name '{vault.name}' does not match '{cfg.vault_name}'"
            )
        self._step(report, "get_vault", "Retrieved newly created vault")

    def _wait_until_readable(self, report: ScenarioReport) -> Vault:
        def probe() -> Vault | None:
            result = self.manager.find_vault(self.vault_id)
            if isinstance(result, Ok):
                return result.value
            if isinstance(result, NotFound):
                return None
            raise result.to_exception()

        return poll_until(
            probe,
            timeout=self.config.settle_timeout,
            initial_delay=self.config.settle_initial_delay,
            max_delay=self.config.settle_max_delay,
            backoff_factor=self.config.settle_backoff_factor,
            description=f"vault '{report.vault_name}'",
        )

    def _enable_soft_delete(self, report: ScenarioReport) -> None:
        vault = self.manager.update_vault(self.vault_id, enable_soft_delete=True)
        if not vault.enable_soft_delete:
            raise ScenarioError(f"Soft delete is still disabled on vault '{vault.name}'")
        report.soft_delete_retrofitted = True
        self._step(report, "enable_soft_delete", "Enabled soft delete on existing vault")

    def _delete_recover_purge(self, report: ScenarioReport) -> None:
        cfg = self.config

        self.manager.delete_vault(self.vault_id)
        self._step(report, "delete_vault", "Vault deleted")
        expect_status(self.manager.find_vault(self.vault_id), HTTPStatus.NOT_FOUND, "vault")

        deleted = self.manager.get_deleted_vault(self.deleted_vault_id)
        report.deleted_on = deleted.deleted_on
        report.scheduled_purge_on = deleted.scheduled_purge_on
        self._step(
            report,
            "get_deleted_vault",
            f"'{deleted.id}' deleted on: {deleted.deleted_on}, "
            f"scheduled for purge on: {deleted.scheduled_purge_on}",
        )

        self.manager.recover_vault(cfg.resource_group_name, cfg.vault_name, cfg.location, self._sku)
        self._step(report, "recover_vault", "Recovered deleted vault")

        self.manager.get_vault(self.vault_id)
        self._step(report, "get_recovered_vault", "Verified the existence of recovered vault")

        self.manager.delete_vault(self.vault_id)
        self._step(report, "delete_recovered_vault", "Recovered vault deleted")

        self.manager.get_deleted_vault(self.deleted_vault_id)
        self.manager.purge_deleted_vault(self.deleted_vault_id)
        self._step(report, "purge_deleted_vault", "Vault purged")

    def _verify_purged(self, report: ScenarioReport) -> None:
        expect_status(self.manager.find_vault(self.vault_id), HTTPStatus.NOT_FOUND, "vault")
        self._step(report, "verify_vault_absent", "Verified vault deletion succeeded")

        expect_status(
            self.manager.find_deleted_vault(self.deleted_vault_id),
            HTTPStatus.NOT_FOUND,
            "deleted vault",
        )
        self._step(report, "verify_deleted_vault_absent", "Verified vault purging succeeded")

        if not self.config.verify_repeat_purge:
            return
        try:
            self.manager.purge_deleted_vault(self.deleted_vault_id)
        except Exception as e:
            verify_expected_status(e, HTTPStatus.NOT_FOUND)
        else:
            raise UnexpectedResultError(
                f"Purging vault '{report.vault_name}' a second time succeeded"
            )
        self._step(report, "verify_repeat_purge", "Verified repeated purge reports not found")
