"""Tests for the soft-delete lifecycle scenarios."""

from unittest.mock import patch
import logging
import pytest

from conftest import FakeVaultManager
from vaultcycle.base.exceptions import (
    DeletedVaultNotFoundError,
    OperationTimeoutError,
    ScenarioError,
    UnexpectedResultError,
    VaultManagerError,
)
from vaultcycle.base.results import NotFound
from vaultcycle.scenarios import ScenarioRunner

LIFECYCLE_STEPS = [
    "delete_vault",
    "get_deleted_vault",
    "recover_vault",
    "get_recovered_vault",
    "delete_recovered_vault",
    "purge_deleted_vault",
    "verify_vault_absent",
    "verify_deleted_vault_absent",
    "verify_repeat_purge",
]


def _raising(exc):
    def fn(*args, **kwargs):
        raise exc

    return fn


def _assert_gone(manager, runner):
    assert isinstance(manager.find_vault(runner.vault_id), NotFound)
    assert isinstance(manager.find_deleted_vault(runner.deleted_vault_id), NotFound)


# --- new vault ---


class TestNewVault:
    def test_ends_doubly_not_found(self, fake_manager, scenario_config):
        runner = ScenarioRunner(fake_manager, scenario_config)
        report = runner.run_new_vault()
        assert report.scenario == "new_vault"
        _assert_gone(fake_manager, runner)
        assert fake_manager.vaults == {}
        assert fake_manager.deleted == {}

    def test_step_order(self, fake_manager, scenario_config):
        report = ScenarioRunner(fake_manager, scenario_config).run_new_vault()
        assert report.steps == [
            "ensure_resource_group",
            "create_vault",
            "wait_for_vault",
            "get_vault",
            *LIFECYCLE_STEPS,
        ]

    def test_recovery_uses_recover_mode(self, fake_manager, scenario_config):
        ScenarioRunner(fake_manager, scenario_config).run_new_vault()
        creates = [c for c in fake_manager.calls if c.startswith("create_or_update_vault")]
        assert creates == ["create_or_update_vault:default", "create_or_update_vault:recover"]
        assert "update_vault" not in fake_manager.calls

    def test_reports_deletion_dates(self, fake_manager, scenario_config):
        report = ScenarioRunner(fake_manager, scenario_config).run_new_vault()
        assert report.deleted_on is not None
        assert report.scheduled_purge_on > report.deleted_on

    def test_waits_for_vault_to_become_readable(self, scenario_config):
        manager = FakeVaultManager(hidden_reads=3)
        report = ScenarioRunner(manager, scenario_config).run_new_vault()
        assert "wait_for_vault" in report.steps
        assert manager.calls.count("get_vault") >= 4

    def test_readiness_timeout(self, scenario_config):
        manager = FakeVaultManager(hidden_reads=10**9)
        config = scenario_config.model_copy(update={"settle_timeout": 0.05})
        with pytest.raises(OperationTimeoutError):
            ScenarioRunner(manager, config).run_new_vault()

    def test_skip_repeat_purge(self, fake_manager, scenario_config):
        config = scenario_config.model_copy(update={"verify_repeat_purge": False})
        report = ScenarioRunner(fake_manager, config).run_new_vault()
        assert "verify_repeat_purge" not in report.steps
        assert fake_manager.calls.count("purge_deleted_vault") == 1


# --- existing vault ---


class TestExistingVault:
    def test_ends_doubly_not_found(self, fake_manager, scenario_config):
        runner = ScenarioRunner(fake_manager, scenario_config)
        report = runner.run_existing_vault()
        assert report.soft_delete_retrofitted is True
        _assert_gone(fake_manager, runner)

    def test_retrofit_is_persisted_before_delete(self, fake_manager, scenario_config):
        ScenarioRunner(fake_manager, scenario_config).run_existing_vault()
        calls = fake_manager.calls
        assert calls.index("update_vault") < calls.index("delete_vault")

    def test_step_order(self, fake_manager, scenario_config):
        report = ScenarioRunner(fake_manager, scenario_config).run_existing_vault()
        assert report.steps[:5] == [
            "ensure_resource_group",
            "create_vault",
            "wait_for_vault",
            "get_vault",
            "enable_soft_delete",
        ]
        assert report.steps[5:] == LIFECYCLE_STEPS

    def test_unpersisted_retrofit_loses_tombstone(self, fake_manager, scenario_config):
        runner = ScenarioRunner(fake_manager, scenario_config)
        with patch.object(runner, "_enable_soft_delete"):
            with pytest.raises(DeletedVaultNotFoundError):
                runner.run_existing_vault()

    def test_retrofit_rejected(self, fake_manager, scenario_config):
        original = fake_manager.update_vault

        def ignore_flag(vault_id, *, enable_soft_delete):
            return original(vault_id, enable_soft_delete=False)

        fake_manager.update_vault = ignore_flag
        with pytest.raises(ScenarioError, match="still disabled"):
            ScenarioRunner(fake_manager, scenario_config).run_existing_vault()


# --- failures ---


class TestFailures:
    def test_mid_scenario_failure_propagates(self, fake_manager, scenario_config):
        fake_manager.recover_vault = _raising(VaultManagerError("Forbidden", 403))
        with pytest.raises(VaultManagerError) as exc_info:
            ScenarioRunner(fake_manager, scenario_config).run_new_vault()
        assert exc_info.value.status_code == 403
        # left in the state of the last successful step
        assert ("eastus", "kv-vaultcycle") in fake_manager.deleted

    def test_vault_still_present_after_delete(self, fake_manager, scenario_config):
        fake_manager.delete_vault = lambda vault_id: None
        with pytest.raises(UnexpectedResultError, match="Expected vault lookup to fail"):
            ScenarioRunner(fake_manager, scenario_config).run_new_vault()

    def test_vault_still_present_after_purge(self, fake_manager, scenario_config):
        fake_manager.purge_deleted_vault = lambda deleted_vault_id: None
        with pytest.raises(UnexpectedResultError):
            ScenarioRunner(fake_manager, scenario_config).run_new_vault()

    def test_repeat_purge_succeeds(self, fake_manager, scenario_config):
        original = fake_manager.purge_deleted_vault
        purged = []

        def purge_once_then_noop(deleted_vault_id):
            if not purged:
                purged.append(deleted_vault_id)
                original(deleted_vault_id)

        fake_manager.purge_deleted_vault = purge_once_then_noop
        with pytest.raises(UnexpectedResultError, match="second time"):
            ScenarioRunner(fake_manager, scenario_config).run_new_vault()

    def test_repeat_purge_unexpected_status(self, fake_manager, scenario_config):
        original = fake_manager.purge_deleted_vault
        calls = []

        def purge(deleted_vault_id):
            calls.append(deleted_vault_id)
            if len(calls) > 1:
                raise VaultManagerError("Conflict", 409)
            original(deleted_vault_id)

        fake_manager.purge_deleted_vault = purge
        with pytest.raises(VaultManagerError) as exc_info:
            ScenarioRunner(fake_manager, scenario_config).run_new_vault()
        assert exc_info.value.status_code == 409

    def test_generic_error_not_masked(self, fake_manager, scenario_config):
        fake_manager.delete_vault = _raising(RuntimeError("boom"))
        with pytest.raises(RuntimeError, match="boom"):
            ScenarioRunner(fake_manager, scenario_config).run_new_vault()

    def test_name_mismatch(self, fake_manager, scenario_config):
        original = fake_manager.get_vault
        fake_manager.get_vault = lambda vault_id: original(vault_id).model_copy(
            update={"name": "other"}
        )
        with pytest.raises(ScenarioError, match="does not match"):
            ScenarioRunner(fake_manager, scenario_config).run_new_vault()


# --- dispatch ---


class TestRun:
    def test_by_name(self, fake_manager, scenario_config):
        runner = ScenarioRunner(fake_manager, scenario_config)
        assert runner.run("new_vault").scenario == "new_vault"
        assert runner.run("existing_vault").scenario == "existing_vault"

    def test_unknown(self, fake_manager, scenario_config):
        with pytest.raises(ValueError, match="Unknown scenario"):
            ScenarioRunner(fake_manager, scenario_config).run("nope")

    def test_identifiers(self, fake_manager, scenario_config):
        runner = ScenarioRunner(fake_manager, scenario_config)
        assert str(runner.vault_id).endswith(
            "/resourceGroups/rg-vaultcycle/providers/Microsoft.KeyVault/vaults/kv-vaultcycle"
        )
        assert str(runner.deleted_vault_id).endswith(
            "/locations/eastus/deletedVaults/kv-vaultcycle"
        )


# --- logging ---


class TestLogging:
    def test_records_carry_scenario_context(self, fake_manager, scenario_config, caplog):
        ScenarioRunner(fake_manager, scenario_config).run_existing_vault()
        steps = [r for r in caplog.records if getattr(r, "operation", None) == "enable_soft_delete"]
        assert steps
        assert steps[0].scenario == "existing_vault"
        assert steps[0].vault == "kv-vaultcycle"

    def test_successful_run_logs_no_errors(self, fake_manager, scenario_config, caplog):
        ScenarioRunner(fake_manager, scenario_config).run_new_vault()
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]

    def test_failure_logged_with_scenario(self, fake_manager, scenario_config, caplog):
        fake_manager.recover_vault = _raising(VaultManagerError("Forbidden", 403))
        with pytest.raises(VaultManagerError):
            ScenarioRunner(fake_manager, scenario_config).run_new_vault()
        [record] = [r for r in caplog.records if r.levelno >= logging.ERROR]
        assert record.scenario == "new_vault"
        assert record.status_code == 403
