"""Vaultcycle: soft-delete lifecycle automation for Azure Key Vault.

Entry point for the library. Create a vault manager with
:func:`universal_factory` and hand it to a :class:`ScenarioRunner`::

    from vaultcycle import ScenarioRunner, universal_factory
    from vaultcycle.base.config import ScenarioConfig

    manager = universal_factory("vault_manager", "azure", {})
    runner = ScenarioRunner(manager, ScenarioConfig(resource_group_name="rg", vault_name="kv-demo"))
    report = runner.run_new_vault()
"""

from .base import VaultManagerBlueprint
from .factory import universal_factory
from .scenarios import ScenarioReport, ScenarioRunner

__all__ = [
    "VaultManagerBlueprint",
    "ScenarioReport",
    "ScenarioRunner",
    "universal_factory",
]
