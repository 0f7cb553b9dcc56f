"""Vaultcycle CLI: run the soft-delete lifecycle scenarios from the command line.

Usage examples::

    vaultcycle new-vault
    vaultcycle --config '{"resource_group_name": "rg", "vault_name": "kv-demo"}' all
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from pydantic import ValidationError

_SCENARIOS: dict[str, list[str]] = {
    "new-vault": ["new_vault"],
    "existing-vault": ["existing_vault"],
    "all": ["new_vault", "existing_vault"],
}


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``vaultcycle`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="vaultcycle",
        description="Key vault soft-delete, recovery and purge scenarios",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default="{}",
        help='JSON scenario config (e.g. \'{"vault_name":"kv-demo"}\')',
    )
    parser.add_argument(
        "--azure", "-a",
        type=str,
        default="{}",
        help='JSON Azure config (e.g. \'{"subscription_id":"..."}\')',
    )
    parser.add_argument(
        "scenario",
        choices=sorted(_SCENARIOS),
        help="Scenario to run",
    )
    return parser


def _load_json(raw: str, flag: str) -> dict[str, Any]:
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        print(f"Invalid {flag} JSON: {e}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(value, dict):
        print(f"Invalid {flag} JSON: expected an object", file=sys.stderr)
        sys.exit(1)
    return value


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Builds the configuration, creates an Azure vault manager via the
    universal factory and runs the requested scenarios in order. Each
    report is printed as JSON.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)

    scenario_config = _load_json(ns.config, "--config")
    azure_config = _load_json(ns.azure, "--azure")

    # Lazy-import to avoid loading the Azure SDK for --help
    from vaultcycle.base.config import ScenarioConfig
    from vaultcycle.factory import universal_factory
    from vaultcycle.scenarios import ScenarioRunner

    try:
        config = ScenarioConfig(**scenario_config)
        manager = universal_factory("vault_manager", "azure", azure_config)
    except (ValueError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    runner = ScenarioRunner(manager, config)
    for name in _SCENARIOS[ns.scenario]:
        try:
            report = runner.run(name)  # type: ignore[arg-type]
        except Exception as e:
            print(f"Scenario '{name}' failed: {e}", file=sys.stderr)
            sys.exit(1)
        print(report.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
