from vaultcycle import ScenarioRunner, universal_factory
from vaultcycle.base.config import ScenarioConfig



def main():
    # Example usage: credentials and subscription come from AZURE_* env vars
    manager = universal_factory("vault_manager", "azure", {})
    config = ScenarioConfig(
        resource_group_name="vaultcycle-demo-rg",
        vault_name="vaultcycle-demo-kv",
        location="eastus",
    )

    runner = ScenarioRunner(manager, config)
    for scenario in ("new_vault", "existing_vault"):
        report = runner.run(scenario)
        print(f"{scenario}: {report.steps}")

if __name__ == "__main__":
    main()
