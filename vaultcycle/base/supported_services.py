from typing import Literal


existing_services = Literal["vault_manager"]


existing_cloud_providers = Literal["azure"]


existing_scenarios = Literal["new_vault", "existing_vault"]
