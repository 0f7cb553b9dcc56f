from unittest.mock import patch
import pytest
from pydantic import ValidationError

from vaultcycle.factory import universal_factory
from vaultcycle.base import VaultManagerBlueprint

AZURE = {
    "subscription_id": "00000000-0000-0000-0000-000000000000",
    "tenant_id": "11111111-1111-1111-1111-111111111111",
}


class TestUniversalFactory:
    @patch("vaultcycle.azure.vault_manager.ResourceManagementClient")
    @patch("vaultcycle.azure.vault_manager.KeyVaultManagementClient")
    @patch("vaultcycle.azure.vault_manager.DefaultAzureCredential")
    def test_azure_vault_manager(self, mock_cred, mock_kv, mock_rm):
        result = universal_factory("vault_manager", "azure", AZURE)
        assert isinstance(result, VaultManagerBlueprint)
        assert result.subscription_id == AZURE["subscription_id"]
        mock_kv.assert_called_once_with(mock_cred.return_value, AZURE["subscription_id"])

    def test_invalid_config(self, monkeypatch):
        monkeypatch.delenv("AZURE_SUBSCRIPTION_ID", raising=False)
        with pytest.raises(ValidationError):
            universal_factory("vault_manager", "azure", {"tenant_id": "t"})

    def test_unsupported_provider(self):
        with pytest.raises(ValueError, match="Unsupported cloud provider"):
            universal_factory("vault_manager", "aws", {})

    def test_unsupported_service(self):
        with pytest.raises(ValueError, match="Unsupported service"):
            universal_factory("storage", "azure", {})
