"""
Unit tests for the service settings document.
"""
from core.domain.service_settings import DEFAULT_SETTINGS, ServiceSettings, merge_defaults


class TestMergeDefaults:
    """Tests for merge_defaults."""

    def test_empty_document_gets_defaults(self):
        """Test an empty record yields the full default document."""
        assert merge_defaults({}, DEFAULT_SETTINGS) == DEFAULT_SETTINGS

    def test_stored_values_win(self):
        """Test stored values are never overwritten."""
        merged = merge_defaults(
            {"adminApiEnabled": True, "adminApiEndpoints": {"getLicenses": False}},
            DEFAULT_SETTINGS,
        )
        assert merged["adminApiEnabled"] is True
        assert merged["adminApiEndpoints"]["getLicenses"] is False
        assert merged["adminApiEndpoints"]["createLicense"] is True

    def test_nested_sections_filled(self):
        """Test missing nested keys are filled recursively."""
        merged = merge_defaults(
            {"validationResponse": {"license": {"enabled": True}}}, DEFAULT_SETTINGS
        )
        section = merged["validationResponse"]["license"]
        assert section["enabled"] is True
        assert section["fields"]["license_key"] is True
        assert merged["validationResponse"]["requireDiscordId"] is True

    def test_inputs_not_modified(self):
        """Test the stored record is left untouched."""
        stored = {"logging": {"enabled": True}}
        merge_defaults(stored, DEFAULT_SETTINGS)
        assert stored == {"logging": {"enabled": True}}


class TestServiceSettings:
    """Tests for the ServiceSettings view."""

    def test_defaults(self):
        """Test defaults of a fresh deployment."""
        service_settings = ServiceSettings.from_record(None)
        assert service_settings.api_key == ""
        assert service_settings.admin_api_enabled is False
        assert service_settings.require_discord_id is True
        assert service_settings.endpoint_enabled("viewStats") is True

    def test_unknown_endpoint_is_enabled(self):
        """Test endpoints without a switch are allowed."""
        assert ServiceSettings.from_record({}).endpoint_enabled("somethingNew") is True

    def test_webhook_needs_logging_enabled_and_url(self):
        """Test webhook categories need the master switch and a URL."""
        no_url = ServiceSettings.from_record({"logging": {"enabled": True}})
        assert no_url.webhook_enabled_for("license_creations") is False

        disabled = ServiceSettings.from_record(
            {"logging": {"enabled": False, "webhookUrl": "https://hooks.example.com/x"}}
        )
        assert disabled.webhook_enabled_for("license_creations") is False

    def test_webhook_category_toggles(self):
        """Test each category follows its own switch."""
        service_settings = ServiceSettings.from_record(
            {
                "logging": {
                    "enabled": True,
                    "webhookUrl": "https://hooks.example.com/x",
                    "logBotCommands": False,
                }
            }
        )
        assert service_settings.webhook_enabled_for("license_creations") is True
        assert service_settings.webhook_enabled_for("blacklist_actions") is True
        assert service_settings.webhook_enabled_for("bot_commands") is False
        assert service_settings.webhook_enabled_for("unknown") is False
