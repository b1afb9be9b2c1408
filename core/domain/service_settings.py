"""
Service settings.

The settings record is stored as a single JSON document. Stored values
win; anything missing is filled from DEFAULT_SETTINGS, recursively, so
older documents keep working when new options are introduced.
"""
import copy
from dataclasses import dataclass
from typing import Any, Dict

DEFAULT_SETTINGS: Dict[str, Any] = {
    "apiKey": "",
    "adminApiEnabled": False,
    "adminApiEndpoints": {
        "getLicenses": True,
        "createLicense": True,
        "updateLicense": True,
        "deleteLicense": True,
        "updateIdentities": True,
        "renewLicense": True,
        "addSubUser": True,
        "removeSubUser": True,
        "manageBlacklist": True,
        "viewStats": True,
        "logBotUsage": True,
    },
    "validationResponse": {
        "requireDiscordId": True,
        "customSuccessMessage": {
            "enabled": True,
            "message": "License key is valid",
        },
        "license": {
            "enabled": False,
            "fields": {
                "license_key": True,
                "status": True,
                "expires_at": True,
                "issue_date": True,
                "max_ips": True,
                "used_ips": True,
            },
        },
        "customer": {
            "enabled": False,
            "fields": {
                "id": True,
                "discord_id": True,
                "customer_since": True,
            },
        },
        "product": {
            "enabled": False,
            "fields": {
                "id": True,
                "name": True,
                "enabled": True,
            },
        },
    },
    "logging": {
        "enabled": False,
        "webhookUrl": "",
        "logLicenseCreations": True,
        "logLicenseUpdates": True,
        "logBotCommands": True,
        "logBlacklistActions": True,
    },
}

# Event category -> webhook logging toggle
WEBHOOK_CATEGORY_TOGGLES = {
    "license_creations": "logLicenseCreations",
    "license_updates": "logLicenseUpdates",
    "blacklist_actions": "logBlacklistActions",
    "bot_commands": "logBotCommands",
}


def merge_defaults(stored: Dict[str, Any], defaults: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fill keys missing from ``stored`` with values from ``defaults``.

    Nested dicts are merged recursively; stored values are never overwritten.

    Returns:
        A new merged dict (inputs are not modified)
    """
    merged = copy.deepcopy(stored) if isinstance(stored, dict) else {}
    for key, default in defaults.items():
        if isinstance(default, dict):
            merged[key] = merge_defaults(merged.get(key) or {}, default)
        elif key not in merged or merged[key] is None:
            merged[key] = copy.deepcopy(default)
    return merged


@dataclass(frozen=True)
class ServiceSettings:
    """Read-only view over the merged settings document."""

    document: Dict[str, Any]

    @classmethod
    def from_record(cls, record: Dict[str, Any] = None) -> "ServiceSettings":
        return cls(merge_defaults(record or {}, DEFAULT_SETTINGS))

    @property
    def api_key(self) -> str:
        return self.document.get("apiKey") or ""

    @property
    def admin_api_enabled(self) -> bool:
        return bool(self.document["adminApiEnabled"])

    def endpoint_enabled(self, name: str) -> bool:
        """True unless the admin endpoint toggle ``name`` is switched off."""
        return bool(self.document["adminApiEndpoints"].get(name, True))

    @property
    def require_discord_id(self) -> bool:
        return bool(self.document["validationResponse"]["requireDiscordId"])

    @property
    def validation_response(self) -> Dict[str, Any]:
        return self.document["validationResponse"]

    @property
    def webhook_url(self) -> str:
        return self.document["logging"].get("webhookUrl") or ""

    def webhook_enabled_for(self, category: str) -> bool:
        """
        Check whether events of ``category`` should be posted to the webhook.

        Args:
            category: Event category (see WEBHOOK_CATEGORY_TOGGLES)
        """
        logging_settings = self.document["logging"]
        if not logging_settings.get("enabled") or not self.webhook_url:
            return False
        toggle = WEBHOOK_CATEGORY_TOGGLES.get(category)
        return bool(toggle and logging_settings.get(toggle))
