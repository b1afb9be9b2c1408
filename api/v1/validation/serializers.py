"""
Serializers for the public validation endpoint.
"""

from typing import Any, Dict

from rest_framework import serializers

from validation.application.dto.validation_dto import ValidationResultDTO


class ValidateLicenseRequestSerializer(serializers.Serializer):
    """
    Serializer for validate license request.

    Presence of ``key`` (and ``discordId`` when required) is enforced by
    the validation handler so the failure body stays uniform.
    """

    key = serializers.CharField(required=False, allow_blank=True, trim_whitespace=True)
    discordId = serializers.CharField(
        source="discord_id", required=False, allow_blank=True, allow_null=True
    )
    hwid = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ValidationFailureSerializer(serializers.Serializer):
    """Shape of a failed validation (documentation only)."""

    success = serializers.BooleanField(default=False)
    status = serializers.CharField(default="failure")
    reason = serializers.CharField(required=False)
    message = serializers.CharField()


def _selected(section: Dict[str, Any], values: Dict[str, Any]) -> Dict[str, Any]:
    fields = section.get("fields", {})
    return {name: value for name, value in values.items() if fields.get(name)}


def build_success_payload(
    result: ValidationResultDTO, validation_response: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Build the success body from the validationResponse settings.

    Each of the license, customer and product sections is included when
    enabled and at least one of its fields is switched on.

    Args:
        result: Outcome of the validation
        validation_response: ``validationResponse`` section of the settings

    Returns:
        JSON-serializable response body
    """
    license, product = result.license, result.product
    payload: Dict[str, Any] = {"success": True, "status": "success"}

    custom_message = validation_response.get("customSuccessMessage", {})
    if custom_message.get("enabled"):
        payload["message"] = custom_message.get("message") or "License key is valid"

    sections = {
        "license": {
            "license_key": license.key,
            "status": license.status.value,
            "expires_at": serializers.DateTimeField().to_representation(license.expires_at)
            if license.expires_at
            else None,
            "issue_date": serializers.DateTimeField().to_representation(license.created_at),
            "max_ips": license.max_ips.to_sentinel(),
            "used_ips": list(license.allowed_ips),
        },
        "customer": {
            "id": license.discord_id,
            "discord_id": license.discord_id,
            "customer_since": serializers.DateTimeField().to_representation(license.created_at),
        },
        "product": {
            "id": product.id,
            "name": product.name,
            "enabled": True,
        },
    }
    for name, values in sections.items():
        section = validation_response.get(name, {})
        if not section.get("enabled"):
            continue
        selected = _selected(section, values)
        if selected:
            payload[name] = selected
    return payload
