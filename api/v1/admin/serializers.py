"""
Serializers for the admin API.

Wire names are camelCase; ``source`` maps them onto the snake_case
command and DTO attributes.
"""

from rest_framework import serializers

from blacklist.domain.blacklist import BlacklistEntryType
from core.domain.value_objects import UNLIMITED_SENTINEL, UNTRACKED_SENTINEL, Capacity, LicenseStatus


class CapacityField(serializers.IntegerField):
    """Integer capacity in sentinel form (-1 unlimited, -2 untracked)."""

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if value < UNTRACKED_SENTINEL:
            self.fail("min_value", min_value=UNTRACKED_SENTINEL)
        try:
            return Capacity.from_sentinel(value)
        except ValueError as e:
            raise serializers.ValidationError(str(e)) from e

    def to_representation(self, value):
        if isinstance(value, Capacity):
            return value.to_sentinel()
        return super().to_representation(value)


class IssueLicenseRequestSerializer(serializers.Serializer):
    """Serializer for issue license request."""

    productId = serializers.CharField(source="product_id")
    discordId = serializers.CharField(source="discord_id")
    maxIps = CapacityField(source="max_ips", required=False, default=Capacity.bounded(1))
    maxHwids = CapacityField(source="max_hwids", required=False, default=Capacity.bounded(1))
    discordUsername = serializers.CharField(
        source="discord_username", required=False, allow_null=True, allow_blank=True
    )
    email = serializers.EmailField(required=False, allow_null=True, allow_blank=True)
    expiresAt = serializers.DateTimeField(source="expires_at", required=False, allow_null=True)
    platform = serializers.CharField(required=False, default="custom")
    platformUserId = serializers.CharField(
        source="platform_user_id", required=False, allow_null=True, allow_blank=True
    )
    subUserDiscordIds = serializers.ListField(
        source="sub_user_discord_ids",
        child=serializers.CharField(),
        required=False,
        default=list,
    )


class SetLicenseStatusRequestSerializer(serializers.Serializer):
    """Serializer for set status request."""

    status = serializers.ChoiceField(choices=[s.value for s in LicenseStatus])

    def validate_status(self, value):
        return LicenseStatus(value)


class RenewLicenseRequestSerializer(serializers.Serializer):
    """Serializer for renew license request."""

    expiresAt = serializers.DateTimeField(source="expiration_date")


class PatchIdentitiesRequestSerializer(serializers.Serializer):
    """Serializer for patch identities request. At least one of ip/hwid."""

    ip = serializers.IPAddressField(required=False, allow_null=True)
    hwid = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class SubUserRequestSerializer(serializers.Serializer):
    """Serializer for add/remove sub-user requests."""

    subUserDiscordId = serializers.CharField(source="discord_id")


class BlacklistEntryRequestSerializer(serializers.Serializer):
    """Serializer for blacklist entry add/remove requests."""

    type = serializers.ChoiceField(choices=[t.value for t in BlacklistEntryType])
    value = serializers.CharField()

    def validate_type(self, value):
        return BlacklistEntryType(value)


class LogCommandUsageRequestSerializer(serializers.Serializer):
    """Serializer for bot command usage."""

    command = serializers.CharField()
    userId = serializers.CharField(source="user_id")


class LicenseDTOSerializer(serializers.Serializer):
    """Serializer for LicenseDTO."""

    id = serializers.CharField()
    key = serializers.CharField()
    productId = serializers.CharField(source="product_id")
    productName = serializers.CharField(source="product_name")
    discordId = serializers.CharField(source="discord_id")
    discordUsername = serializers.CharField(source="discord_username", allow_null=True)
    email = serializers.CharField(allow_null=True)
    platform = serializers.CharField()
    platformUserId = serializers.CharField(source="platform_user_id", allow_null=True)
    subUserDiscordIds = serializers.ListField(
        source="sub_user_discord_ids", child=serializers.CharField()
    )
    status = serializers.CharField()
    expiresAt = serializers.DateTimeField(source="expires_at", allow_null=True)
    isExpired = serializers.BooleanField(source="is_expired")
    allowedIps = serializers.ListField(source="allowed_ips", child=serializers.CharField())
    maxIps = serializers.IntegerField(
        source="max_ips",
        help_text=f"{UNLIMITED_SENTINEL} unlimited, {UNTRACKED_SENTINEL} untracked",
    )
    allowedHwids = serializers.ListField(source="allowed_hwids", child=serializers.CharField())
    maxHwids = serializers.IntegerField(source="max_hwids")
    validations = serializers.IntegerField()
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")


class BlacklistSerializer(serializers.Serializer):
    """Serializer for the Blacklist entity."""

    ips = serializers.ListField(child=serializers.CharField())
    hwids = serializers.ListField(child=serializers.CharField())
    discordIds = serializers.ListField(source="discord_ids", child=serializers.CharField())


class DashboardTotalsSerializer(serializers.Serializer):
    totalProducts = serializers.IntegerField(source="total_products")
    totalLicenses = serializers.IntegerField(source="total_licenses")
    activeLicenses = serializers.IntegerField(source="active_licenses")
    totalValidations = serializers.IntegerField(source="total_validations")
    successfulValidations = serializers.IntegerField(source="successful_validations")
    validationChangePercent = serializers.FloatField(source="validation_change_percent")


class DailyValidationCountSerializer(serializers.Serializer):
    day = serializers.DateField()
    success = serializers.IntegerField()
    failure = serializers.IntegerField()


class DailyCommandCountSerializer(serializers.Serializer):
    day = serializers.DateField()
    commands = serializers.IntegerField()


class DashboardStatsSerializer(serializers.Serializer):
    """Serializer for DashboardStatsDTO."""

    totals = DashboardTotalsSerializer()
    dailyValidations = DailyValidationCountSerializer(source="daily_validations", many=True)
    validationsByCountry = serializers.DictField(
        source="validations_by_country", child=serializers.IntegerField()
    )
    dailyCommandUsage = DailyCommandCountSerializer(source="daily_command_usage", many=True)


class IpUsageSerializer(serializers.Serializer):
    """Serializer for IpUsage; a null total means unlimited."""

    used = serializers.IntegerField()
    total = serializers.IntegerField(allow_null=True)


class CommandUsageSerializer(serializers.Serializer):
    command = serializers.CharField()
    userId = serializers.CharField(source="user_id")
    timestamp = serializers.DateTimeField()
