"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.

Every exception derives from one of
InvalidInputError, UnauthorizedError, ForbiddenError, NotFoundError,
ConflictError or StorageError, and the API layer maps those families to
HTTP status codes. Exceptions raised on the validation path also carry a
``reason`` from ValidationReason, which is what ends up in the audit log.
"""
from typing import Optional

from core.domain.value_objects import EvidenceKind, ValidationReason


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    reason: Optional[ValidationReason] = None

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InvalidInputError(DomainException):
    """Raised when a request field is missing or malformed."""

    def __init__(self, message: str = "Invalid input", code: str = "INVALID_INPUT"):
        super().__init__(message, code=code)


class UnauthorizedError(DomainException):
    """Raised when a credential is missing or an identity is not permitted."""

    def __init__(self, message: str = "Unauthorized", code: str = "UNAUTHORIZED"):
        super().__init__(message, code=code)


class ForbiddenError(DomainException):
    """Raised when a request is understood but refused."""

    def __init__(self, message: str = "Forbidden", code: str = "FORBIDDEN"):
        super().__init__(message, code=code)


class NotFoundError(DomainException):
    """Raised when a referenced entity does not exist."""

    def __init__(self, message: str = "Not found", code: str = "NOT_FOUND"):
        super().__init__(message, code=code)


class ConflictError(DomainException):
    """Raised when a request conflicts with the current state."""

    def __init__(self, message: str = "Conflict", code: str = "CONFLICT"):
        super().__init__(message, code=code)


class StorageError(DomainException):
    """Raised when the record store cannot be read or written."""

    def __init__(self, message: str = "Storage failure", code: str = "INTERNAL_FAILURE"):
        super().__init__(message, code=code)


class LicenseNotFoundError(NotFoundError):
    """Raised when a license is not found."""

    reason = ValidationReason.NOT_FOUND

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class ProductNotFoundError(NotFoundError):
    """Raised when a product reference does not match any known product."""

    reason = ValidationReason.PRODUCT_NOT_FOUND

    def __init__(self, message: str = "Product not found"):
        super().__init__(message, code="INVALID_REFERENCE")


class SubUserNotFoundError(NotFoundError):
    """Raised when a sub-user is not present on a license."""

    def __init__(self, message: str = "Sub-user not found on this license"):
        super().__init__(message, code="SUB_USER_NOT_FOUND")


class BlacklistEntryNotFoundError(NotFoundError):
    """Raised when a blacklist entry to remove is not present."""

    def __init__(self, message: str = "Blacklist entry not found"):
        super().__init__(message, code="BLACKLIST_ENTRY_NOT_FOUND")


class DuplicateSubUserError(ConflictError):
    """Raised when a sub-user is already present on a license."""

    def __init__(self, message: str = "Sub-user already exists on this license"):
        super().__init__(message, code="DUPLICATE_SUB_USER")


class DuplicateBlacklistEntryError(ConflictError):
    """Raised when a blacklist entry already exists."""

    def __init__(self, message: str = "Item is already in the blacklist"):
        super().__init__(message, code="DUPLICATE_BLACKLIST_ENTRY")


class DuplicateLicenseKeyError(ConflictError):
    """Raised when an issued key collides with an existing one."""

    def __init__(self, message: str = "License key already exists"):
        super().__init__(message, code="DUPLICATE_LICENSE_KEY")


class OwnerAsSubUserError(InvalidInputError):
    """Raised when the owner is added as a sub-user of their own license."""

    def __init__(self, message: str = "Cannot add the owner as a sub-user"):
        super().__init__(message, code="OWNER_AS_SUB_USER")


class CapacityExceededError(ConflictError):
    """Raised when a license cannot bind another IP or HWID."""

    def __init__(self, kind: EvidenceKind, message: Optional[str] = None):
        self.kind = kind
        super().__init__(
            message or f"Maximum number of {kind.label}s reached for this license",
            code=f"{kind.value.upper()}_CAPACITY",
        )
        self.reason = (
            ValidationReason.IP_CAPACITY
            if kind == EvidenceKind.IP
            else ValidationReason.HWID_CAPACITY
        )


class EvidenceNotTrackedError(ConflictError):
    """Raised when evidence is patched onto a kind whose tracking is disabled."""

    def __init__(self, kind: EvidenceKind):
        self.kind = kind
        super().__init__(
            f"{kind.label} tracking is disabled for this license",
            code=f"{kind.value.upper()}_NOT_TRACKED",
        )


class BlacklistedError(ForbiddenError):
    """Raised when an identity, address or fingerprint is blacklisted."""

    reason = ValidationReason.BLACKLISTED

    def __init__(self, message: str = "Access denied"):
        super().__init__(message, code="BLACKLISTED")


class NotAuthorizedForLicenseError(UnauthorizedError):
    """Raised when an identity is neither the owner nor a sub-user."""

    reason = ValidationReason.UNAUTHORIZED

    def __init__(self, message: str = "User is not authorized for this license"):
        super().__init__(message, code="NOT_AUTHORIZED_FOR_LICENSE")


class HwidRequiredError(InvalidInputError):
    """Raised when the product demands a hardware id and none was given."""

    reason = ValidationReason.HWID_REQUIRED

    def __init__(
        self, message: str = "This product requires a hardware ID for validation"
    ):
        super().__init__(message, code="HWID_REQUIRED")


class LicenseExpiredError(ForbiddenError):
    """Raised when a license has expired."""

    reason = ValidationReason.EXPIRED

    def __init__(self, message: str = "License has expired"):
        super().__init__(message, code="LICENSE_EXPIRED")


class LicenseInactiveError(ForbiddenError):
    """Raised when a license is not active."""

    reason = ValidationReason.INACTIVE

    def __init__(self, message: str = "License is not active"):
        super().__init__(message, code="LICENSE_INACTIVE")


class InvalidAPIKeyError(UnauthorizedError):
    """Raised when the admin API key is missing or wrong."""

    def __init__(self, message: str = "Invalid or missing API key"):
        super().__init__(message, code="INVALID_API_KEY")


class EndpointDisabledError(ForbiddenError):
    """Raised when an admin endpoint is switched off in the settings."""

    def __init__(self, message: str = "This endpoint is disabled"):
        super().__init__(message, code="ENDPOINT_DISABLED")
