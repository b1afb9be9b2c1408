"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


class LicenseStatus(Enum):
    """License status value object."""

    ACTIVE = "active"
    INACTIVE = "inactive"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class EvidenceKind(Enum):
    """Kind of client evidence a license can bind."""

    IP = "ip"
    HWID = "hwid"

    @property
    def label(self) -> str:
        return "IP" if self is EvidenceKind.IP else "HWID"

    def __str__(self) -> str:
        return self.value


class ValidationReason(Enum):
    """Stable reason codes recorded for failed validations."""

    NOT_FOUND = "not_found"
    PRODUCT_NOT_FOUND = "product_not_found"
    BLACKLISTED = "blacklisted"
    UNAUTHORIZED = "unauthorized"
    HWID_REQUIRED = "hwid_required"
    EXPIRED = "expired"
    INACTIVE = "inactive"
    IP_CAPACITY = "ip_capacity"
    HWID_CAPACITY = "hwid_capacity"

    def __str__(self) -> str:
        return self.value


class ValidationOutcome(Enum):
    """Outcome of a validation attempt."""

    SUCCESS = "success"
    FAILURE = "failure"

    def __str__(self) -> str:
        return self.value


class Admission(Enum):
    """Result of running a candidate through the capacity policy."""

    ADMITTED = "admitted"
    ALREADY_PRESENT = "already_present"
    REJECTED = "rejected"
    UNTRACKED = "untracked"

    def __str__(self) -> str:
        return self.value


class CapacityKind(Enum):
    """Tag of a Capacity value."""

    UNLIMITED = "unlimited"
    BOUNDED = "bounded"
    UNTRACKED = "untracked"


UNLIMITED_SENTINEL = -1
UNTRACKED_SENTINEL = -2


@dataclass(frozen=True)
class Capacity(ValueObject):
    """
    Maximum number of distinct evidence values a license may bind.

    Storage and the HTTP API still speak the legacy integers: -1 for
    unlimited, -2 for "tracking disabled", any non-negative number for a
    hard cap. Use from_sentinel/to_sentinel at those edges only.
    """

    kind: CapacityKind
    limit: Optional[int] = None

    def __post_init__(self):
        """Validate capacity."""
        if self.kind == CapacityKind.BOUNDED:
            if self.limit is None or self.limit < 0:
                raise ValueError("Bounded capacity needs a non-negative limit")
        elif self.limit is not None:
            raise ValueError(f"{self.kind.value} capacity takes no limit")

    @classmethod
    def unlimited(cls) -> "Capacity":
        return cls(CapacityKind.UNLIMITED)

    @classmethod
    def untracked(cls) -> "Capacity":
        return cls(CapacityKind.UNTRACKED)

    @classmethod
    def bounded(cls, limit: int) -> "Capacity":
        return cls(CapacityKind.BOUNDED, limit)

    @classmethod
    def from_sentinel(cls, value) -> "Capacity":
        """
        Build a Capacity from its stored integer form.

        Args:
            value: -1, -2 or a non-negative integer (ints in strings accepted)

        Returns:
            Capacity instance

        Raises:
            ValueError: If the value is not a valid capacity
        """
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            raise ValueError(f"Invalid capacity: {value!r}")
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid capacity: {value!r}") from None
        if number == UNLIMITED_SENTINEL:
            return cls.unlimited()
        if number == UNTRACKED_SENTINEL:
            return cls.untracked()
        if number < 0:
            raise ValueError(f"Invalid capacity: {value!r}")
        return cls.bounded(number)

    def to_sentinel(self) -> int:
        """Return the stored integer form."""
        if self.kind == CapacityKind.UNLIMITED:
            return UNLIMITED_SENTINEL
        if self.kind == CapacityKind.UNTRACKED:
            return UNTRACKED_SENTINEL
        return self.limit

    @property
    def is_unlimited(self) -> bool:
        return self.kind == CapacityKind.UNLIMITED

    @property
    def is_untracked(self) -> bool:
        return self.kind == CapacityKind.UNTRACKED

    def __str__(self) -> str:
        if self.kind == CapacityKind.BOUNDED:
            return str(self.limit)
        return self.kind.value
