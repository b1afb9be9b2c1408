"""
Unit tests for core value objects.
"""
import pytest

from core.domain.value_objects import (
    Capacity,
    CapacityKind,
    EvidenceKind,
    LicenseStatus,
    ValidationReason,
)


class TestCapacity:
    """Tests for Capacity value object."""

    def test_bounded(self):
        """Test bounded capacity keeps its limit."""
        capacity = Capacity.bounded(3)
        assert capacity.kind == CapacityKind.BOUNDED
        assert capacity.limit == 3
        assert not capacity.is_unlimited
        assert not capacity.is_untracked

    def test_zero_is_a_valid_bound(self):
        """Test a zero bound is allowed."""
        assert Capacity.bounded(0).limit == 0

    def test_negative_bound_rejected(self):
        """Test bounded capacity rejects negative limits."""
        with pytest.raises(ValueError, match="non-negative"):
            Capacity.bounded(-3)

    def test_unlimited_takes_no_limit(self):
        """Test unlimited capacity cannot carry a limit."""
        with pytest.raises(ValueError, match="takes no limit"):
            Capacity(CapacityKind.UNLIMITED, 5)

    @pytest.mark.parametrize(
        "value, expected",
        [
            (-1, Capacity.unlimited()),
            (-2, Capacity.untracked()),
            (0, Capacity.bounded(0)),
            (5, Capacity.bounded(5)),
            ("7", Capacity.bounded(7)),
            (2.0, Capacity.bounded(2)),
        ],
    )
    def test_from_sentinel(self, value, expected):
        """Test decoding of the stored integer form."""
        assert Capacity.from_sentinel(value) == expected

    @pytest.mark.parametrize("value", [-3, None, "abc", True, 1.5])
    def test_from_sentinel_invalid(self, value):
        """Test invalid stored values are rejected."""
        with pytest.raises(ValueError, match="Invalid capacity"):
            Capacity.from_sentinel(value)

    def test_to_sentinel(self):
        """Test encoding back to the stored integer form."""
        assert Capacity.unlimited().to_sentinel() == -1
        assert Capacity.untracked().to_sentinel() == -2
        assert Capacity.bounded(4).to_sentinel() == 4

    def test_equality_and_hash(self):
        """Test capacities compare by value."""
        assert Capacity.bounded(2) == Capacity.bounded(2)
        assert Capacity.bounded(2) != Capacity.bounded(3)
        assert len({Capacity.unlimited(), Capacity.unlimited()}) == 1

    def test_str(self):
        """Test string representation."""
        assert str(Capacity.bounded(2)) == "2"
        assert str(Capacity.unlimited()) == "unlimited"


class TestEnums:
    """Tests for enumerated value objects."""

    def test_license_status_values(self):
        """Test license status wire values."""
        assert str(LicenseStatus.ACTIVE) == "active"
        assert LicenseStatus("inactive") == LicenseStatus.INACTIVE

    def test_evidence_kind_label(self):
        """Test evidence kind labels used in error messages."""
        assert EvidenceKind.IP.label == "IP"
        assert EvidenceKind.HWID.label == "HWID"

    def test_reason_codes(self):
        """Test the stable reason codes."""
        assert {r.value for r in ValidationReason} == {
            "not_found",
            "product_not_found",
            "blacklisted",
            "unauthorized",
            "hwid_required",
            "expired",
            "inactive",
            "ip_capacity",
            "hwid_capacity",
        }
