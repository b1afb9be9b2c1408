"""
Unit tests for the capacity policy and the EvidenceBinder domain service.
"""

import pytest

from core.domain.exceptions import CapacityExceededError, EvidenceNotTrackedError
from core.domain.value_objects import Admission, Capacity, EvidenceKind, ValidationReason
from licenses.domain.capacity import CapacityPolicy
from licenses.domain.license import License
from licenses.domain.services import EvidenceBinder


def make_license(max_ips, max_hwids=None, ips=(), hwids=()):
    license = License.create(
        product_id="prod-1",
        discord_id="100000000000000001",
        max_ips=max_ips,
        max_hwids=max_hwids or Capacity.bounded(1),
    )
    for ip in ips:
        license = license.with_evidence({EvidenceKind.IP: ip})
    for hwid in hwids:
        license = license.with_evidence({EvidenceKind.HWID: hwid})
    return license


class TestCapacityPolicy:
    """Tests for CapacityPolicy.admit."""

    def test_admits_under_bound(self):
        """Test a new value is admitted while there is room."""
        assert CapacityPolicy.admit(["a"], "b", Capacity.bounded(2)) == Admission.ADMITTED

    def test_rejects_at_bound(self):
        """Test a new value is rejected once the list is full."""
        assert CapacityPolicy.admit(["a", "b"], "c", Capacity.bounded(2)) == Admission.REJECTED

    def test_known_value_passes_at_bound(self):
        """Test a bound value passes even when the list is full."""
        assert (
            CapacityPolicy.admit(["a", "b"], "b", Capacity.bounded(2))
            == Admission.ALREADY_PRESENT
        )

    def test_zero_bound_rejects_everything_new(self):
        """Test a zero capacity admits nothing."""
        assert CapacityPolicy.admit([], "a", Capacity.bounded(0)) == Admission.REJECTED

    def test_list_over_bound_still_rejects(self):
        """Test a list that exceeds a lowered bound rejects new values."""
        assert CapacityPolicy.admit(["a", "b", "c"], "d", Capacity.bounded(1)) == Admission.REJECTED
        assert (
            CapacityPolicy.admit(["a", "b", "c"], "c", Capacity.bounded(1))
            == Admission.ALREADY_PRESENT
        )

    def test_unlimited_admits(self):
        """Test unlimited capacity always admits new values."""
        existing = [str(n) for n in range(1000)]
        assert CapacityPolicy.admit(existing, "new", Capacity.unlimited()) == Admission.ADMITTED

    def test_untracked(self):
        """Test untracked capacity neither admits nor rejects."""
        assert CapacityPolicy.admit([], "a", Capacity.untracked()) == Admission.UNTRACKED
        assert CapacityPolicy.admit(["a"], "a", Capacity.untracked()) == Admission.UNTRACKED


class TestEvidenceBinder:
    """Tests for EvidenceBinder."""

    def test_bind_admits_both_kinds(self):
        """Test both kinds are appended when admitted."""
        license = make_license(Capacity.bounded(1), Capacity.bounded(1))

        bound, outcomes = EvidenceBinder.bind(
            license, {EvidenceKind.IP: "1.1.1.1", EvidenceKind.HWID: "HW-1"}
        )

        assert outcomes == {
            EvidenceKind.IP: Admission.ADMITTED,
            EvidenceKind.HWID: Admission.ADMITTED,
        }
        assert bound.allowed_ips == ("1.1.1.1",)
        assert bound.allowed_hwids == ("HW-1",)

    def test_missing_evidence_is_skipped(self):
        """Test kinds without a value are not evaluated."""
        license = make_license(Capacity.bounded(1))

        bound, outcomes = EvidenceBinder.bind(
            license, {EvidenceKind.IP: "1.1.1.1", EvidenceKind.HWID: None}
        )

        assert outcomes == {EvidenceKind.IP: Admission.ADMITTED}
        assert bound.allowed_hwids == ()

    def test_all_or_nothing(self):
        """Test an admitted IP is not kept when the HWID is rejected."""
        license = make_license(Capacity.bounded(1), Capacity.bounded(1), hwids=["HW-1"])

        with pytest.raises(CapacityExceededError) as exc_info:
            EvidenceBinder.bind(license, {EvidenceKind.IP: "1.1.1.1", EvidenceKind.HWID: "HW-2"})

        assert exc_info.value.kind == EvidenceKind.HWID
        assert exc_info.value.reason == ValidationReason.HWID_CAPACITY
        assert license.allowed_ips == ()

    def test_ip_rejection_reported_first(self):
        """Test the IP rejection wins when both kinds are full."""
        license = make_license(
            Capacity.bounded(1), Capacity.bounded(1), ips=["1.1.1.1"], hwids=["HW-1"]
        )

        with pytest.raises(CapacityExceededError) as exc_info:
            EvidenceBinder.bind(license, {EvidenceKind.IP: "2.2.2.2", EvidenceKind.HWID: "HW-2"})

        assert exc_info.value.reason == ValidationReason.IP_CAPACITY

    def test_already_present_does_not_duplicate(self):
        """Test a known value is not appended again."""
        license = make_license(Capacity.bounded(1), ips=["1.1.1.1"])

        bound, outcomes = EvidenceBinder.bind(license, {EvidenceKind.IP: "1.1.1.1"})

        assert outcomes[EvidenceKind.IP] == Admission.ALREADY_PRESENT
        assert bound.allowed_ips == ("1.1.1.1",)

    def test_untracked_is_not_recorded(self):
        """Test untracked evidence passes without being stored."""
        license = make_license(Capacity.untracked())

        bound, outcomes = EvidenceBinder.bind(license, {EvidenceKind.IP: "1.1.1.1"})

        assert outcomes[EvidenceKind.IP] == Admission.UNTRACKED
        assert bound.allowed_ips == ()

    def test_reject_untracked(self):
        """Test admin patches refuse evidence for untracked kinds."""
        license = make_license(Capacity.untracked())

        with pytest.raises(EvidenceNotTrackedError) as exc_info:
            EvidenceBinder.bind(license, {EvidenceKind.IP: "1.1.1.1"}, reject_untracked=True)

        assert exc_info.value.kind == EvidenceKind.IP
