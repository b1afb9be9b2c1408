"""
Capacity policy.

Decides whether a piece of evidence (an IP or a HWID) may be bound to a
license, given the values already bound and the configured capacity.
"""
from typing import Sequence

from core.domain.value_objects import Admission, Capacity, CapacityKind


class CapacityPolicy:
    """Pure admission rule shared by validation and admin identity patches."""

    @staticmethod
    def admit(existing: Sequence[str], candidate: str, capacity: Capacity) -> Admission:
        """
        Evaluate a candidate against a license allow-list.

        Args:
            existing: Values already bound, in insertion order
            candidate: Value presented by the client
            capacity: Capacity configured for this evidence kind

        Returns:
            UNTRACKED when tracking is disabled, ALREADY_PRESENT when the
            value is bound already, REJECTED when a bounded list is full,
            ADMITTED otherwise
        """
        if capacity.kind == CapacityKind.UNTRACKED:
            return Admission.UNTRACKED
        if candidate in existing:
            return Admission.ALREADY_PRESENT
        if capacity.kind == CapacityKind.BOUNDED and len(existing) >= capacity.limit:
            return Admission.REJECTED
        return Admission.ADMITTED
