"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
from typing import Dict, Optional, Tuple

from core.domain.exceptions import CapacityExceededError, EvidenceNotTrackedError
from core.domain.value_objects import Admission, EvidenceKind
from licenses.domain.capacity import CapacityPolicy
from licenses.domain.license import License

# Order in which rejections are reported when both kinds are over capacity.
EVIDENCE_ORDER = (EvidenceKind.IP, EvidenceKind.HWID)


class EvidenceBinder:
    """Domain service binding client evidence to a license's allow-lists."""

    @staticmethod
    def evaluate(
        license: License, evidence: Dict[EvidenceKind, Optional[str]]
    ) -> Dict[EvidenceKind, Admission]:
        """
        Run every supplied evidence value through the capacity policy.

        Args:
            license: License entity
            evidence: Evidence values by kind (None or empty means not supplied)

        Returns:
            Admission per supplied kind
        """
        outcomes = {}
        for kind in EVIDENCE_ORDER:
            value = evidence.get(kind)
            if not value:
                continue
            outcomes[kind] = CapacityPolicy.admit(
                license.evidence(kind), value, license.capacity(kind)
            )
        return outcomes

    @staticmethod
    def bind(
        license: License,
        evidence: Dict[EvidenceKind, Optional[str]],
        reject_untracked: bool = False,
    ) -> Tuple[License, Dict[EvidenceKind, Admission]]:
        """
        Admit evidence all-or-nothing.

        If any kind is rejected nothing is appended; the first rejection in
        IP, HWID order is raised.

        Args:
            license: License entity
            evidence: Evidence values by kind
            reject_untracked: Treat evidence for an untracked kind as a conflict

        Returns:
            Tuple of (updated license, admission per supplied kind)

        Raises:
            CapacityExceededError: If a bounded allow-list is full
            EvidenceNotTrackedError: If reject_untracked and a kind is untracked
        """
        outcomes = EvidenceBinder.evaluate(license, evidence)
        for kind, admission in outcomes.items():
            if admission == Admission.REJECTED:
                raise CapacityExceededError(kind)
            if reject_untracked and admission == Admission.UNTRACKED:
                raise EvidenceNotTrackedError(kind)

        admitted = {
            kind: evidence[kind]
            for kind, admission in outcomes.items()
            if admission == Admission.ADMITTED
        }
        return license.with_evidence(admitted), outcomes
