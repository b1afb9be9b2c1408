"""
Validation DTOs.
"""
from dataclasses import dataclass, field
from typing import Dict

from core.domain.value_objects import Admission, EvidenceKind
from licenses.domain.license import License
from products.domain.product import Product


@dataclass
class ValidationResultDTO:
    """Outcome of a successful validation."""

    license: License
    product: Product
    admissions: Dict[EvidenceKind, Admission] = field(default_factory=dict)

    def admission_for(self, kind: EvidenceKind) -> str:
        admission = self.admissions.get(kind)
        return admission.value if admission else "not_supplied"
