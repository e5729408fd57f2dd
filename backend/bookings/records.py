from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from camps.plans import Plan


@dataclass(frozen=True)
class BookingRecord:
    """
    A validated booking handed from the form to the payment step.

    Never persisted; the checkout flow drops it once the payment succeeds or the
    parent backs out.
    """

    parent_name: str
    parent_email: str
    parent_phone: str
    parent_address: str
    child_name: str
    child_age: int
    child_gender: str
    plan: Plan
    medical_conditions: str = ""
    emergency_contact: str = ""
    emergency_phone: str = ""
    special_requests: str = ""

    @property
    def amount_minor_units(self) -> int:
        return self.plan.amount_minor_units

    def payment_metadata(self) -> Dict[str, str]:
        return {
            "childName": self.child_name,
            "planName": self.plan.name,
            "email": self.parent_email,
        }

    def to_dict(self) -> Dict[str, object]:
        return {
            "parentName": self.parent_name,
            "parentEmail": self.parent_email,
            "parentPhone": self.parent_phone,
            "parentAddress": self.parent_address,
            "childName": self.child_name,
            "childAge": self.child_age,
            "childGender": self.child_gender,
            "medicalConditions": self.medical_conditions,
            "emergencyContact": self.emergency_contact,
            "emergencyPhone": self.emergency_phone,
            "specialRequests": self.special_requests,
            "plan": {
                "id": self.plan.id,
                "name": self.plan.name,
                "price": self.plan.price,
            },
        }
