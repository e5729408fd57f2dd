from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Plan:
    """A bookable camp package. Prices are whole major units (AED)."""

    id: int
    name: str
    price: int
    duration: str
    description: str
    features: Tuple[str, ...]
    popular: bool = False

    @property
    def amount_minor_units(self) -> int:
        return self.price * 100


PLANS: Tuple[Plan, ...] = (
    Plan(
        id=1,
        name="1-Day Adventure",
        price=150,
        duration="1 Day",
        description="Perfect for trying out our multi-sport experience",
        features=(
            "3 different sports activities",
            "Professional coaching",
            "Lunch included",
            "All equipment provided",
            "Certificate of participation",
        ),
    ),
    Plan(
        id=2,
        name="3-Day Explorer",
        price=400,
        duration="3 Days",
        description="Dive deeper into various sports and build new skills",
        features=(
            "6+ different sports activities",
            "Professional coaching",
            "Daily lunch included",
            "All equipment provided",
            "Skills assessment",
            "Photo memories package",
        ),
        popular=True,
    ),
    Plan(
        id=3,
        name="5-Day Champion",
        price=650,
        duration="5 Days",
        description="Complete immersion in our multi-sport program",
        features=(
            "10+ different sports activities",
            "Professional coaching",
            "Daily lunch included",
            "All equipment provided",
            "Skills assessment",
            "Photo memories package",
            "Camp t-shirt",
            "Achievement awards",
        ),
    ),
)


def get_plan(plan_id) -> Optional[Plan]:
    try:
        plan_id = int(plan_id)
    except (TypeError, ValueError):
        return None
    for plan in PLANS:
        if plan.id == plan_id:
            return plan
    return None


def get_plan_by_name(name: str | None) -> Optional[Plan]:
    if not name:
        return None
    for plan in PLANS:
        if plan.name == name:
            return plan
    return None
