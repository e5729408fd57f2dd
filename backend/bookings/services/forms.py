from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from bookings.records import BookingRecord
from bookings.serializers import BookingFormSerializer
from camps.plans import Plan

logger = logging.getLogger(__name__)


class ValidationErrors(dict):
    """Field name -> first error message, in the form's own field names."""

    @classmethod
    def from_serializer(cls, errors: Mapping[str, Any]) -> "ValidationErrors":
        flattened = cls()
        for field, messages in errors.items():
            if isinstance(messages, (list, tuple)):
                flattened[field] = str(messages[0]) if messages else ""
            else:
                flattened[field] = str(messages)
        return flattened


def submit_booking(
    fields: Mapping[str, Any],
    plan: Optional[Plan] = None,
) -> Union[BookingRecord, ValidationErrors]:
    """
    Validate booking form fields for ``plan``.

    Returns the immutable record when every check passes, otherwise the field errors.
    Nothing is stored either way.
    """

    context = {"plan": plan} if plan is not None else {}
    serializer = BookingFormSerializer(data=fields, context=context)
    if not serializer.is_valid():
        errors = ValidationErrors.from_serializer(serializer.errors)
        logger.info("Booking form rejected: %s", sorted(errors))
        return errors
    record = serializer.save()
    logger.info("Booking form accepted for plan %s", record.plan.name)
    return record
