import re

from rest_framework import serializers

from bookings.records import BookingRecord
from camps.plans import get_plan

REQUIRED_MESSAGE = "This field is required"
EMAIL_MESSAGE = "Please enter a valid email address"
PHONE_MESSAGE = "Please enter a valid phone number"
AGE_MESSAGE = "Child age must be between 6 and 16"
GENDER_MESSAGE = "Please select a valid gender"
PLAN_MESSAGE = "Please select a valid plan"

# Matched against the whole value, so embedded spaces are rejected.
EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
PHONE_PATTERN = re.compile(r"\+?[\d\s\-()]+")

MIN_CHILD_AGE = 6
MAX_CHILD_AGE = 16
GENDERS = ("male", "female")

REQUIRED_ERRORS = {
    "required": REQUIRED_MESSAGE,
    "blank": REQUIRED_MESSAGE,
    "null": REQUIRED_MESSAGE,
}


def _required_char(source: str) -> serializers.CharField:
    return serializers.CharField(source=source, error_messages=REQUIRED_ERRORS)


def _optional_char(source: str) -> serializers.CharField:
    return serializers.CharField(source=source, allow_blank=True, default="")


class BookingFormSerializer(serializers.Serializer):
    """
    Booking form fields, keyed the way the web form posts them.

    The selected plan comes from ``context["plan"]`` when the caller already holds
    it, otherwise from the ``planId`` field.
    """

    parentName = _required_char("parent_name")
    parentEmail = _required_char("parent_email")
    parentPhone = _required_char("parent_phone")
    parentAddress = _required_char("parent_address")
    childName = _required_char("child_name")
    childAge = _required_char("child_age")
    childGender = _required_char("child_gender")

    medicalConditions = _optional_char("medical_conditions")
    emergencyContact = _optional_char("emergency_contact")
    emergencyPhone = _optional_char("emergency_phone")
    specialRequests = _optional_char("special_requests")

    planId = serializers.CharField(source="plan_id", required=False, allow_blank=True, allow_null=True)

    def validate_parentEmail(self, value):
        if not EMAIL_PATTERN.fullmatch(value):
            raise serializers.ValidationError(EMAIL_MESSAGE)
        return value

    def validate_parentPhone(self, value):
        if not PHONE_PATTERN.fullmatch(value):
            raise serializers.ValidationError(PHONE_MESSAGE)
        return value

    def validate_emergencyPhone(self, value):
        if value and not PHONE_PATTERN.fullmatch(value):
            raise serializers.ValidationError(PHONE_MESSAGE)
        return value

    def validate_childAge(self, value):
        try:
            age = int(value)
        except (TypeError, ValueError):
            raise serializers.ValidationError(AGE_MESSAGE)
        if age < MIN_CHILD_AGE or age > MAX_CHILD_AGE:
            raise serializers.ValidationError(AGE_MESSAGE)
        return age

    def validate_childGender(self, value):
        if value not in GENDERS:
            raise serializers.ValidationError(GENDER_MESSAGE)
        return value

    def validate(self, attrs):
        plan_id = attrs.pop("plan_id", None)
        plan = self.context.get("plan") or get_plan(plan_id)
        if plan is None:
            raise serializers.ValidationError({"planId": PLAN_MESSAGE})
        attrs["plan"] = plan
        return attrs

    def create(self, validated_data):
        return BookingRecord(**validated_data)
