from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from bookings.records import BookingRecord
from bookings.services.forms import ValidationErrors, submit_booking
from camps.plans import PLANS, Plan
from payments.services.intents import should_use_stub

from .exceptions import InvalidTransition, PaymentFlowError
from .processor import PaymentOutcome, PaymentProcessor, PaymentResult
from .providers import PaymentProvider, StubPaymentProvider
from .relay import RelayClient

logger = logging.getLogger(__name__)

ProcessorFactory = Callable[[BookingRecord], PaymentProcessor]


class ShellState(str, Enum):
    IDLE = "idle"
    BOOKING_FORM = "booking_form"
    PAYMENT = "payment"


@dataclass(frozen=True)
class ConfirmationNotice:
    payment_id: str
    amount: int
    currency: str

    @classmethod
    def from_result(cls, result: PaymentResult) -> "ConfirmationNotice":
        return cls(payment_id=result.payment_id, amount=result.amount, currency=result.currency)


def default_processor_factory(provider: Optional[PaymentProvider] = None, relay: Optional[RelayClient] = None) -> ProcessorFactory:
    """
    Build processors wired to the configured relay URL, currency and return URL.

    The scripted provider is only used in stub mode; with live Stripe keys the
    caller must pass the provider that confirms payments.
    """
    from django.conf import settings
    from django.core.exceptions import ImproperlyConfigured

    if provider is None:
        if not should_use_stub():
            raise ImproperlyConfigured("A payment provider is required when Stripe is not in stub mode.")
        provider = StubPaymentProvider()
    relay = relay or RelayClient.from_settings()

    def factory(booking: BookingRecord) -> PaymentProcessor:
        return PaymentProcessor(
            booking,
            relay=relay,
            provider=provider,
            currency=settings.PAYMENT_CURRENCY,
            return_url=settings.PAYMENT_RETURN_URL,
        )

    return factory


class BookingFlow:
    """
    Page-level orchestration: which overlay is open and which booking is in flight.

    idle -> booking form (plan picked) -> payment (valid form) -> idle with a
    confirmation notice, or back to the booking form on cancel or failure.
    """

    def __init__(self, processor_factory: ProcessorFactory, *, plans: Iterable[Plan] = PLANS):
        self.processor_factory = processor_factory
        self.plans = tuple(plans)

        self.state = ShellState.IDLE
        self.selected_plan: Optional[Plan] = None
        self.booking: Optional[BookingRecord] = None
        self.processor: Optional[PaymentProcessor] = None
        self.form_errors: ValidationErrors = ValidationErrors()
        self.payment_error: Optional[PaymentFlowError] = None
        self.notice: Optional[ConfirmationNotice] = None

    def _require(self, action: str, state: ShellState) -> None:
        if self.state != state:
            raise InvalidTransition(f"Cannot {action} from {self.state.value}")

    def select_plan(self, plan_id: int) -> Plan:
        self._require("select a plan", ShellState.IDLE)
        plan = next((plan for plan in self.plans if plan.id == plan_id), None)
        if plan is None:
            raise ValueError(f"Unknown plan: {plan_id}")
        self.selected_plan = plan
        self.booking = None
        self.payment_error = None
        self.form_errors = ValidationErrors()
        self.state = ShellState.BOOKING_FORM
        return plan

    def close_booking_form(self) -> None:
        self._require("close the booking form", ShellState.BOOKING_FORM)
        self.selected_plan = None
        self.booking = None
        self.payment_error = None
        self.form_errors = ValidationErrors()
        self.state = ShellState.IDLE

    def submit_booking(self, fields: Mapping[str, Any]) -> Union[BookingRecord, ValidationErrors]:
        self._require("submit a booking", ShellState.BOOKING_FORM)
        result = submit_booking(fields, self.selected_plan)
        if isinstance(result, ValidationErrors):
            self.form_errors = result
            return result

        self.form_errors = ValidationErrors()
        self.payment_error = None
        self.booking = result
        self.processor = self.processor_factory(result)
        self.state = ShellState.PAYMENT

        outcome = self.processor.initialize()
        if outcome.failed:
            self._return_to_form(outcome.error)
        return result

    def mark_payment_form_ready(self) -> None:
        self._require("prepare the payment form", ShellState.PAYMENT)
        self.processor.mark_element_ready()

    def confirm_payment(self) -> PaymentOutcome:
        self._require("confirm payment", ShellState.PAYMENT)
        outcome = self.processor.submit()
        if outcome.succeeded:
            self._complete(outcome.result)
        elif outcome.failed:
            self._return_to_form(outcome.error)
        return outcome

    def cancel_payment(self) -> None:
        self._require("cancel payment", ShellState.PAYMENT)
        self.processor.cancel()
        logger.info("Payment cancelled")
        self._teardown_processor()
        self.state = ShellState.BOOKING_FORM

    def dismiss_notice(self) -> None:
        self.notice = None

    def _teardown_processor(self) -> None:
        if self.processor is not None:
            self.processor.unmount()
        self.processor = None

    def _return_to_form(self, error: Optional[PaymentFlowError]) -> None:
        logger.info("Payment failed: %s", error)
        self._teardown_processor()
        self.payment_error = error
        self.state = ShellState.BOOKING_FORM

    def _complete(self, result: PaymentResult) -> None:
        logger.info("Payment successful: %s", result.payment_id)
        self._teardown_processor()
        self.notice = ConfirmationNotice.from_result(result)
        self.selected_plan = None
        self.booking = None
        self.state = ShellState.IDLE
