"""
Payment step of the booking flow.

One ``PaymentProcessor`` per booking attempt:

    INITIALIZING -> READY | FAILED
    READY -> SUBMITTING -> SUCCEEDED | ERROR
    ERROR -> READY (retry)
    READY -> CANCELLED

Every step returns a ``PaymentOutcome``. After ``unmount()`` late responses are
dropped: the request is not aborted, its result is simply not applied.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from bookings.records import BookingRecord

from .exceptions import InvalidTransition, PaymentFlowError, ProviderError, RelayError, UnexpectedStateError
from .providers import REQUIRES_ACTION, SUCCEEDED, PaymentProvider
from .relay import PaymentIntentRequest, RelayClient

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "aed"


class ProcessorState(str, Enum):
    INITIALIZING = "initializing"
    READY = "ready"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    ERROR = "error"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class PaymentResult:
    payment_id: str
    amount: int
    currency: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "paymentId": self.payment_id,
            "amount": self.amount,
            "currency": self.currency,
        }


@dataclass(frozen=True)
class PaymentOutcome:
    READY = "ready"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
    STALE = "stale"

    status: str
    result: Optional[PaymentResult] = None
    error: Optional[PaymentFlowError] = None

    @property
    def succeeded(self) -> bool:
        return self.status == self.SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.status == self.FAILED


class PaymentProcessor:
    def __init__(
        self,
        booking: BookingRecord,
        *,
        relay: RelayClient,
        provider: PaymentProvider,
        currency: str = DEFAULT_CURRENCY,
        return_url: str = "",
    ):
        self.booking = booking
        self.relay = relay
        self.provider = provider
        self.currency = currency
        self.return_url = return_url

        self.state = ProcessorState.INITIALIZING
        self.client_secret: Optional[str] = None
        self.payment_intent_id: Optional[str] = None
        self.error: Optional[PaymentFlowError] = None
        self.element_ready = False
        self.mounted = True

    def _require(self, action: str, *states: ProcessorState) -> None:
        if self.state not in states:
            raise InvalidTransition(f"Cannot {action} while payment is {self.state.value}")

    def build_intent_request(self) -> PaymentIntentRequest:
        return PaymentIntentRequest(
            amount=self.booking.amount_minor_units,
            currency=self.currency,
            metadata=self.booking.payment_metadata(),
        )

    def initialize(self) -> PaymentOutcome:
        self._require("initialize", ProcessorState.INITIALIZING)
        logger.info("Creating payment intent for %s", self.booking.plan.name)
        try:
            response = self.relay.create_payment_intent(self.build_intent_request())
        except RelayError as exc:
            if not self.mounted:
                return PaymentOutcome(PaymentOutcome.STALE)
            logger.warning("Error creating payment intent: %s", exc)
            self.state = ProcessorState.FAILED
            self.error = exc
            return PaymentOutcome(PaymentOutcome.FAILED, error=exc)

        if not self.mounted:
            return PaymentOutcome(PaymentOutcome.STALE)
        self.client_secret = response.client_secret
        self.payment_intent_id = response.payment_intent_id
        self.state = ProcessorState.READY
        return PaymentOutcome(PaymentOutcome.READY)

    def mark_element_ready(self) -> None:
        """Called once the embedded card form has rendered."""
        self._require("mark the payment form ready", ProcessorState.READY)
        self.element_ready = True

    @property
    def can_submit(self) -> bool:
        return self.mounted and self.state == ProcessorState.READY and self.element_ready

    def submit(self) -> PaymentOutcome:
        self._require("submit", ProcessorState.READY)
        if not self.element_ready:
            raise InvalidTransition("Payment form is not ready yet")

        self.state = ProcessorState.SUBMITTING
        self.error = None
        try:
            result = self._confirm()
        except PaymentFlowError as exc:
            if not self.mounted:
                return PaymentOutcome(PaymentOutcome.STALE)
            logger.warning("Payment error: %s", exc)
            self.state = ProcessorState.ERROR
            self.error = exc
            return PaymentOutcome(PaymentOutcome.FAILED, error=exc)
        except Exception as exc:
            # Unexpected provider failures still end in ERROR.
            if not self.mounted:
                return PaymentOutcome(PaymentOutcome.STALE)
            logger.exception("Payment provider failed: %s", exc)
            error = PaymentFlowError(str(exc) or None)
            self.state = ProcessorState.ERROR
            self.error = error
            return PaymentOutcome(PaymentOutcome.FAILED, error=error)

        if not self.mounted:
            return PaymentOutcome(PaymentOutcome.STALE)
        logger.info("Payment %s succeeded", result.payment_id)
        self.state = ProcessorState.SUCCEEDED
        return PaymentOutcome(PaymentOutcome.SUCCEEDED, result=result)

    def _confirm(self) -> PaymentResult:
        confirmation = self.provider.confirm_payment(
            self.client_secret,
            return_url=self.return_url,
            redirect="if_required",
        )
        if confirmation.error is not None:
            raise ProviderError.from_info(confirmation.error)

        intent = confirmation.payment_intent
        if intent is None:
            raise UnexpectedStateError("No payment intent returned")

        if intent.status == SUCCEEDED:
            return self._result(intent.id)
        if intent.status == REQUIRES_ACTION:
            logger.info("Payment %s requires action", intent.id)
            action = self.provider.handle_next_action(intent.client_secret or self.client_secret)
            if action.error is not None:
                raise ProviderError.from_info(action.error)
            return self._result(intent.id)
        raise UnexpectedStateError(f"Unexpected payment status: {intent.status}", status=intent.status)

    def _result(self, payment_id: str) -> PaymentResult:
        # Amount comes from the plan, never from the provider response.
        return PaymentResult(
            payment_id=payment_id,
            amount=self.booking.plan.price,
            currency=self.currency,
        )

    def retry(self) -> None:
        self._require("retry", ProcessorState.ERROR)
        self.error = None
        self.state = ProcessorState.READY

    def cancel(self) -> PaymentOutcome:
        self._require("cancel", ProcessorState.READY)
        self.state = ProcessorState.CANCELLED
        return PaymentOutcome(PaymentOutcome.CANCELLED)

    def unmount(self) -> None:
        self.mounted = False
