import pytest
from django.core.exceptions import ImproperlyConfigured

from checkout.exceptions import InvalidTransition, ProviderError, RelayError
from checkout.flow import BookingFlow, ConfirmationNotice, ShellState, default_processor_factory
from checkout.processor import PaymentProcessor, ProcessorState
from checkout.providers import ProviderErrorInfo, StripePaymentProvider, StubPaymentProvider
from checkout.relay import PaymentIntentResponse, RelayClient


class FakeRelay:
    def __init__(self, error=None):
        self.error = error
        self.requests = []

    def create_payment_intent(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return PaymentIntentResponse(client_secret="pi_777_secret_q", payment_intent_id="pi_777")


@pytest.fixture
def relay():
    return FakeRelay()


@pytest.fixture
def provider():
    return StubPaymentProvider()


@pytest.fixture
def flow(relay, provider):
    def factory(booking):
        return PaymentProcessor(booking, relay=relay, provider=provider)

    return BookingFlow(factory)


def test_starts_idle(flow):
    assert flow.state == ShellState.IDLE
    assert flow.processor is None
    assert flow.notice is None


def test_select_plan_opens_booking_form(flow):
    plan = flow.select_plan(2)

    assert plan.name == "3-Day Explorer"
    assert flow.state == ShellState.BOOKING_FORM
    assert flow.selected_plan == plan


def test_unknown_plan_is_rejected(flow):
    with pytest.raises(ValueError):
        flow.select_plan(9)
    assert flow.state == ShellState.IDLE


def test_close_booking_form_returns_to_idle(flow):
    flow.select_plan(1)

    flow.close_booking_form()

    assert flow.state == ShellState.IDLE
    assert flow.selected_plan is None


def test_invalid_form_stays_on_booking_form(flow, relay, booking_fields):
    flow.select_plan(1)
    booking_fields["childAge"] = "4"

    result = flow.submit_booking(booking_fields)

    assert result == {"childAge": "Child age must be between 6 and 16"}
    assert flow.form_errors == result
    assert flow.state == ShellState.BOOKING_FORM
    assert relay.requests == []


@pytest.mark.parametrize("plan_id, amount", [(1, 15000), (2, 40000), (3, 65000)])
def test_valid_form_opens_payment_with_plan_amount(flow, relay, booking_fields, plan_id, amount):
    flow.select_plan(plan_id)

    booking = flow.submit_booking(booking_fields)

    assert flow.state == ShellState.PAYMENT
    assert flow.booking == booking
    assert flow.processor.state == ProcessorState.READY
    assert relay.requests[0].amount == amount
    assert relay.requests[0].currency == "aed"


def test_successful_payment_shows_notice(flow, booking_fields):
    flow.select_plan(2)
    flow.submit_booking(booking_fields)
    processor = flow.processor
    flow.mark_payment_form_ready()

    outcome = flow.confirm_payment()

    assert outcome.succeeded
    assert flow.state == ShellState.IDLE
    assert flow.notice == ConfirmationNotice(payment_id="pi_777", amount=400, currency="aed")
    assert flow.booking is None
    assert flow.selected_plan is None
    assert flow.processor is None
    assert processor.mounted is False

    flow.dismiss_notice()
    assert flow.notice is None


def test_relay_failure_returns_to_booking_form(booking_fields, provider):
    error = RelayError("Amount and currency are required", status_code=400)
    relay = FakeRelay(error=error)
    flow = BookingFlow(lambda booking: PaymentProcessor(booking, relay=relay, provider=provider))
    flow.select_plan(2)

    flow.submit_booking(booking_fields)

    assert flow.state == ShellState.BOOKING_FORM
    assert flow.payment_error is error
    assert flow.booking is not None
    assert flow.processor is None
    assert provider.calls == []


def test_payment_failure_returns_to_booking_form(flow, provider, booking_fields):
    provider.confirm_error = ProviderErrorInfo("Your card was declined.", type="card_error", code="card_declined")
    flow.select_plan(3)
    flow.submit_booking(booking_fields)
    flow.mark_payment_form_ready()

    outcome = flow.confirm_payment()

    assert outcome.failed
    assert flow.state == ShellState.BOOKING_FORM
    assert isinstance(flow.payment_error, ProviderError)
    assert flow.selected_plan.id == 3

    provider.confirm_error = None
    flow.submit_booking(booking_fields)
    flow.mark_payment_form_ready()
    assert flow.confirm_payment().succeeded
    assert flow.payment_error is None


def test_cancel_payment_returns_to_booking_form(flow, booking_fields):
    flow.select_plan(2)
    flow.submit_booking(booking_fields)
    processor = flow.processor

    flow.cancel_payment()

    assert flow.state == ShellState.BOOKING_FORM
    assert processor.state == ProcessorState.CANCELLED
    assert processor.mounted is False
    assert flow.processor is None


def test_confirm_requires_payment_step(flow):
    with pytest.raises(InvalidTransition):
        flow.confirm_payment()


def test_default_factory_uses_settings(stub_stripe, booking):
    settings = stub_stripe
    settings.PAYMENT_RELAY_URL = "https://camp.test/api/create-payment-intent"
    settings.PAYMENT_CURRENCY = "aed"
    settings.PAYMENT_RETURN_URL = "https://camp.test/payment-success"

    processor = default_processor_factory()(booking)

    assert isinstance(processor.relay, RelayClient)
    assert processor.relay.url == "https://camp.test/api/create-payment-intent"
    assert isinstance(processor.provider, StubPaymentProvider)
    assert processor.currency == "aed"
    assert processor.return_url == "https://camp.test/payment-success"


def test_default_factory_needs_provider_outside_stub_mode(live_stripe, booking, relay):
    with pytest.raises(ImproperlyConfigured):
        default_processor_factory(relay=relay)

    provider = StripePaymentProvider("pm_card_visa")
    processor = default_processor_factory(provider=provider, relay=relay)(booking)

    assert processor.provider is provider
