from urllib.parse import urlsplit

import pytest
import stripe
from rest_framework.test import APIClient

from bookings.records import BookingRecord
from camps.plans import get_plan

RELAY_URL = "http://testserver/api/create-payment-intent"


class APIClientSession:
    """
    ``requests.Session`` look-alike that routes relay calls into the Django test client.

    Records every JSON payload so tests can assert on what the checkout sent.
    """

    def __init__(self):
        self.client = APIClient()
        self.payloads = []

    def post(self, url, json=None, timeout=None):
        self.payloads.append(json)
        return self.client.post(urlsplit(url).path, json, format="json")


@pytest.fixture
def booking_fields():
    return {
        "parentName": "Layla Haddad",
        "parentEmail": "layla@example.com",
        "parentPhone": "+971 50 123 4567",
        "parentAddress": "Villa 12, Al Wasl Road, Dubai",
        "childName": "Omar Haddad",
        "childAge": "9",
        "childGender": "male",
    }


@pytest.fixture
def explorer_plan():
    return get_plan(2)


@pytest.fixture
def booking(explorer_plan):
    return BookingRecord(
        parent_name="Layla Haddad",
        parent_email="layla@example.com",
        parent_phone="+971 50 123 4567",
        parent_address="Villa 12, Al Wasl Road, Dubai",
        child_name="Omar Haddad",
        child_age=9,
        child_gender="male",
        plan=explorer_plan,
    )


@pytest.fixture
def stripe_globals():
    original_api_key = stripe.api_key
    original_api_version = stripe.api_version
    yield
    stripe.api_key = original_api_key
    stripe.api_version = original_api_version


@pytest.fixture
def live_stripe(settings, stripe_globals):
    settings.STRIPE_USE_STUB = False
    settings.STRIPE_SECRET_KEY = "sk_test_123"
    settings.STRIPE_API_VERSION = "2023-10-16"
    return settings


@pytest.fixture
def stub_stripe(settings):
    settings.STRIPE_USE_STUB = True
    settings.STRIPE_SECRET_KEY = ""
    return settings


@pytest.fixture
def relay_session():
    return APIClientSession()
