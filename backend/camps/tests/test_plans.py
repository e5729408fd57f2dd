import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from camps.plans import PLANS, get_plan, get_plan_by_name


@pytest.mark.parametrize(
    "plan_id, name, price, minor_units",
    [
        (1, "1-Day Adventure", 150, 15000),
        (2, "3-Day Explorer", 400, 40000),
        (3, "5-Day Champion", 650, 65000),
    ],
)
def test_catalog_prices(plan_id, name, price, minor_units):
    plan = get_plan(plan_id)
    assert plan.name == name
    assert plan.price == price
    assert plan.amount_minor_units == minor_units


def test_only_explorer_is_popular():
    assert [plan.name for plan in PLANS if plan.popular] == ["3-Day Explorer"]


def test_lookup_helpers_handle_unknown_values():
    assert get_plan("2").name == "3-Day Explorer"
    assert get_plan(99) is None
    assert get_plan("abc") is None
    assert get_plan(None) is None
    assert get_plan_by_name("5-Day Champion").id == 3
    assert get_plan_by_name("Weekend Camp") is None
    assert get_plan_by_name("") is None


def test_plan_list_endpoint():
    response = APIClient().get(reverse("plan-list"))

    assert response.status_code == 200
    payload = response.json()
    assert [plan["id"] for plan in payload] == [1, 2, 3]
    explorer = payload[1]
    assert explorer["price"] == 400
    assert explorer["amount_minor_units"] == 40000
    assert explorer["duration"] == "3 Days"
    assert explorer["popular"] is True
    assert "Skills assessment" in explorer["features"]
