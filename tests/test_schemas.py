from datetime import date
from decimal import Decimal

import pytest

from isready.errors import ValidationError
from isready.schemas import OrderForm, parse_amount, parse_delivery_date

from tests.conftest import make_order


@pytest.mark.parametrize("raw, expected", [
    ("1500", Decimal("1500")),
    (" 99.50 ", Decimal("99.50")),
    ("", Decimal("0")),
    ("abc", Decimal("0")),
    ("NaN", Decimal("0")),
])
def test_parse_amount_falls_back_to_zero(raw, expected):
    assert parse_amount(raw, "price") == expected


def test_parse_amount_rejects_negative():
    with pytest.raises(ValidationError, match="Advance payment cannot be negative"):
        parse_amount("-1", "advance_payment")


def test_parse_amount_rounds_to_cents():
    assert str(parse_amount("1500.555", "price")) == "1500.56"
    assert str(parse_amount("99999999.99", "price")) == "99999999.99"


@pytest.mark.parametrize("raw", ["100000000", "12345678901", "1e30"])
def test_parse_amount_rejects_what_the_column_cannot_hold(raw):
    with pytest.raises(ValidationError, match="Price is too large"):
        parse_amount(raw, "price")


def test_parse_delivery_date():
    assert parse_delivery_date("") is None
    assert parse_delivery_date("2026-10-25") == date(2026, 10, 25)


def test_form_defaults_optional_fields():
    fields = OrderForm(customer_name=" Amy ", customer_phone="5551234").to_fields()

    assert fields == {
        "customer_name": "Amy",
        "customer_phone": "5551234",
        "items": "",
        "measurements": "",
        "price": Decimal("0"),
        "advance_payment": Decimal("0"),
        "delivery_date": None,
        "notes": "",
    }


def test_form_accepts_numbers_from_json():
    assert OrderForm(customer_name="Amy", customer_phone="1", price=1500).price == "1500"


def test_balance_due_may_be_negative():
    assert make_order(price=Decimal("100"), advance_payment=Decimal("250")).balance_due == Decimal("-150")
