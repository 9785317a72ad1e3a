import pytest

from platefinder.recommendations.pricing import format_price, from_cents, parse_price, to_cents


def test_parse_price_comma_decimal():
    assert parse_price("119,40 MAD") == pytest.approx(119.40)


def test_parse_price_dot_decimal():
    assert parse_price("119.40 MAD") == pytest.approx(119.40)


def test_parse_price_integer_only():
    assert parse_price("120 MAD") == 120.0


def test_parse_price_takes_first_amount():
    assert parse_price("35,00 MAD au lieu de 42,00 MAD") == pytest.approx(35.0)


@pytest.mark.parametrize("text", ["", "MAD", "Gratuit", None, "  ", "--,--"])
def test_parse_price_unparseable_is_zero(text):
    assert parse_price(text) == 0


def test_parse_price_accepts_numbers():
    assert parse_price(42) == 42.0
    assert parse_price(-3) == 0.0


def test_format_price_uses_comma_and_currency():
    assert format_price(110) == "110,00 MAD"
    assert format_price(0.5) == "0,50 MAD"
    assert format_price(12.345, "EUR").endswith(" EUR")


@pytest.mark.parametrize("value", [0.0, 0.01, 9.99, 55.5, 110.0, 119.4, 1234.56])
def test_parse_format_round_trip(value):
    assert parse_price(format_price(value)) == pytest.approx(value, abs=0.005)


def test_cents_conversion():
    assert to_cents(119.4) == 11940
    assert to_cents(0.1 + 0.2) == 30
    assert from_cents(11000) == 110.0


@pytest.mark.parametrize("text", ["9" * 400 + " MAD", "9" * 400 + ",50 MAD", float("inf"), float("nan"), 10**400])
def test_parse_price_out_of_range_is_zero(text):
    assert parse_price(text) == 0


def test_parse_price_large_but_finite():
    value = parse_price("9" * 300)
    assert value > 0
    assert to_cents(value) > 0
