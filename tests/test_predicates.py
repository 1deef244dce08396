"""Tests for the predicate library."""

from datetime import date, datetime

from viewcore.predicates import (
    contains_text,
    equals_number,
    in_date_range,
    in_range,
    in_set,
    matches_field_value,
)


def test_contains_text_is_case_insensitive():
    assert contains_text("Taxi Home", "home")
    assert contains_text("Taxi Home", "XI H")
    assert not contains_text("Taxi Home", "bus")
    assert not contains_text(42, "4")


def test_equals_number_accepts_numeric_strings():
    assert equals_number(12, 12)
    assert equals_number(12, "12")
    assert equals_number(12.5, "12.5")
    assert not equals_number(12, "abc")
    assert not equals_number(12, "nan")
    assert not equals_number("12", 12)


def test_in_range_inclusive_and_open():
    assert in_range(5, 5, 10)
    assert in_range(10, 5, 10)
    assert not in_range(4.99, 5, 10)
    assert in_range(1000, low=5)
    assert in_range(-1, high=0)
    assert in_range("x")
    assert not in_range("x", low=0)


def test_in_set():
    assert in_set("food", {"food", "rent"})
    assert not in_set("fun", {"food"})
    assert in_set("anything", [])
    assert in_set("anything", None)


def test_in_date_range():
    value = datetime(2024, 1, 10, 12)
    assert in_date_range(value, datetime(2024, 1, 10, 12), datetime(2024, 1, 10, 12))
    assert in_date_range(value, date(2024, 1, 1), None)
    assert not in_date_range(value, None, date(2024, 1, 10))
    assert in_date_range(None)
    assert not in_date_range(None, start=date(2024, 1, 1))


def test_matches_field_value_by_type():
    assert matches_field_value("Dinner out", "DIN")
    assert matches_field_value(30, "30")
    assert not matches_field_value(datetime(2024, 1, 1), "2024")
    assert not matches_field_value(None, "x")
    assert not matches_field_value(True, 1)
