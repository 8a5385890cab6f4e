"""
Unit tests for the license tier seat policy.
"""

import pytest

from dashboard_client.domain.licensing import LicenseTier, parse_tier, validate_seats
from dashboard_client.exceptions import ValidationError


@pytest.mark.parametrize("tier,seats", [
    ("BASIC", 1),
    ("PRO", 1),
    ("PRO", 50),
    ("ENTERPRISE", 10),
    ("ENTERPRISE", 1000),
    ("pro", 7),
])
def test_allowed_seat_counts(tier, seats):
    parsed, count = validate_seats(tier, seats)

    assert parsed == LicenseTier(tier.upper())
    assert count == seats


@pytest.mark.parametrize("tier,seats,message", [
    ("BASIC", 2, "Basic plan supports exactly 1 seat."),
    ("BASIC", 0, "Basic plan supports exactly 1 seat."),
    ("PRO", 0, "Pro plan seats must be between 1 and 50."),
    ("PRO", 51, "Pro plan seats must be between 1 and 50."),
    ("ENTERPRISE", 9, "Enterprise requires minimum 10 seats."),
])
def test_rejected_seat_counts(tier, seats, message):
    with pytest.raises(ValidationError) as exc_info:
        validate_seats(tier, seats)

    assert exc_info.value.errors == {"seats": message}


@pytest.mark.parametrize("seats", [True, 2.5, "3", None])
def test_seats_must_be_whole_number(seats):
    with pytest.raises(ValidationError) as exc_info:
        validate_seats("PRO", seats)

    assert "seats" in exc_info.value.errors


def test_unknown_tier():
    with pytest.raises(ValidationError) as exc_info:
        parse_tier("PLATINUM")

    assert "tier" in exc_info.value.errors


def test_missing_tier():
    with pytest.raises(ValidationError, match="Please select a plan"):
        validate_seats("", 1)
