"""
License tier seat policy.
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from dashboard_client.exceptions import ValidationError


class LicenseTier(Enum):
    """Subscription / license tiers."""
    BASIC = "BASIC"
    PRO = "PRO"
    ENTERPRISE = "ENTERPRISE"


# tier -> (min seats, max seats or None for unbounded)
SEAT_LIMITS: Dict[LicenseTier, Tuple[int, Optional[int]]] = {
    LicenseTier.BASIC: (1, 1),
    LicenseTier.PRO: (1, 50),
    LicenseTier.ENTERPRISE: (10, None),
}

SEAT_MESSAGES = {
    LicenseTier.BASIC: "Basic plan supports exactly 1 seat.",
    LicenseTier.PRO: "Pro plan seats must be between 1 and 50.",
    LicenseTier.ENTERPRISE: "Enterprise requires minimum 10 seats.",
}


def parse_tier(tier: Any) -> LicenseTier:
    """
    Parse a tier name (case-insensitive).

    Raises:
        ValidationError: If the tier is missing or unknown
    """
    if isinstance(tier, LicenseTier):
        return tier
    if not tier:
        raise ValidationError("Please select a plan", {"tier": "Please select a plan"})
    try:
        return LicenseTier(str(tier).strip().upper())
    except ValueError:
        raise ValidationError(f"Unknown tier: {tier}", {"tier": f"Unknown tier: {tier}"})


def validate_seats(tier: Any, seats: Any) -> Tuple[LicenseTier, int]:
    """
    Check a seat count against the tier policy.

    BASIC permits exactly 1 seat, PRO 1 to 50 inclusive, ENTERPRISE at
    least 10 with no upper bound.

    Returns:
        (parsed tier, seat count)

    Raises:
        ValidationError: If the count is not a whole number or is out of bounds
    """
    parsed = parse_tier(tier)

    if isinstance(seats, bool) or not isinstance(seats, int):
        raise ValidationError("Seats must be a whole number", {"seats": "Seats must be a whole number"})

    minimum, maximum = SEAT_LIMITS[parsed]
    if seats < minimum or (maximum is not None and seats > maximum):
        message = SEAT_MESSAGES[parsed]
        raise ValidationError(message, {"seats": message})

    return parsed, seats
