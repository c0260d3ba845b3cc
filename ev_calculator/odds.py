"""Odds conversion between decimal, American and fractional notation.

This module provides pure functions for parsing user-entered odds, converting
between notations and deriving implied probability. All functions are stateless
and raise an ``OddsError`` subclass for malformed or out-of-range input.
"""

import math
from typing import Tuple, Union

from .config import FRACTION_PRECISION
from .models import OddsFormat
from .type_safety import parse_locale_number, round_half_up


class OddsError(ValueError):
    """Base exception for odds that cannot be parsed or converted."""
    pass


class InvalidOddsFormat(OddsError):
    """Odds text is not a number."""
    pass


class OddsOutOfRange(OddsError):
    """Decimal odds must be strictly greater than 1."""
    pass


class InvalidOddsValue(OddsError):
    """American odds of exactly 0 have no meaning."""
    pass


class InvalidFractionFormat(OddsError):
    """Fractional odds must be written n/d with both parts positive."""
    pass


class UnknownOddsFormat(OddsError):
    """Format tag is not decimal, american or fraction."""
    pass


class NonPositiveOdds(OddsError):
    """Implied probability needs strictly positive decimal odds."""
    pass


def _parse_number(text: str) -> float:
    try:
        return parse_locale_number(text)
    except ValueError:
        raise InvalidOddsFormat(f"Odds must be numeric, got {text!r}") from None


def parse_decimal_odds(text: str) -> float:
    """Parse decimal odds such as "2.00" or "1,91".

    Args:
        text: Decimal odds text, comma or point separated

    Returns:
        Decimal odds (> 1)

    Raises:
        InvalidOddsFormat: If the text is not numeric
        OddsOutOfRange: If the odds are <= 1 (no net payout)

    Examples:
        >>> parse_decimal_odds("2,20")
        2.2
        >>> parse_decimal_odds("1.00")
        Traceback (most recent call last):
        ...
        ev_calculator.odds.OddsOutOfRange: Decimal odds must be greater than 1, got 1.0
    """
    value = _parse_number(text)
    if value <= 1:
        raise OddsOutOfRange(f"Decimal odds must be greater than 1, got {value}")
    return value


def parse_american_odds(text: str) -> float:
    """Parse American odds and convert them to decimal odds.

    - Positive odds (e.g., +150): profit on a 100 stake -> 1 + odds/100
    - Negative odds (e.g., -200): stake needed to win 100 -> 1 + 100/|odds|

    Args:
        text: American odds text (e.g., "+150", "-110")

    Returns:
        Decimal odds

    Raises:
        InvalidOddsFormat: If the text is not numeric
        InvalidOddsValue: If the odds are exactly 0

    Examples:
        >>> parse_american_odds("+150")
        2.5
        >>> parse_american_odds("-200")
        1.5
    """
    value = _parse_number(text)
    if value == 0:
        raise InvalidOddsValue("American odds cannot be 0")
    if value > 0:
        return 1 + value / 100
    return 1 + 100 / abs(value)


def parse_fraction_odds(text: str) -> Tuple[float, float]:
    """Parse fractional odds written as "numerator/denominator".

    Args:
        text: Fractional odds text (e.g., "5/2", "11/10")

    Returns:
        Tuple of (numerator, denominator), both strictly positive

    Raises:
        InvalidFractionFormat: If there is not exactly one "/" or either part is
            non-numeric or not strictly positive

    Examples:
        >>> parse_fraction_odds("5/2")
        (5.0, 2.0)
        >>> parse_fraction_odds("5-2")
        Traceback (most recent call last):
        ...
        ev_calculator.odds.InvalidFractionFormat: Fractional odds must be written as n/d, got '5-2'
    """
    parts = str(text).split("/")
    if len(parts) != 2:
        raise InvalidFractionFormat(f"Fractional odds must be written as n/d, got {text!r}")

    try:
        numerator = parse_locale_number(parts[0])
        denominator = parse_locale_number(parts[1])
    except ValueError:
        raise InvalidFractionFormat(f"Fractional odds must be numeric, got {text!r}") from None

    if numerator <= 0 or denominator <= 0:
        raise InvalidFractionFormat(f"Fractional odds must be positive, got {text!r}")

    return numerator, denominator


def to_decimal(odds_format: Union[OddsFormat, str], text: str) -> float:
    """Convert odds text in any supported notation to decimal odds.

    Args:
        odds_format: 'decimal', 'american' or 'fraction'
        text: Raw odds text

    Returns:
        Decimal odds

    Raises:
        UnknownOddsFormat: If the format tag is not recognised
        OddsError: Any parse error for the selected notation

    Examples:
        >>> to_decimal("american", "+150")
        2.5
        >>> to_decimal("fraction", "5/2")
        3.5
    """
    try:
        odds_format = OddsFormat(odds_format)
    except ValueError:
        raise UnknownOddsFormat(f"Unknown odds format: {odds_format!r}") from None

    if odds_format is OddsFormat.DECIMAL:
        return parse_decimal_odds(text)
    if odds_format is OddsFormat.AMERICAN:
        return parse_american_odds(text)
    numerator, denominator = parse_fraction_odds(text)
    return 1 + numerator / denominator


def to_american(decimal_odds: float) -> str:
    """Express decimal odds in American notation.

    Decimal odds >= 2 give a '+' value, odds in (1, 2) give a '-' value.
    Odds <= 1 are not a valid bet and return the sentinel '+0', as do odds
    too large to express as a finite American value.

    Examples:
        >>> to_american(2.5)
        '+150'
        >>> to_american(1.5)
        '-200'
        >>> to_american(1.0)
        '+0'
        >>> to_american(float("inf"))
        '+0'
    """
    if decimal_odds <= 1:
        return "+0"
    if decimal_odds >= 2:
        sign, points = "+", (decimal_odds - 1) * 100
    else:
        sign, points = "-", 100 / (decimal_odds - 1)
    if not math.isfinite(points):
        return "+0"
    return f"{sign}{int(round_half_up(points))}"


def to_fraction(decimal_odds: float) -> str:
    """Express decimal odds as a reduced fraction.

    The net odds are approximated over a fixed denominator of 1000 and then
    reduced, so the result is only exact to three decimals (2.3333 -> '333/250').

    Examples:
        >>> to_fraction(3.5)
        '5/2'
        >>> to_fraction(1.91)
        '91/100'
        >>> to_fraction(1.0)
        '0/1'
        >>> to_fraction(float("inf"))
        '0/1'
    """
    if decimal_odds <= 1:
        return "0/1"
    scaled = (decimal_odds - 1) * FRACTION_PRECISION
    if not math.isfinite(scaled):
        return "0/1"
    numerator = int(round_half_up(scaled))
    denominator = FRACTION_PRECISION
    divisor = math.gcd(numerator, denominator) or 1
    return f"{numerator // divisor}/{denominator // divisor}"


def implied_from_decimal(decimal_odds: float) -> float:
    """Return the implied probability of decimal odds (1 / odds).

    Raises:
        NonPositiveOdds: If the odds are <= 0

    Examples:
        >>> implied_from_decimal(2.0)
        0.5
        >>> implied_from_decimal(4.0)
        0.25
    """
    if decimal_odds <= 0:
        raise NonPositiveOdds(f"Decimal odds must be positive, got {decimal_odds}")
    return 1 / decimal_odds


def format_decimal(decimal_odds: float, decimals: int = 2) -> str:
    """Fixed-point display of decimal odds.

    Examples:
        >>> format_decimal(3.6)
        '3.60'
    """
    return f"{decimal_odds:.{decimals}f}"
