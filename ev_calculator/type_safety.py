"""Type safety utilities for user-entered numbers.

This module provides locale-aware parsing for form input (both ``.`` and ``,``
are accepted as decimal separators) plus the clamping and rounding helpers the
calculator applies at its output boundary.
"""

import math
from typing import Any, Optional, Union
import logging

from .models import RoundingMode

logger = logging.getLogger('ev_calculator')


def parse_locale_number(value: Any) -> float:
    """Parse a locale-formatted number.

    The first comma is treated as a decimal separator, so "2,5" and "2.5" both
    parse to 2.5. Thousands separators are not supported.

    Args:
        value: Number or numeric text (e.g., "2,20", " 1.91 ", "+150")

    Returns:
        Parsed finite float

    Raises:
        ValueError: If the value is empty, non-numeric or not finite

    Examples:
        >>> parse_locale_number("2,5")
        2.5
        >>> parse_locale_number("+150")
        150.0
        >>> parse_locale_number("abc")
        Traceback (most recent call last):
        ...
        ValueError: Invalid number: 'abc'
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid number: {value!r}")

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        clean_value = value.strip().replace(",", ".", 1)
        # float() would otherwise accept digit grouping like "1_000"
        if not clean_value or "_" in clean_value:
            raise ValueError(f"Invalid number: {value!r}")
        try:
            number = float(clean_value)
        except ValueError:
            raise ValueError(f"Invalid number: {value!r}") from None
    else:
        raise ValueError(f"Invalid number: {value!r}")

    if not math.isfinite(number):
        raise ValueError(f"Invalid number: {value!r}")

    return number


def parse_optional_number(value: Any) -> Optional[float]:
    """Parse an optional locale-formatted number.

    Args:
        value: Number, numeric text, blank text or None

    Returns:
        Parsed float, or None if the value is missing, blank or not a number

    Examples:
        >>> parse_optional_number("1000")
        1000.0
        >>> parse_optional_number("  ") is None
        True
        >>> parse_optional_number("ten") is None
        True
    """
    if value is None:
        return None
    if isinstance(value, str) and value.strip() == "":
        return None

    try:
        return parse_locale_number(value)
    except ValueError:
        logger.debug(f"Cannot parse number: {value!r}")
        return None


def parse_optional_probability(value: Any) -> Optional[float]:
    """Parse a percentage (0-100) into a probability (0-1).

    Args:
        value: Percentage text such as "55" or "33,3"

    Returns:
        Probability between 0 and 1, or None if missing, blank, non-numeric
        or outside 0-100

    Examples:
        >>> parse_optional_probability("55")
        0.55
        >>> parse_optional_probability("120") is None
        True
    """
    parsed = parse_optional_number(value)
    if parsed is None:
        return None
    if parsed < 0 or parsed > 100:
        logger.debug(f"Probability out of range: {value!r}")
        return None
    return parsed / 100


def is_blank(value: Any) -> bool:
    """Return True for None or whitespace-only text."""
    return value is None or (isinstance(value, str) and value.strip() == "")


def clamp_unit(value: float) -> float:
    """Clamp a value into [0, 1]; NaN maps to 0.

    Examples:
        >>> clamp_unit(1.4)
        1.0
        >>> clamp_unit(float("nan"))
        0.0
    """
    if math.isnan(value):
        return 0.0
    return min(1.0, max(0.0, float(value)))


# Probabilities and Kelly fractions share the same boundary policy
clamp_probability = clamp_unit
clamp_kelly = clamp_unit


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round to ``ndigits`` with halves rounded toward positive infinity.

    Python's built-in round() uses banker's rounding (round(2.5) == 2); money and
    odds displays here expect 2.5 -> 3 and -2.5 -> -2.

    Examples:
        >>> round_half_up(2.5)
        3.0
        >>> round_half_up(-2.5)
        -2.0
        >>> round_half_up(10.125, 2)
        10.13
        >>> round_half_up(1e307, 2)
        1e+307
    """
    factor = 10 ** ndigits
    scaled = value * factor
    # Values too large to scale are already integral at this precision
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / factor


def round_value(value: float, mode: Union[RoundingMode, str]) -> float:
    """Round a currency value according to the rounding mode.

    Args:
        value: Currency amount
        mode: 'none' (unchanged), 'two-decimal' (nearest 0.01) or
            'nearest-whole' (nearest integer)

    Returns:
        Rounded value

    Examples:
        >>> round_value(12.3456, "two-decimal")
        12.35
        >>> round_value(12.5, "nearest-whole")
        13.0
        >>> round_value(12.3456, "none")
        12.3456
    """
    if not math.isfinite(value):
        return value

    mode = RoundingMode(mode)
    if mode is RoundingMode.TWO_DECIMAL:
        return round_half_up(value, 2)
    if mode is RoundingMode.NEAREST_WHOLE:
        return round_half_up(value)
    return value
