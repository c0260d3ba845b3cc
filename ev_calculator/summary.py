"""Display helpers for calculator results.

Formatting lives here rather than in the dashboard so the copyable summary and
the leg table can be tested without a Streamlit runtime.
"""

from typing import Sequence

import pandas as pd

from .config import CURRENCY_SYMBOL
from .models import EvComputation, NormalizedLeg, SingleResult
from .odds import format_decimal


def format_currency(value: float) -> str:
    """Format a currency amount with two decimals and thousands separators.

    Examples:
        >>> format_currency(1234.5)
        '$1,234.50'
        >>> format_currency(-5)
        '-$5.00'
    """
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(value):,.2f}"


def format_percent(value: float) -> str:
    """Format a value that is already a percentage.

    Examples:
        >>> format_percent(12.5)
        '12.50 %'
    """
    return f"{value:.2f} %"


def format_probability(probability: float) -> str:
    """Format a 0-1 probability as a percentage.

    Examples:
        >>> format_probability(0.55)
        '55.00 %'
    """
    return format_percent(probability * 100)


def trend_label(value: float) -> str:
    """Classify a metric for colouring: 'positive', 'negative' or 'neutral'."""
    if value > 0:
        return "positive"
    elif value < 0:
        return "negative"
    else:
        return "neutral"


def stake_advice(result: SingleResult) -> str:
    """One-line Kelly stake advice for a single or parlay result.

    Returns:
        - No stake advice when the Kelly fraction is zero
        - Full/half/quarter Kelly amounts when a bankroll was given
        - A prompt to enter a bankroll otherwise
    """
    if result.kelly_fraction <= 0:
        return "No stake recommended (negative Kelly)."

    recommendations = result.kelly_recommendations
    if recommendations is None:
        return (
            f"Kelly fraction is {format_percent(result.kelly_fraction * 100)}. "
            "Enter a bankroll to see stake amounts."
        )

    return (
        f"Recommended stake: full Kelly {format_currency(recommendations.full)}, "
        f"half {format_currency(recommendations.half)}, "
        f"quarter {format_currency(recommendations.quarter)}."
    )


def _summary_line(label: str, result: SingleResult) -> str:
    return (
        f"{label}: EV {format_currency(result.ev_value)}, "
        f"ROI {format_percent(result.roi_percent)}, "
        f"Edge {format_percent(result.edge_percent)}, "
        f"Kelly {format_percent(result.kelly_fraction * 100)}"
    )


def format_summary(computation: EvComputation) -> str:
    """Plain-text summary of a computation, one line per bet.

    Examples:
        Single: EV $10.00, ROI 10.00 %, Edge 5.00 %, Kelly 10.00 %
        Parlay: EV $18.80, ROI 18.80 %, Edge 5.22 %, Kelly 7.23 %
    """
    lines = [_summary_line("Single", computation.single)]
    if computation.parlay is not None:
        lines.append(_summary_line("Parlay", computation.parlay))
    return "\n".join(lines)


def legs_frame(legs: Sequence[NormalizedLeg]) -> pd.DataFrame:
    """Tabulate normalized parlay legs for display.

    Returns:
        DataFrame with one row per leg; empty (with columns) when there are no legs
    """
    columns = ["Leg", "Odds", "American", "Fraction", "Own Prob", "Implied", "Source"]
    rows = [
        {
            "Leg": leg.id,
            "Odds": format_decimal(leg.decimal_odds),
            "American": leg.american_odds,
            "Fraction": leg.fractional_odds,
            "Own Prob": format_probability(leg.own_probability),
            "Implied": format_probability(leg.implied_probability),
            "Source": leg.own_probability_source.value,
        }
        for leg in legs
    ]
    return pd.DataFrame(rows, columns=columns)
