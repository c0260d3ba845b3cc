"""
Shared pytest fixtures for EV calculator tests.

This module provides fixtures for:
- Raw form values with sensible defaults (overridable per test)
- Parlay leg inputs
- Computed results for the reference scenarios
"""

from typing import Any, Callable, Dict, List

import pytest

from ev_calculator.analysis import calculate_ev
from ev_calculator.models import EvComputation, FormValues, LegInput


# ============================================================================
# Form Fixtures
# ============================================================================

def _form(**overrides: Any) -> FormValues:
    values: Dict[str, Any] = {
        "odds_format": "decimal",
        "odds_value": "2.00",
        "own_probability": "55",
        "stake": "100",
        "bankroll": "",
        "edge_mode": "auto",
        "manual_edge": "",
        "rounding": "none",
        "parlay_enabled": False,
        "parlay_legs": [],
    }
    values.update(overrides)
    return FormValues(**values)


@pytest.fixture
def make_form() -> Callable[..., FormValues]:
    """
    Factory for form values.

    Defaults describe decimal odds 2.00, 55 % own probability, stake 100,
    auto edge mode, no rounding and parlay mode off.

    Returns:
        Callable accepting FormValues field overrides
    """
    return _form


@pytest.fixture
def two_legs() -> List[LegInput]:
    """
    Two-leg parlay: 2.00 @ 55 % and 1.80 @ 60 %.

    Returns:
        List of LegInput
    """
    return [
        LegInput(id="leg-1", odds_format="decimal", odds_value="2.00", own_probability="55"),
        LegInput(id="leg-2", odds_format="decimal", odds_value="1.80", own_probability="60"),
    ]


@pytest.fixture
def implied_legs() -> List[LegInput]:
    """
    Legs without own probabilities (implied fallback) in mixed formats.

    Returns:
        List of LegInput
    """
    return [
        LegInput(id="a", odds_format="american", odds_value="+150"),
        LegInput(id="b", odds_format="fraction", odds_value="5/2", own_probability=""),
    ]


# ============================================================================
# Computation Fixtures
# ============================================================================

@pytest.fixture
def decimal_computation() -> EvComputation:
    """
    Reference single bet: decimal 2.00, 55 %, stake 100, bankroll 1000.

    Returns:
        EvComputation
    """
    return calculate_ev(_form(bankroll="1000"))


@pytest.fixture
def parlay_computation(two_legs: List[LegInput]) -> EvComputation:
    """
    Reference parlay computation built from the two_legs fixture.

    Returns:
        EvComputation with a parlay result
    """
    return calculate_ev(_form(parlay_enabled=True, parlay_legs=two_legs))
