"""Math logic and EV calculation for single and parlay bets.

This module provides the pure formulas behind the calculator (net profit, EV,
ROI, break-even, edge and Kelly sizing), the leg and input normalization that
feeds them, and ``calculate_ev`` which ties validation and evaluation together.
No function here holds state or touches I/O; identical inputs always give
identical results.
"""

from typing import List, Optional, Sequence, Tuple
import logging

from .config import KELLY_MULTIPLIERS, NEGATIVE_KELLY_WARNING, OVER_UNITY_KELLY_WARNING
from .models import (
    EdgeMode,
    EvComputation,
    FormValues,
    KellyRecommendations,
    LegInput,
    NormalizedInputs,
    NormalizedLeg,
    OddsFormat,
    ParlayResult,
    ProbabilitySource,
    RoundingMode,
    SingleResult,
)
from .odds import implied_from_decimal, to_american, to_decimal, to_fraction
from .type_safety import (
    clamp_kelly,
    clamp_probability,
    parse_locale_number,
    parse_optional_number,
    parse_optional_probability,
    round_value,
)
from .validation import FormValidationError, validate_form

logger = logging.getLogger('ev_calculator')


def net_profit(decimal_odds: float, stake: float) -> float:
    """Profit on a winning bet, excluding the returned stake.

    Examples:
        >>> net_profit(2.5, 100)
        150.0
    """
    return (decimal_odds - 1) * stake


def ev_currency(decimal_odds: float, own_probability: float, stake: float) -> float:
    """Expected value of a bet in currency.

    Formula: EV = p * (d - 1) * s - (1 - p) * s

    Args:
        decimal_odds: Decimal odds (d)
        own_probability: Subjective win probability (p, 0 to 1)
        stake: Amount wagered (s)

    Returns:
        Expected profit (positive) or loss (negative) per bet

    Examples:
        >>> round(ev_currency(2.0, 0.55, 100), 2)
        10.0
        >>> round(ev_currency(2.5, 0.45, 100), 2)
        12.5
    """
    return own_probability * net_profit(decimal_odds, stake) - (1 - own_probability) * stake


def roi_percent(decimal_odds: float, own_probability: float) -> float:
    """Return on investment as a percentage: (d * p - 1) * 100.

    Examples:
        >>> roi_percent(2.5, 0.45)
        12.5
    """
    return (decimal_odds * own_probability - 1) * 100


def break_even_probability(decimal_odds: float) -> float:
    """Minimum win probability for zero EV, 1 / d."""
    return 1 / decimal_odds


def edge_percent(own_probability: float, implied_probability: float) -> float:
    """Edge in percentage points: (p - implied) * 100."""
    return (own_probability - implied_probability) * 100


def kelly_fraction(decimal_odds: float, own_probability: float) -> float:
    """Raw (unclamped) Kelly fraction of bankroll.

    Formula: f* = (b * p - q) / b, with b = d - 1 and q = 1 - p.
    Degenerate odds (b <= 0) return 0.0.

    Examples:
        >>> round(kelly_fraction(2.5, 0.45), 4)
        0.0833
        >>> kelly_fraction(1.0, 0.9)
        0.0
    """
    b = decimal_odds - 1
    if b <= 0:
        return 0.0
    q = 1 - own_probability
    return (b * own_probability - q) / b


def kelly_warnings(raw_kelly: float) -> List[str]:
    """Advisory messages for a raw Kelly fraction outside (0, 1]."""
    warnings = []
    if raw_kelly <= 0:
        warnings.append(NEGATIVE_KELLY_WARNING)
    if raw_kelly > 1:
        warnings.append(OVER_UNITY_KELLY_WARNING)
    return warnings


def kelly_recommendations(
    bankroll: Optional[float],
    kelly: float,
    rounding: RoundingMode,
) -> Optional[KellyRecommendations]:
    """Full, half and quarter Kelly stakes, or None without a bankroll."""
    if bankroll is None:
        return None
    return KellyRecommendations(
        full=round_value(bankroll * kelly * KELLY_MULTIPLIERS["full"], rounding),
        half=round_value(bankroll * kelly * KELLY_MULTIPLIERS["half"], rounding),
        quarter=round_value(bankroll * kelly * KELLY_MULTIPLIERS["quarter"], rounding),
    )


def _evaluate(
    decimal_odds: float,
    implied_probability: float,
    own_probability: float,
    stake: float,
    bankroll: Optional[float],
    rounding: RoundingMode,
    edge: float,
) -> dict:
    # Fields shared by single and parlay results
    raw_kelly = kelly_fraction(decimal_odds, own_probability)
    kelly = clamp_kelly(raw_kelly)
    return dict(
        decimal_odds=decimal_odds,
        american_odds=to_american(decimal_odds),
        fractional_odds=to_fraction(decimal_odds),
        implied_probability=implied_probability,
        own_probability=own_probability,
        break_even_probability=break_even_probability(decimal_odds),
        stake=stake,
        net_profit=net_profit(decimal_odds, stake),
        ev_value=round_value(ev_currency(decimal_odds, own_probability, stake), rounding),
        roi_percent=roi_percent(decimal_odds, own_probability),
        edge_percent=edge,
        kelly_fraction=kelly,
        kelly_recommendations=kelly_recommendations(bankroll, kelly, rounding),
        bankroll=bankroll,
        rounding=rounding,
        warnings=tuple(kelly_warnings(raw_kelly)),
    )


def normalize_leg(leg: LegInput, index: int = 0) -> NormalizedLeg:
    """Normalize one parlay leg.

    Odds must already be valid for the leg's format. A probability that is
    missing, blank or outside 0-100 falls back to the implied probability.

    Args:
        leg: Raw leg input
        index: Position of the leg, used for the default id 'leg-<n>'

    Returns:
        NormalizedLeg with decimal, American and fractional odds

    Examples:
        >>> leg = normalize_leg(LegInput(odds_value="2.00", own_probability="55"))
        >>> leg.id, leg.own_probability, leg.own_probability_source.value
        ('leg-1', 0.55, 'user')
    """
    odds_format = OddsFormat(leg.odds_format)
    decimal_odds = to_decimal(odds_format, leg.odds_value)
    implied = implied_from_decimal(decimal_odds)

    own_probability = parse_optional_probability(leg.own_probability)
    if own_probability is not None:
        source = ProbabilitySource.USER
    else:
        own_probability = implied
        source = ProbabilitySource.IMPLIED

    return NormalizedLeg(
        id=leg.id or f"leg-{index + 1}",
        format=odds_format,
        odds_input=leg.odds_value,
        decimal_odds=decimal_odds,
        implied_probability=implied,
        own_probability=clamp_probability(own_probability),
        own_probability_source=source,
        american_odds=to_american(decimal_odds),
        fractional_odds=to_fraction(decimal_odds),
    )


def resolve_probability(
    implied_probability: float,
    edge_mode: EdgeMode,
    own_probability_text: Optional[str],
    manual_edge_percent: Optional[float] = None,
) -> Tuple[float, ProbabilitySource]:
    """Pick the subjective probability and record where it came from.

    Order: manual edge (implied + edge/100), then the user's percentage, then
    the implied probability. The result is always clamped to [0, 1].

    Examples:
        >>> resolve_probability(0.5, EdgeMode.MANUAL, "", 5.0)
        (0.55, <ProbabilitySource.MANUAL_EDGE: 'manualEdge'>)
        >>> resolve_probability(0.5, EdgeMode.AUTO, "")
        (0.5, <ProbabilitySource.IMPLIED: 'implied'>)
    """
    if edge_mode is EdgeMode.MANUAL and manual_edge_percent is not None:
        return (
            clamp_probability(implied_probability + manual_edge_percent / 100),
            ProbabilitySource.MANUAL_EDGE,
        )

    own_probability = parse_optional_probability(own_probability_text)
    if own_probability is not None:
        return clamp_probability(own_probability), ProbabilitySource.USER

    return clamp_probability(implied_probability), ProbabilitySource.IMPLIED


def normalize_inputs(form: FormValues) -> NormalizedInputs:
    """Resolve validated form values into calculator inputs.

    Call ``validate_form`` first; invalid stake, bankroll, manual edge or odds
    raise ValueError (or an OddsError) here.
    """
    base_format = OddsFormat(form.odds_format)
    edge_mode = EdgeMode(form.edge_mode)
    rounding = RoundingMode(form.rounding)

    decimal_odds = to_decimal(base_format, form.odds_value)
    implied = implied_from_decimal(decimal_odds)

    stake = parse_locale_number(form.stake)
    if stake <= 0:
        raise ValueError(f"Stake must be greater than 0, got {stake}")

    bankroll = parse_optional_number(form.bankroll)
    if bankroll is not None and bankroll <= 0:
        raise ValueError(f"Bankroll must be greater than 0, got {bankroll}")

    manual_edge = None
    if edge_mode is EdgeMode.MANUAL:
        manual_edge = parse_optional_number(form.manual_edge)
        if manual_edge is None:
            raise ValueError(f"Manual edge must be numeric, got {form.manual_edge!r}")

    own_probability, source = resolve_probability(implied, edge_mode, form.own_probability, manual_edge)

    # Legs are only validated in parlay mode, so only normalize them then
    legs: Tuple[NormalizedLeg, ...] = ()
    if form.parlay_enabled:
        legs = tuple(normalize_leg(leg, index) for index, leg in enumerate(form.parlay_legs))

    return NormalizedInputs(
        stake=stake,
        bankroll=bankroll,
        rounding=rounding,
        edge_mode=edge_mode,
        manual_edge_percent=manual_edge,
        base_format=base_format,
        decimal_odds=decimal_odds,
        implied_probability=implied,
        own_probability=own_probability,
        own_probability_source=source,
        american_odds=to_american(decimal_odds),
        fractional_odds=to_fraction(decimal_odds),
        parlay_legs=legs,
        parlay_enabled=form.parlay_enabled,
    )


def build_single_result(inputs: NormalizedInputs) -> SingleResult:
    """Evaluate the single bet described by the normalized inputs.

    In manual edge mode the entered edge is reported as-is instead of being
    recomputed from the probabilities.
    """
    if inputs.edge_mode is EdgeMode.MANUAL and inputs.manual_edge_percent is not None:
        edge = inputs.manual_edge_percent
    else:
        edge = edge_percent(inputs.own_probability, inputs.implied_probability)

    fields = _evaluate(
        inputs.decimal_odds,
        inputs.implied_probability,
        inputs.own_probability,
        inputs.stake,
        inputs.bankroll,
        inputs.rounding,
        edge,
    )
    return SingleResult(
        own_probability_source=inputs.own_probability_source,
        manual_edge_percent=inputs.manual_edge_percent,
        **fields,
    )


def combine_legs(legs: Sequence[NormalizedLeg]) -> Tuple[float, float, float, ProbabilitySource]:
    """Combine parlay legs into one proposition.

    Legs are treated as independent, so odds and probabilities multiply. The
    combined source is 'implied' only when every leg used its implied
    probability; otherwise 'user'.

    Returns:
        Tuple of (decimal_odds, implied_probability, own_probability, source)
    """
    decimal_odds = 1.0
    implied = 1.0
    own = 1.0
    for leg in legs:
        decimal_odds *= leg.decimal_odds
        implied *= leg.implied_probability
        own *= leg.own_probability

    if all(leg.own_probability_source is ProbabilitySource.IMPLIED for leg in legs):
        source = ProbabilitySource.IMPLIED
    else:
        source = ProbabilitySource.USER

    return decimal_odds, implied, own, source


def build_parlay_result(inputs: NormalizedInputs) -> Optional[ParlayResult]:
    """Evaluate the parlay, or return None when parlay mode is off or has no legs.

    Parlay edge is always derived from the combined probabilities, even in
    manual edge mode.
    """
    if not inputs.parlay_enabled or not inputs.parlay_legs:
        return None

    decimal_odds, implied, own, source = combine_legs(inputs.parlay_legs)
    fields = _evaluate(
        decimal_odds,
        implied,
        own,
        inputs.stake,
        inputs.bankroll,
        inputs.rounding,
        edge_percent(own, implied),
    )
    return ParlayResult(own_probability_source=source, legs=inputs.parlay_legs, **fields)


def calculate_ev(form: FormValues) -> EvComputation:
    """Validate form values and compute single and parlay results.

    Args:
        form: Raw form values

    Returns:
        EvComputation with the resolved inputs, the single result and the
        parlay result (None unless parlay mode is on with at least one leg)

    Raises:
        FormValidationError: If any field is invalid; ``error.result`` holds
            every per-field message

    Examples:
        >>> form = FormValues(odds_value="2.00", own_probability="55", stake="100")
        >>> round(calculate_ev(form).single.ev_value, 2)
        10.0
    """
    validation = validate_form(form)
    if not validation.is_valid:
        raise FormValidationError(validation)

    inputs = normalize_inputs(form)
    single = build_single_result(inputs)
    parlay = build_parlay_result(inputs)

    logger.debug(
        f"Calculated EV {single.ev_value} at odds {single.decimal_odds} "
        f"({single.own_probability_source.value} probability {single.own_probability:.4f})"
        + (f"; parlay of {len(parlay.legs)} legs EV {parlay.ev_value}" if parlay else "")
    )

    return EvComputation(inputs=inputs, single=single, parlay=parlay)
