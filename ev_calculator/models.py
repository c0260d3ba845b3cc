"""Value objects for the EV calculator.

Raw form input (``FormValues``/``LegInput``) keeps every field as text, exactly as
the user typed it. Everything downstream of validation is a frozen dataclass so a
computed result can be cached, compared or rendered without defensive copies.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class OddsFormat(str, Enum):
    """Notation used for a raw odds string."""

    DECIMAL = "decimal"
    AMERICAN = "american"
    FRACTION = "fraction"


class RoundingMode(str, Enum):
    """Rounding applied to currency outputs (EV and Kelly stakes) only."""

    NONE = "none"
    TWO_DECIMAL = "two-decimal"
    NEAREST_WHOLE = "nearest-whole"


class EdgeMode(str, Enum):
    """How the subjective probability is derived.

    - AUTO: user-entered probability, falling back to the implied probability
    - MANUAL: implied probability plus a user-entered edge percentage
    """

    AUTO = "auto"
    MANUAL = "manual"


class ProbabilitySource(str, Enum):
    """Provenance of a subjective probability, disclosed alongside every result."""

    IMPLIED = "implied"
    MANUAL_EDGE = "manualEdge"
    USER = "user"


# Camel-case keys accepted from the external configuration record
_CAMEL_KEYS = {
    "oddsFormat": "odds_format",
    "oddsValue": "odds_value",
    "ownProbability": "own_probability",
    "edgeMode": "edge_mode",
    "manualEdge": "manual_edge",
    "parlayEnabled": "parlay_enabled",
    "parlayLegs": "parlay_legs",
}


def _snake_case_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    return {_CAMEL_KEYS.get(key, key): value for key, value in data.items()}


@dataclass
class LegInput:
    """One parlay leg as entered in the form."""

    id: str = ""
    odds_format: Union[OddsFormat, str] = OddsFormat.DECIMAL
    odds_value: str = ""
    own_probability: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LegInput":
        values = _snake_case_keys(data)
        return cls(
            id=str(values.get("id") or ""),
            odds_format=values.get("odds_format", OddsFormat.DECIMAL),
            odds_value=str(values.get("odds_value") or ""),
            own_probability=values.get("own_probability"),
        )


@dataclass
class FormValues:
    """The raw configuration record for one calculation."""

    odds_format: Union[OddsFormat, str] = OddsFormat.DECIMAL
    odds_value: str = ""
    own_probability: Optional[str] = None
    stake: str = ""
    bankroll: Optional[str] = None
    edge_mode: Union[EdgeMode, str] = EdgeMode.AUTO
    manual_edge: Optional[str] = None
    rounding: Union[RoundingMode, str] = RoundingMode.NONE
    parlay_enabled: bool = False
    parlay_legs: List[LegInput] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormValues":
        """Build form values from a mapping with snake_case or camelCase keys.

        Examples:
            >>> form = FormValues.from_dict({"oddsValue": "2.00", "stake": "100"})
            >>> form.odds_value
            '2.00'
        """
        values = _snake_case_keys(data)
        legs = [
            leg if isinstance(leg, LegInput) else LegInput.from_dict(leg)
            for leg in values.get("parlay_legs") or []
        ]
        return cls(
            odds_format=values.get("odds_format", OddsFormat.DECIMAL),
            odds_value=str(values.get("odds_value") or ""),
            own_probability=values.get("own_probability"),
            stake=str(values.get("stake") or ""),
            bankroll=values.get("bankroll"),
            edge_mode=values.get("edge_mode", EdgeMode.AUTO),
            manual_edge=values.get("manual_edge"),
            rounding=values.get("rounding", RoundingMode.NONE),
            parlay_enabled=bool(values.get("parlay_enabled", False)),
            parlay_legs=legs,
        )


@dataclass(frozen=True)
class NormalizedLeg:
    id: str
    format: OddsFormat
    odds_input: str
    decimal_odds: float
    implied_probability: float
    own_probability: float
    own_probability_source: ProbabilitySource
    american_odds: str
    fractional_odds: str


@dataclass(frozen=True)
class NormalizedInputs:
    """Validated, fully resolved inputs for one computation."""

    stake: float
    bankroll: Optional[float]
    rounding: RoundingMode
    edge_mode: EdgeMode
    manual_edge_percent: Optional[float]
    base_format: OddsFormat
    decimal_odds: float
    implied_probability: float
    own_probability: float
    own_probability_source: ProbabilitySource
    american_odds: str
    fractional_odds: str
    parlay_legs: Tuple[NormalizedLeg, ...] = ()
    parlay_enabled: bool = False


@dataclass(frozen=True)
class KellyRecommendations:
    full: float
    half: float
    quarter: float


@dataclass(frozen=True)
class SingleResult:
    """Computed output for one proposition."""

    decimal_odds: float
    american_odds: str
    fractional_odds: str
    implied_probability: float
    own_probability: float
    own_probability_source: ProbabilitySource
    break_even_probability: float
    stake: float
    net_profit: float
    ev_value: float
    roi_percent: float
    edge_percent: float
    kelly_fraction: float
    rounding: RoundingMode
    kelly_recommendations: Optional[KellyRecommendations] = None
    bankroll: Optional[float] = None
    manual_edge_percent: Optional[float] = None
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ParlayResult(SingleResult):
    """A single result for the combined proposition, plus the legs it was built from."""

    legs: Tuple[NormalizedLeg, ...] = ()


@dataclass(frozen=True)
class EvComputation:
    inputs: NormalizedInputs
    single: SingleResult
    parlay: Optional[ParlayResult] = None
