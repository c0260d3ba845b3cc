"""Input validation for calculator form values.

Every field is checked independently and all problems are collected, so the
dashboard can show each message next to its field at once.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Type, Union
import logging

from .config import VALIDATION_MESSAGES
from .models import EdgeMode, FormValues, OddsFormat, RoundingMode
from .odds import OddsError, to_decimal
from .type_safety import is_blank, parse_optional_number, parse_optional_probability

logger = logging.getLogger('ev_calculator')


class ValidationCode(str, Enum):
    INVALID_STAKE = "InvalidStake"
    INVALID_BANKROLL = "InvalidBankroll"
    INVALID_MANUAL_EDGE = "InvalidManualEdge"
    INVALID_ODDS = "InvalidOdds"
    INVALID_PROBABILITY = "InvalidProbability"
    EMPTY_PARLAY = "EmptyParlay"
    INVALID_OPTION = "InvalidOption"


@dataclass(frozen=True)
class FieldError:
    code: ValidationCode
    message: str


@dataclass
class ValidationResult:
    """Per-field validation errors, keyed by form attribute name.

    Parlay leg fields are addressed as ``parlay_legs.<index>.<attribute>``.
    """

    errors: Dict[str, List[FieldError]] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add(self, field_name: str, code: ValidationCode, message: str = "") -> None:
        message = message or VALIDATION_MESSAGES[code.value]
        logger.warning(f"Invalid field {field_name}: {message}")
        self.errors.setdefault(field_name, []).append(FieldError(code, message))

    def messages(self, field_name: str) -> List[str]:
        return [error.message for error in self.errors.get(field_name, [])]

    def codes(self, field_name: str) -> List[ValidationCode]:
        return [error.code for error in self.errors.get(field_name, [])]

    def as_dict(self) -> Dict[str, List[str]]:
        return {name: self.messages(name) for name in self.errors}


class FormValidationError(ValueError):
    """Raised when a calculation is requested for invalid form values."""

    def __init__(self, result: ValidationResult):
        self.result = result
        fields = ", ".join(sorted(result.errors))
        super().__init__(f"Invalid form values: {fields}")


def is_valid_odds(odds_format: Union[OddsFormat, str], text: Any) -> bool:
    """Return True if the odds text is valid for the given format.

    Examples:
        >>> is_valid_odds("decimal", "2,20")
        True
        >>> is_valid_odds("american", "0")
        False
        >>> is_valid_odds("fraction", "5/0")
        False
    """
    if is_blank(text):
        return False
    try:
        to_decimal(odds_format, str(text))
    except OddsError:
        return False
    return True


def _is_valid_option(enum_type: Type[Enum], value: Any) -> bool:
    try:
        enum_type(value)
    except ValueError:
        return False
    return True


def validate_form(form: FormValues) -> ValidationResult:
    """Validate raw form values, collecting every problem per field.

    Args:
        form: Raw form values as entered by the user

    Returns:
        ValidationResult; ``is_valid`` is True when the form can be calculated

    Validation Rules:
        - stake: required, positive number
        - bankroll: optional; positive number when given
        - manual_edge: required number when edge mode is manual
        - odds_value: valid for the selected odds format
        - own_probability: optional; number in 0-100 when given
        - parlay_legs: when parlay mode is on, at least one leg, each with
          valid odds and an optional probability in 0-100
        - edge_mode / rounding: known options

    Examples:
        >>> form = FormValues(odds_value="2.00", stake="0")
        >>> validate_form(form).messages("stake")
        ['Stake must be a positive number']
    """
    result = ValidationResult()

    stake = parse_optional_number(form.stake)
    if stake is None or stake <= 0:
        result.add("stake", ValidationCode.INVALID_STAKE)

    if not is_blank(form.bankroll):
        bankroll = parse_optional_number(form.bankroll)
        if bankroll is None or bankroll <= 0:
            result.add("bankroll", ValidationCode.INVALID_BANKROLL)

    if not is_valid_odds(form.odds_format, form.odds_value):
        result.add("odds_value", ValidationCode.INVALID_ODDS)

    if not is_blank(form.own_probability) and parse_optional_probability(form.own_probability) is None:
        result.add("own_probability", ValidationCode.INVALID_PROBABILITY)

    if not _is_valid_option(EdgeMode, form.edge_mode):
        result.add("edge_mode", ValidationCode.INVALID_OPTION, f"Unknown edge mode: {form.edge_mode}")
    elif EdgeMode(form.edge_mode) is EdgeMode.MANUAL and parse_optional_number(form.manual_edge) is None:
        result.add("manual_edge", ValidationCode.INVALID_MANUAL_EDGE)

    if not _is_valid_option(RoundingMode, form.rounding):
        result.add("rounding", ValidationCode.INVALID_OPTION, f"Unknown rounding mode: {form.rounding}")

    if form.parlay_enabled:
        if not form.parlay_legs:
            result.add("parlay_legs", ValidationCode.EMPTY_PARLAY)

        for index, leg in enumerate(form.parlay_legs):
            prefix = f"parlay_legs.{index}"
            if not is_valid_odds(leg.odds_format, leg.odds_value):
                result.add(
                    f"{prefix}.odds_value",
                    ValidationCode.INVALID_ODDS,
                    VALIDATION_MESSAGES["InvalidLegOdds"],
                )
            if not is_blank(leg.own_probability) and parse_optional_probability(leg.own_probability) is None:
                result.add(f"{prefix}.own_probability", ValidationCode.INVALID_PROBABILITY)

    return result
