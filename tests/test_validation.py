"""Comprehensive tests for ev_calculator/validation.py module.

Tests cover:
- validate_form() for every field rule
- per-field collection of several errors in one pass
- is_valid_odds()
- ValidationResult helpers and FormValidationError
- Logging behavior verification
"""

import pytest

from ev_calculator.models import LegInput
from ev_calculator.validation import (
    FieldError,
    FormValidationError,
    ValidationCode,
    ValidationResult,
    is_valid_odds,
    validate_form,
)


@pytest.mark.unit
class TestValidFormValues:
    """Forms that should pass validation."""

    def test_default_form_is_valid(self, make_form):
        result = validate_form(make_form())
        assert result.is_valid is True
        assert result.errors == {}

    def test_blank_optional_fields_are_valid(self, make_form):
        form = make_form(own_probability="", bankroll="  ", manual_edge=None)
        assert validate_form(form).is_valid

    def test_none_optional_fields_are_valid(self, make_form):
        form = make_form(own_probability=None, bankroll=None)
        assert validate_form(form).is_valid

    def test_comma_decimal_separator(self, make_form):
        form = make_form(odds_value="2,20", stake="99,50", bankroll="1000,5", own_probability="47,5")
        assert validate_form(form).is_valid

    def test_manual_edge_accepts_negative_number(self, make_form):
        form = make_form(edge_mode="manual", manual_edge="-3")
        assert validate_form(form).is_valid

    def test_manual_edge_ignored_in_auto_mode(self, make_form):
        form = make_form(edge_mode="auto", manual_edge="not a number")
        assert validate_form(form).is_valid

    def test_parlay_with_valid_legs(self, make_form, two_legs):
        form = make_form(parlay_enabled=True, parlay_legs=two_legs)
        assert validate_form(form).is_valid

    def test_legs_ignored_when_parlay_disabled(self, make_form):
        bad_leg = LegInput(id="x", odds_format="decimal", odds_value="0.5", own_probability="500")
        form = make_form(parlay_enabled=False, parlay_legs=[bad_leg])
        assert validate_form(form).is_valid


@pytest.mark.unit
class TestStakeValidation:
    """Tests for stake rules."""

    @pytest.mark.parametrize("stake", ["", "0", "-5", "abc", "0,0", None])
    def test_invalid_stake(self, make_form, stake):
        result = validate_form(make_form(stake=stake))
        assert result.codes("stake") == [ValidationCode.INVALID_STAKE]
        assert result.messages("stake") == ["Stake must be a positive number"]


@pytest.mark.unit
class TestBankrollValidation:
    """Tests for bankroll rules."""

    @pytest.mark.parametrize("bankroll", ["0", "-100", "lots"])
    def test_invalid_bankroll(self, make_form, bankroll):
        result = validate_form(make_form(bankroll=bankroll))
        assert result.codes("bankroll") == [ValidationCode.INVALID_BANKROLL]


@pytest.mark.unit
class TestManualEdgeValidation:
    """Tests for manual edge rules."""

    @pytest.mark.parametrize("manual_edge", [None, "", "  ", "five"])
    def test_manual_mode_requires_number(self, make_form, manual_edge):
        result = validate_form(make_form(edge_mode="manual", manual_edge=manual_edge))
        assert result.codes("manual_edge") == [ValidationCode.INVALID_MANUAL_EDGE]
        assert result.messages("manual_edge") == ["Enter your edge as a percentage"]


@pytest.mark.unit
class TestOddsValidation:
    """Tests for main odds rules."""

    @pytest.mark.parametrize("odds_format,odds_value", [
        ("decimal", "1.00"),
        ("decimal", "0,9"),
        ("decimal", ""),
        ("decimal", "two"),
        ("american", "0"),
        ("american", "plus"),
        ("fraction", "5"),
        ("fraction", "5/0"),
        ("fraction", "0/3"),
        ("hex", "2.00"),
    ])
    def test_invalid_odds(self, make_form, odds_format, odds_value):
        result = validate_form(make_form(odds_format=odds_format, odds_value=odds_value))
        assert result.codes("odds_value") == [ValidationCode.INVALID_ODDS]

    @pytest.mark.parametrize("odds_format,odds_value", [
        ("decimal", "1.01"),
        ("american", "-110"),
        ("american", "+150"),
        ("fraction", "5/2"),
    ])
    def test_valid_odds(self, make_form, odds_format, odds_value):
        assert validate_form(make_form(odds_format=odds_format, odds_value=odds_value)).is_valid


@pytest.mark.unit
class TestProbabilityValidation:
    """Tests for own probability rules."""

    @pytest.mark.parametrize("probability", ["-1", "100.5", "150", "likely"])
    def test_invalid_probability(self, make_form, probability):
        result = validate_form(make_form(own_probability=probability))
        assert result.codes("own_probability") == [ValidationCode.INVALID_PROBABILITY]
        assert result.messages("own_probability") == ["Probability must be between 0 and 100 %"]

    @pytest.mark.parametrize("probability", ["0", "100", "50,5"])
    def test_boundaries_valid(self, make_form, probability):
        assert validate_form(make_form(own_probability=probability)).is_valid


@pytest.mark.unit
class TestParlayValidation:
    """Tests for parlay rules."""

    def test_empty_parlay(self, make_form):
        result = validate_form(make_form(parlay_enabled=True, parlay_legs=[]))
        assert result.codes("parlay_legs") == [ValidationCode.EMPTY_PARLAY]
        assert result.messages("parlay_legs") == ["Add at least one leg to the parlay"]

    def test_leg_errors_are_addressed_by_index(self, make_form):
        legs = [
            LegInput(id="leg-1", odds_format="decimal", odds_value="2.00", own_probability="55"),
            LegInput(id="leg-2", odds_format="american", odds_value="0", own_probability="150"),
            LegInput(id="leg-3", odds_format="fraction", odds_value="", own_probability=""),
        ]
        result = validate_form(make_form(parlay_enabled=True, parlay_legs=legs))

        assert "parlay_legs.0.odds_value" not in result.errors
        assert result.codes("parlay_legs.1.odds_value") == [ValidationCode.INVALID_ODDS]
        assert result.messages("parlay_legs.1.odds_value") == ["Invalid odds for this leg"]
        assert result.codes("parlay_legs.1.own_probability") == [ValidationCode.INVALID_PROBABILITY]
        assert result.codes("parlay_legs.2.odds_value") == [ValidationCode.INVALID_ODDS]
        assert "parlay_legs.2.own_probability" not in result.errors


@pytest.mark.unit
class TestOptionValidation:
    """Tests for enumerated options."""

    def test_unknown_edge_mode(self, make_form):
        result = validate_form(make_form(edge_mode="sometimes"))
        assert result.codes("edge_mode") == [ValidationCode.INVALID_OPTION]
        assert "manual_edge" not in result.errors

    def test_unknown_rounding(self, make_form):
        result = validate_form(make_form(rounding="krona"))
        assert result.codes("rounding") == [ValidationCode.INVALID_OPTION]
        assert result.messages("rounding") == ["Unknown rounding mode: krona"]


@pytest.mark.unit
class TestErrorCollection:
    """Errors are collected per field instead of stopping at the first one."""

    def test_all_errors_reported(self, make_form):
        form = make_form(
            stake="0",
            bankroll="-1",
            odds_value="1.00",
            own_probability="101",
            edge_mode="manual",
            manual_edge="",
            parlay_enabled=True,
            parlay_legs=[],
        )
        result = validate_form(form)

        assert result.is_valid is False
        assert set(result.errors) == {
            "stake",
            "bankroll",
            "odds_value",
            "own_probability",
            "manual_edge",
            "parlay_legs",
        }

    def test_as_dict(self, make_form):
        result = validate_form(make_form(stake="0", own_probability="101"))
        assert result.as_dict() == {
            "stake": ["Stake must be a positive number"],
            "own_probability": ["Probability must be between 0 and 100 %"],
        }

    def test_rejected_fields_are_logged(self, make_form, caplog):
        validate_form(make_form(stake="-5"))
        assert "Invalid field stake: Stake must be a positive number" in caplog.text


@pytest.mark.unit
class TestValidationResult:
    """Tests for ValidationResult and FormValidationError."""

    def test_add_uses_default_message(self):
        result = ValidationResult()
        result.add("stake", ValidationCode.INVALID_STAKE)
        assert result.errors["stake"] == [
            FieldError(ValidationCode.INVALID_STAKE, "Stake must be a positive number")
        ]

    def test_multiple_errors_per_field(self):
        result = ValidationResult()
        result.add("x", ValidationCode.INVALID_ODDS, "first")
        result.add("x", ValidationCode.INVALID_OPTION, "second")
        assert result.messages("x") == ["first", "second"]

    def test_unknown_field_has_no_messages(self):
        assert ValidationResult().messages("stake") == []

    def test_form_validation_error_carries_result(self):
        result = ValidationResult()
        result.add("stake", ValidationCode.INVALID_STAKE)
        result.add("bankroll", ValidationCode.INVALID_BANKROLL)

        error = FormValidationError(result)

        assert isinstance(error, ValueError)
        assert error.result is result
        assert str(error) == "Invalid form values: bankroll, stake"


@pytest.mark.unit
class TestIsValidOdds:
    """Tests for is_valid_odds() function."""

    @pytest.mark.parametrize("odds_format,text,expected", [
        ("decimal", "2,20", True),
        ("decimal", "1", False),
        ("american", "-110", True),
        ("american", "0", False),
        ("fraction", "11/10", True),
        ("fraction", "11:10", False),
        ("decimal", None, False),
        ("decimal", "   ", False),
        ("unknown", "2.0", False),
    ])
    def test_is_valid_odds(self, odds_format, text, expected):
        assert is_valid_odds(odds_format, text) is expected
