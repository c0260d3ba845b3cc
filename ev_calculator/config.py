import os
import logging
from dotenv import load_dotenv

load_dotenv()

# Logging Configuration
# Hosted Streamlit instances may not allow file logging, so fall back to the console handler only
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "ev_calculator.log")

handlers = []
try:
    handlers.append(logging.FileHandler(LOG_FILE))
except (OSError, PermissionError):
    pass
handlers.append(logging.StreamHandler())

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=handlers
)
logger = logging.getLogger('ev_calculator')

# Display Configuration
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "$")

# Calculator Defaults (used to pre-fill the dashboard form)
DEFAULT_ODDS_FORMAT = os.getenv("DEFAULT_ODDS_FORMAT", "decimal")
DEFAULT_ROUNDING = os.getenv("DEFAULT_ROUNDING", "two-decimal")
DEFAULT_STAKE = os.getenv("DEFAULT_STAKE", "100")

# Odds Math Constants
FRACTION_PRECISION = 1000  # toFraction resolves to three decimals
KELLY_MULTIPLIERS = {
    "full": 1.0,
    "half": 0.5,
    "quarter": 0.25,
}

# Advisory messages attached to results
NEGATIVE_KELLY_WARNING = "Negative Kelly fraction, no stake recommended."
OVER_UNITY_KELLY_WARNING = "Kelly fraction exceeds 100%, cap the stake."

# Field-level validation messages
VALIDATION_MESSAGES = {
    "InvalidStake": "Stake must be a positive number",
    "InvalidBankroll": "Bankroll must be a positive number",
    "InvalidManualEdge": "Enter your edge as a percentage",
    "InvalidOdds": "Invalid odds for the selected format",
    "InvalidLegOdds": "Invalid odds for this leg",
    "InvalidProbability": "Probability must be between 0 and 100 %",
    "EmptyParlay": "Add at least one leg to the parlay",
    "InvalidOption": "Unknown option",
}

# Default form shown when the dashboard first loads
DEFAULT_FORM = {
    "odds_format": DEFAULT_ODDS_FORMAT,
    "odds_value": "2.00",
    "own_probability": "55",
    "stake": DEFAULT_STAKE,
    "bankroll": "",
    "edge_mode": "auto",
    "manual_edge": "",
    "rounding": DEFAULT_ROUNDING,
    "parlay_enabled": False,
    "parlay_legs": [
        {"id": "leg-1", "odds_format": "decimal", "odds_value": "2.00", "own_probability": "55"},
        {"id": "leg-2", "odds_format": "decimal", "odds_value": "1.80", "own_probability": "60"},
    ],
}
