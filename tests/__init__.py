"""
Test suite for the EV calculator project.

This package contains tests for all modules including:
- Odds conversion tests
- Locale parsing and rounding tests
- Form validation tests
- Single-bet and parlay evaluation tests
- Result summary tests
- Dashboard tests
"""
