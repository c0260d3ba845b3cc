import streamlit as st
import pandas as pd
from ev_calculator.analysis import calculate_ev
from ev_calculator.config import DEFAULT_FORM, logger
from ev_calculator.models import EdgeMode, FormValues, LegInput, OddsFormat, RoundingMode
from ev_calculator.summary import (
    format_currency,
    format_percent,
    format_probability,
    format_summary,
    legs_frame,
    stake_advice,
    trend_label,
)
from ev_calculator.validation import validate_form

ODDS_FORMAT_LABELS = {
    OddsFormat.DECIMAL.value: "Decimal (2.00)",
    OddsFormat.AMERICAN.value: "American (+150)",
    OddsFormat.FRACTION.value: "Fraction (5/2)",
}

ROUNDING_LABELS = {
    RoundingMode.NONE.value: "No rounding",
    RoundingMode.TWO_DECIMAL.value: "Two decimals",
    RoundingMode.NEAREST_WHOLE.value: "Nearest whole",
}

LEG_COLUMNS = ["id", "odds_format", "odds_value", "own_probability"]


def default_legs_df():
    """Return the default parlay legs as an editable DataFrame.

    Returns:
        DataFrame with columns id, odds_format, odds_value, own_probability
    """
    return pd.DataFrame(DEFAULT_FORM["parlay_legs"], columns=LEG_COLUMNS)


def legs_from_df(df):
    """Convert the edited legs table into LegInput values.

    Rows without odds are skipped so a half-filled new row does not block the
    calculation. Missing cells (NaN/None) become empty strings.

    Args:
        df: DataFrame from st.data_editor

    Returns:
        List of LegInput in table order

    Examples:
        >>> df = pd.DataFrame([{"id": "leg-1", "odds_format": "decimal", "odds_value": "2.00", "own_probability": None}])
        >>> legs_from_df(df)[0].own_probability
        ''
    """
    legs = []
    if df is None or df.empty:
        return legs

    for _, row in df.iterrows():
        values = {column: row.get(column) for column in LEG_COLUMNS}
        values = {key: "" if pd.isna(value) else str(value) for key, value in values.items()}
        if not values["odds_value"].strip():
            continue
        legs.append(
            LegInput(
                id=values["id"],
                odds_format=values["odds_format"] or OddsFormat.DECIMAL.value,
                odds_value=values["odds_value"],
                own_probability=values["own_probability"],
            )
        )
    return legs


def render_field_errors(validation, field_name):
    """Show every validation message for one field."""
    for message in validation.messages(field_name):
        st.error(message)


def render_result(result, title):
    """Render the probability/odds and money breakdown of one result."""
    st.subheader(title)
    col_odds, col_money = st.columns(2)
    with col_odds:
        st.markdown("**Probabilities and odds**")
        st.write(f"Implied probability: {format_probability(result.implied_probability)}")
        st.write(
            f"Own probability: {format_probability(result.own_probability)} "
            f"({result.own_probability_source.value})"
        )
        st.write(f"Break-even: {format_probability(result.break_even_probability)}")
        st.write(f"Decimal odds: {result.decimal_odds:.2f}")
        st.write(f"American odds: {result.american_odds}")
        st.write(f"Fraction: {result.fractional_odds}")
    with col_money:
        st.markdown("**Result**")
        st.write(f"Stake: {format_currency(result.stake)}")
        st.write(f"Net profit on win: {format_currency(result.net_profit)}")
        st.write(f"Expected value: {format_currency(result.ev_value)}")
        st.write(f"ROI: {format_percent(result.roi_percent)}")
        st.write(f"Edge: {format_percent(result.edge_percent)}")
        st.write(f"Kelly f*: {format_percent(result.kelly_fraction * 100)}")
        st.info(stake_advice(result))

    for warning in result.warnings:
        st.warning(warning)


def main():
    """Main entry point for the EV calculator Streamlit page.

    Collects the calculator form on every rerun, validates it field by field
    and renders the single-bet and parlay results.

    Examples:
        Run from command line:
        >>> streamlit run dashboard.py
    """
    st.set_page_config(page_title="EV Calculator", layout="wide")
    st.title("EV Calculator")

    if "legs_df" not in st.session_state:
        st.session_state["legs_df"] = default_legs_df()

    # Sidebar: calculation settings
    st.sidebar.header("Settings")
    rounding_options = list(ROUNDING_LABELS.keys())
    rounding = st.sidebar.selectbox(
        "Rounding",
        options=rounding_options,
        index=rounding_options.index(DEFAULT_FORM["rounding"]) if DEFAULT_FORM["rounding"] in rounding_options else 0,
        format_func=ROUNDING_LABELS.get,
        help="Applied to EV and Kelly stakes only"
    )
    edge_mode = st.sidebar.radio(
        "Edge mode",
        options=[EdgeMode.AUTO.value, EdgeMode.MANUAL.value],
        format_func=lambda mode: "From own probability" if mode == EdgeMode.AUTO.value else "Manual edge %",
    )
    manual_edge = ""
    if edge_mode == EdgeMode.MANUAL.value:
        manual_edge = st.sidebar.text_input("Edge %", value="", placeholder="e.g. 5")
    bankroll = st.sidebar.text_input(
        "Bankroll",
        value=DEFAULT_FORM["bankroll"],
        help="Optional; enables Kelly stake amounts"
    )

    # Main form
    format_options = list(ODDS_FORMAT_LABELS.keys())
    col_format, col_odds, col_prob, col_stake = st.columns(4)
    with col_format:
        odds_format = st.selectbox(
            "Odds format",
            options=format_options,
            index=format_options.index(DEFAULT_FORM["odds_format"]) if DEFAULT_FORM["odds_format"] in format_options else 0,
            format_func=ODDS_FORMAT_LABELS.get,
        )
    with col_odds:
        odds_value = st.text_input("Odds", value=DEFAULT_FORM["odds_value"])
    with col_prob:
        own_probability = st.text_input(
            "Own probability %",
            value=DEFAULT_FORM["own_probability"],
            help="Leave empty to use the implied probability"
        )
    with col_stake:
        stake = st.text_input("Stake", value=DEFAULT_FORM["stake"])

    parlay_enabled = st.toggle("Parlay", value=DEFAULT_FORM["parlay_enabled"])
    legs_df = st.session_state["legs_df"]
    if parlay_enabled:
        legs_df = st.data_editor(
            st.session_state["legs_df"],
            num_rows="dynamic",
            hide_index=True,
            column_config={
                "id": st.column_config.TextColumn("Leg"),
                "odds_format": st.column_config.SelectboxColumn("Format", options=format_options, required=True),
                "odds_value": st.column_config.TextColumn("Odds"),
                "own_probability": st.column_config.TextColumn("Own probability %"),
            },
            key="legs_editor",
        )

    form = FormValues(
        odds_format=odds_format,
        odds_value=odds_value,
        own_probability=own_probability,
        stake=stake,
        bankroll=bankroll,
        edge_mode=edge_mode,
        manual_edge=manual_edge,
        rounding=rounding,
        parlay_enabled=parlay_enabled,
        parlay_legs=legs_from_df(legs_df),
    )

    validation = validate_form(form)
    if not validation.is_valid:
        for field_name in validation.errors:
            with st.container():
                st.caption(field_name)
                render_field_errors(validation, field_name)
        st.stop()

    computation = calculate_ev(form)
    single = computation.single
    logger.info(f"Rendered calculation: EV {single.ev_value}, parlay={computation.parlay is not None}")

    # Top Row: summary metrics
    metric_col1, metric_col2, metric_col3, metric_col4 = st.columns(4)
    with metric_col1:
        st.metric("EV", format_currency(single.ev_value))
    with metric_col2:
        st.metric("ROI", format_percent(single.roi_percent))
    with metric_col3:
        st.metric("Edge", format_percent(single.edge_percent))
    with metric_col4:
        st.metric("Kelly f*", format_percent(single.kelly_fraction * 100))

    trend = trend_label(single.ev_value)
    if trend == "positive":
        st.success("Positive expected value at your probability.")
    elif trend == "negative":
        st.error("Negative expected value at your probability.")

    tab_single, tab_parlay, tab_summary = st.tabs(["Single", "Parlay", "Summary"])

    with tab_single:
        render_result(single, "Single bet")

    with tab_parlay:
        if computation.parlay is None:
            st.info("Enable parlay mode and add legs to see the combined bet.")
        else:
            st.dataframe(legs_frame(computation.parlay.legs), hide_index=True, width="stretch")
            render_result(computation.parlay, "Parlay")

    with tab_summary:
        st.caption("Copy the summary below")
        st.code(format_summary(computation), language=None)


if __name__ == "__main__":
    main()
