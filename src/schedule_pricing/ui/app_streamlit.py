"""
Streamlit front page for the Schedule Pricing System.

Features:
- Period set-up in the sidebar (start, length, unit, exclude current day)
- Editable items grid with one checkbox per weekday
- Totals, per-weekday breakdown and CSV export
- Request/response reference for the HTTP API
"""
import json
from datetime import datetime, time, timezone

import pandas as pd
import streamlit as st

from schedule_pricing.engine import ItemInput, PeriodUnit, PricingEngine, PricingError, Weekday
from schedule_pricing.engine.periods import format_instant
from schedule_pricing.ui.frames import items_frame, schedule_frame

st.set_page_config(
    page_title="Schedule Pricing",
    layout="wide",
    initial_sidebar_state="expanded"
)

DAY_COLUMNS = [day.value.title() for day in Weekday]


@st.cache_resource
def get_engine():
    """Get cached engine instance."""
    return PricingEngine()


engine = get_engine()


st.markdown("""
    <style>
        .block-container {
            padding-top: 2rem;
            padding-bottom: 2rem;
        }
        .stMetric {
            background-color: #f0f2f6;
            padding: 10px;
            border-radius: 5px;
            border-left: 5px solid #ff4b4b;
        }
    </style>
""", unsafe_allow_html=True)

# ============================================================================
# SIDEBAR: Period
# ============================================================================
with st.sidebar:
    st.header("📅 Billing Period")

    with st.container(border=True):
        start_day = st.date_input("Period Start", value=datetime.now(timezone.utc).date())
        period_length = st.number_input("Period Length", value=1, step=1)
        period_unit = st.selectbox("Period Type", [unit.value for unit in PeriodUnit], index=1)
        exclude_current_day = st.checkbox("Exclude Current Day", value=False)

period_start = datetime.combine(start_day, time(), tzinfo=timezone.utc)


# ============================================================================
# MAIN CONTENT
# ============================================================================
st.title("Calculate Schedule Price")
st.caption(
    "Calculates a total price based on unit price and the number of issues "
    "published between two dates"
)

tab1, tab2 = st.tabs(["⚡ Calculator", "📖 API"])

with tab1:
    if 'items' not in st.session_state:
        st.session_state['items'] = pd.DataFrame([
            {'Item': 'DAILY-PAPER', 'Unit Price': 1.5, **{d: d not in ('Saturday', 'Sunday') for d in DAY_COLUMNS}},
            {'Item': 'WEEKEND-MAG', 'Unit Price': 3.0, **{d: d in ('Saturday', 'Sunday') for d in DAY_COLUMNS}},
        ])

    st.subheader("Items")
    edited_df = st.data_editor(
        st.session_state['items'],
        use_container_width=True,
        num_rows="dynamic",
        column_config={
            "Item": st.column_config.TextColumn("Item", required=True),
            "Unit Price": st.column_config.NumberColumn("Unit Price", min_value=0.0, step=0.01, format="%.2f"),
            **{d: st.column_config.CheckboxColumn(d, default=False) for d in DAY_COLUMNS},
        },
        hide_index=True,
        key="items_editor"
    )

    items = [
        ItemInput(
            reference=str(row['Item']),
            unit_price=float(row['Unit Price'] or 0),
            schedule={d.lower(): bool(row[d]) for d in DAY_COLUMNS},
        )
        for _, row in edited_df.iterrows()
        if pd.notna(row['Item']) and str(row['Item']).strip()
    ]

    if not items:
        st.info("Add an item to begin pricing.")
        st.stop()

    try:
        result = engine.run(
            period_start=period_start,
            period_length=int(period_length),
            period_unit=period_unit,
            items=items,
            exclude_start=exclude_current_day,
        )
    except PricingError as e:
        st.error(f"Pricing error: {e}")
        st.stop()

    m1, m2, m3 = st.columns(3)
    m1.metric("Total", f"{result.total_price:,.2f}")
    m2.metric("Items", len(result.items))
    m3.metric("Period End", result.period_end_date.strftime('%Y-%m-%d'))

    fallback = [item.reference for item in result.items if not item.schedules]
    if fallback:
        st.warning(f"No active weekday, unit price used as total: {', '.join(fallback)}")

    st.divider()
    st.dataframe(items_frame(result), use_container_width=True, hide_index=True)

    with st.expander("📊 View Weekday Breakdown", expanded=True):
        breakdown = schedule_frame(result)
        st.dataframe(breakdown, use_container_width=True, hide_index=True)
        st.download_button(
            "📥 CSV",
            data=breakdown.to_csv(index=False),
            file_name=f"schedule_price_{start_day.isoformat()}.csv",
            mime="text/csv",
        )

with tab2:
    st.subheader("POST /api/v1/calculate-schedule-price")
    sample_request = {
        "periodStartDate": format_instant(period_start),
        "periodLength": int(period_length),
        "periodType": period_unit,
        "excludeCurrentDay": exclude_current_day,
        "items": [
            {"itemReference": "DAILY-PAPER", "unitPrice": 1.5, "schedule": {"monday": True, "friday": True}},
        ],
    }
    st.code(json.dumps(sample_request, indent=2), language="json")
    st.caption("Inbound calls are limited to 5 per 10 seconds per client address.")
