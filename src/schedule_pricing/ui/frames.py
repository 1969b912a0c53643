"""DataFrame views of a pricing result for the Streamlit app."""
import pandas as pd

from ..engine.models import PricingResult

ITEM_COLUMNS = ['Item', 'Unit Price', 'Active Days', 'Item Total']
SCHEDULE_COLUMNS = ['Item', 'Day', 'Occurrences', 'Unit Price', 'Schedule Price']


def items_frame(result: PricingResult) -> pd.DataFrame:
    """One row per item with its total; fallback items show zero active days."""
    return pd.DataFrame(
        [
            {
                'Item': item.reference,
                'Unit Price': float(item.unit_price),
                'Active Days': len(item.schedules),
                'Item Total': float(item.item_total),
            }
            for item in result.items
        ],
        columns=ITEM_COLUMNS,
    )


def schedule_frame(result: PricingResult) -> pd.DataFrame:
    """One row per (item, active weekday) in item then Monday → Sunday order."""
    return pd.DataFrame(
        [
            {
                'Item': item.reference,
                'Day': entry.day_of_week.value.title(),
                'Occurrences': entry.count_of_days,
                'Unit Price': float(item.unit_price),
                'Schedule Price': float(entry.schedule_price),
            }
            for item in result.items
            for entry in item.schedules
        ],
        columns=SCHEDULE_COLUMNS,
    )
