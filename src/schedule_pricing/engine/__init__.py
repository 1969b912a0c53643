"""Engine subpackage - period arithmetic and schedule pricing."""
from .errors import InvalidAmount, InvalidDate, InvalidPeriodUnit, PricingError
from .models import Item, ItemInput, PricingResult, ScheduleEntry, WeeklySchedule
from .periods import PeriodUnit, Weekday
from .pricing_engine import PricingEngine

__all__ = [
    'PricingEngine', 'ItemInput', 'Item', 'ScheduleEntry', 'WeeklySchedule', 'PricingResult',
    'PeriodUnit', 'Weekday', 'PricingError', 'InvalidDate', 'InvalidPeriodUnit', 'InvalidAmount',
]
