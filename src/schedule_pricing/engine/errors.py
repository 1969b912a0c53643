"""Exceptions raised by the pricing engine."""


class PricingError(Exception):
    """Base class for failures inside the pricing engine."""


class InvalidDate(PricingError):
    """A period bound could not be parsed to a calendar instant."""


class InvalidPeriodUnit(PricingError):
    """The period unit is not one of day, month or year."""


class InvalidAmount(PricingError):
    """A money amount cannot be represented to the cent."""
