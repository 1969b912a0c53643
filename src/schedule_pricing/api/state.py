"""Shared API state."""
from ..engine import PricingEngine

engine = PricingEngine()
