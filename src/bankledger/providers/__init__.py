"""Price providers module."""

from bankledger.providers.price_provider import PriceProvider
from bankledger.providers.stub_provider import SimulatedPriceProvider, FixedPriceProvider

__all__ = [
    "PriceProvider",
    "SimulatedPriceProvider",
    "FixedPriceProvider",
]
