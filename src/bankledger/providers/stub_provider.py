"""Simulated price provider for offline/demo use."""

import random
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

_PRICE_QUANTUM = Decimal("0.01")
_MIN_PRICE = Decimal("0.01")


class SimulatedPriceProvider:
    """
    Random-walk provider simulating market movement.

    Each call moves the price by a uniformly random step within
    ±``max_move_percent``. Pass a seed for reproducible sequences.
    """

    def __init__(self, seed: Optional[int] = None, max_move_percent: Decimal = Decimal("5")):
        if not Decimal("0") <= Decimal(max_move_percent) < Decimal("100"):
            raise ValueError("max_move_percent must be in [0, 100)")
        self._rng = random.Random(seed)
        self._max_move = Decimal(max_move_percent) / Decimal("100")

    def next_price(self, symbol: str, current_price: Decimal) -> Decimal:
        """Return ``current_price`` moved by a random step."""
        step = Decimal(str(self._rng.uniform(-1.0, 1.0))) * self._max_move
        new_price = (current_price * (1 + step)).quantize(_PRICE_QUANTUM, rounding=ROUND_HALF_UP)
        return max(new_price, _MIN_PRICE)


class FixedPriceProvider:
    """Provider returning preset prices; symbols without one keep their price."""

    def __init__(self, prices: dict[str, Decimal]):
        self._prices = {symbol.upper(): Decimal(price) for symbol, price in prices.items()}

    def next_price(self, symbol: str, current_price: Decimal) -> Decimal:
        return self._prices.get(symbol.upper(), current_price)
