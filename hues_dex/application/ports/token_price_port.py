from __future__ import annotations

from decimal import Decimal
from typing import Protocol


class TokenPricePort(Protocol):
    def get_price(self, *, token_address: str, symbol: str) -> Decimal:
        ...
