from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


def _normalize_token_key(value: str) -> str:
    return value.strip().lower()


@dataclass(frozen=True)
class PriceOverrides:
    """Static token prices from TOKEN_PRICE_OVERRIDES.

    Accepts ``{"0xabc...": 1.0, "RBTC": 65000}`` or the same mapping nested
    under a network key, with ``"default"`` as the shared bucket.
    Unknown tokens are valued at 1 so TVL stays a plain reserve sum.
    """

    data: dict
    network: str = "default"
    fallback: Decimal = Decimal("1")

    def _buckets(self) -> list[dict]:
        if not isinstance(self.data, dict):
            return []
        buckets = []
        for key in (self.network.strip().lower(), "default"):
            bucket = self.data.get(key)
            if isinstance(bucket, dict):
                buckets.append(bucket)
        buckets.append(self.data)
        return buckets

    def lookup(self, token: str) -> Decimal | None:
        if not token:
            return None
        token_key = _normalize_token_key(token)
        for bucket in self._buckets():
            value = bucket.get(token)
            if value is None:
                value = bucket.get(token_key)
            if value is None or isinstance(value, dict):
                continue
            return Decimal(str(value))
        return None

    def get_price(self, *, token_address: str, symbol: str) -> Decimal:
        for key in (token_address, symbol):
            price = self.lookup(key)
            if price is not None:
                return price
        return self.fallback
