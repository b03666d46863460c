from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class QuoteToken:
    address: str
    symbol: str
    decimals: int = 18


@dataclass(frozen=True)
class SwapQuote:
    from_token: QuoteToken
    to_token: QuoteToken
    from_amount: str
    to_amount: str
    price_impact: float
    estimated_gas: str
    slippage: float
    route: list = field(default_factory=list)
    source: str = "mock"


@dataclass(frozen=True)
class SwapExecution:
    tx_hash: str
    status: str
    estimated_confirmation: int
    source: str = "mock"
