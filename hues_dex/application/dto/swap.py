from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SwapQuoteInput:
    from_token_address: str | None
    to_token_address: str | None
    amount: str | None
    chain_id: int = 31


@dataclass(frozen=True)
class SwapExecuteInput:
    from_token_address: str | None
    to_token_address: str | None
    from_amount: str | None
    to_amount: str | None
    private_key: str | None
    chain_id: int = 31
    slippage: float = 0.5
