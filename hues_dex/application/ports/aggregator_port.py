from __future__ import annotations

from typing import Protocol

from hues_dex.domain.entities.swap import SwapQuote
from hues_dex.domain.entities.token import SearchToken


class AggregatorPort(Protocol):
    def get_quote(
        self,
        *,
        chain_id: int,
        from_token_address: str,
        to_token_address: str,
        amount: str,
    ) -> SwapQuote:
        ...

    def get_swap(
        self,
        *,
        chain_id: int,
        from_token_address: str,
        to_token_address: str,
        amount: str,
        from_address: str,
        slippage: float,
    ) -> dict:
        ...

    def search_tokens(
        self,
        *,
        chain_id: int,
        query: str,
        limit: int,
        only_positive_rating: bool,
    ) -> list[SearchToken]:
        ...
