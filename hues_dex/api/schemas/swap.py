from __future__ import annotations

from pydantic import BaseModel, Field

from hues_dex.domain.entities.swap import QuoteToken, SwapExecution, SwapQuote


class QuoteTokenResponse(BaseModel):
    address: str
    symbol: str
    decimals: int


class SwapQuoteResponse(BaseModel):
    from_token: QuoteTokenResponse
    to_token: QuoteTokenResponse
    from_amount: str
    to_amount: str
    price_impact: float
    estimated_gas: str
    slippage: float
    route: list
    source: str = Field(..., description="mock or 1inch.")


class SwapExecuteRequest(BaseModel):
    from_token_address: str | None = None
    to_token_address: str | None = None
    from_amount: str | None = None
    to_amount: str | None = None
    private_key: str | None = None
    chain_id: int = 31
    slippage: float = 0.5


class SwapExecuteResponse(BaseModel):
    tx_hash: str
    status: str
    estimated_confirmation: int
    source: str


def _quote_token_response(token: QuoteToken) -> QuoteTokenResponse:
    return QuoteTokenResponse(address=token.address, symbol=token.symbol, decimals=token.decimals)


def swap_quote_response(quote: SwapQuote) -> SwapQuoteResponse:
    return SwapQuoteResponse(
        from_token=_quote_token_response(quote.from_token),
        to_token=_quote_token_response(quote.to_token),
        from_amount=quote.from_amount,
        to_amount=quote.to_amount,
        price_impact=quote.price_impact,
        estimated_gas=quote.estimated_gas,
        slippage=quote.slippage,
        route=list(quote.route),
        source=quote.source,
    )


def swap_execute_response(execution: SwapExecution) -> SwapExecuteResponse:
    return SwapExecuteResponse(
        tx_hash=execution.tx_hash,
        status=execution.status,
        estimated_confirmation=execution.estimated_confirmation,
        source=execution.source,
    )
