from __future__ import annotations

import pytest

from hues_dex.application.dto.swap import SwapExecuteInput, SwapQuoteInput
from hues_dex.application.dto.tokens import SearchTokensInput
from hues_dex.application.use_cases.swap import ExecuteSwapUseCase, GetSwapQuoteUseCase
from hues_dex.application.use_cases.tokens import GetTokenInfoUseCase, SearchTokensUseCase
from hues_dex.domain.entities.swap import QuoteToken, SwapQuote
from hues_dex.domain.entities.token import SearchToken, TokenInfo
from hues_dex.domain.exceptions import SwapInputError, TokenInputError, TokenNotFoundError


FROM = "0x" + "12" * 20
TO = "0x" + "34" * 20
PRIVATE_KEY = "0x" + "42" * 32
RIF = "0x" + "aa" * 20


def _aggregator_quote() -> SwapQuote:
    return SwapQuote(
        from_token=QuoteToken(address=FROM, symbol="WETH"),
        to_token=QuoteToken(address=TO, symbol="DAI"),
        from_amount="1",
        to_amount="2000",
        price_impact=0.1,
        estimated_gas="180000",
        slippage=1.0,
        source="1inch",
    )


def test_quote_on_platform_chain_is_mocked(aggregator):
    aggregator.quote = _aggregator_quote()

    quote = GetSwapQuoteUseCase(aggregator=aggregator).execute(
        SwapQuoteInput(from_token_address=FROM, to_token_address=TO, amount="10", chain_id=31)
    )

    assert quote.source == "mock"
    assert quote.to_amount == "9.50"


def test_quote_uses_aggregator_on_other_chains(aggregator):
    aggregator.quote = _aggregator_quote()

    quote = GetSwapQuoteUseCase(aggregator=aggregator).execute(
        SwapQuoteInput(from_token_address=FROM, to_token_address=TO, amount="1", chain_id=1)
    )

    assert quote.source == "1inch"
    assert quote.to_amount == "2000"


def test_quote_falls_back_to_mock_when_aggregator_fails(aggregator):
    aggregator.fail = True

    quote = GetSwapQuoteUseCase(aggregator=aggregator).execute(
        SwapQuoteInput(from_token_address=FROM, to_token_address=TO, amount="1", chain_id=1)
    )

    assert quote.source == "mock"


def test_quote_requires_all_parameters(aggregator):
    with pytest.raises(SwapInputError, match="Missing required parameters"):
        GetSwapQuoteUseCase(aggregator=aggregator).execute(
            SwapQuoteInput(from_token_address=FROM, to_token_address=None, amount="1")
        )


def _swap(aggregator, gateway, clock) -> ExecuteSwapUseCase:
    return ExecuteSwapUseCase(aggregator=aggregator, contract_gateway=gateway, clock=clock)


def _swap_input(**overrides) -> SwapExecuteInput:
    values = dict(
        from_token_address=FROM,
        to_token_address=TO,
        from_amount="1",
        to_amount="0.95",
        private_key=PRIVATE_KEY,
    )
    values.update(overrides)
    return SwapExecuteInput(**values)


def test_swap_on_platform_chain_skips_aggregator(aggregator, gateway, clock):
    result = _swap(aggregator, gateway, clock).execute(_swap_input())

    assert result.status == "pending"
    assert result.source == "mock"
    assert result.estimated_confirmation == clock.now + 30_000
    assert aggregator.swap_calls == []


def test_swap_on_other_chain_builds_aggregator_swap(aggregator, gateway, clock):
    result = _swap(aggregator, gateway, clock).execute(_swap_input(chain_id=1, slippage=1.0))

    assert result.source == "1inch"
    assert result.tx_hash.startswith("0x")
    call = aggregator.swap_calls[0]
    assert call["from_address"] == "0x" + "11" * 20
    assert call["amount"] == "1"
    assert call["slippage"] == 1.0


def test_swap_falls_back_when_aggregator_fails(aggregator, gateway, clock):
    aggregator.fail = True
    result = _swap(aggregator, gateway, clock).execute(_swap_input(chain_id=1))
    assert result.source == "mock"


def test_swap_validation(aggregator, gateway, clock):
    use_case = _swap(aggregator, gateway, clock)
    with pytest.raises(SwapInputError, match="Private key required"):
        use_case.execute(_swap_input(private_key=None))
    with pytest.raises(SwapInputError, match="Missing required parameters"):
        use_case.execute(_swap_input(to_amount=""))


def test_search_tokens_from_aggregator(aggregator):
    aggregator.tokens = [
        SearchToken(address=TO, name="Dai", symbol="DAI", decimals=18, chain_id=1, verified=True),
    ]

    result = SearchTokensUseCase(aggregator=aggregator).execute(SearchTokensInput(query="  da "))

    assert result.source == "1inch"
    assert result.query == "da"
    assert result.total == 1
    assert result.tokens[0].symbol == "DAI"


def test_search_tokens_falls_back_to_mock(aggregator):
    aggregator.fail = True

    result = SearchTokensUseCase(aggregator=aggregator).execute(
        SearchTokensInput(query="rif", chain_id=30, limit=3)
    )

    assert result.source == "mock"
    assert result.total == 3
    assert result.chain_id == 30


def test_search_tokens_validation(aggregator):
    use_case = SearchTokensUseCase(aggregator=aggregator)
    with pytest.raises(TokenInputError, match="at least 2 characters"):
        use_case.execute(SearchTokensInput(query="a"))
    with pytest.raises(TokenInputError, match="at least 2 characters"):
        use_case.execute(SearchTokensInput(query=None))
    with pytest.raises(TokenInputError, match="limit"):
        use_case.execute(SearchTokensInput(query="rif", limit=0))


def test_token_info(gateway):
    info = TokenInfo(
        address=RIF,
        name="RIF Token",
        symbol="RIF",
        decimals=18,
        total_supply="1000",
    )
    gateway.tokens[RIF] = info
    use_case = GetTokenInfoUseCase(contract_gateway=gateway)

    assert use_case.execute(RIF) == info
    with pytest.raises(TokenNotFoundError):
        use_case.execute("0x" + "99" * 20)
    with pytest.raises(TokenInputError):
        use_case.execute("")
