from __future__ import annotations

from hues_dex.domain.entities.token import SearchToken
from hues_dex.domain.services.mock_swap import mock_address


COMMON_TOKENS = (
    ("USDC", "USD Coin", "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"),
    ("USDT", "Tether USD", "0xdAC17F958D2ee523a2206206994597C13D831ec7"),
    ("DAI", "Dai Stablecoin", "0x6B175474E89094C44Da98b954EedeAC495271d0F"),
    ("WETH", "Wrapped Ether", "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"),
    ("WBTC", "Wrapped Bitcoin", "0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599"),
    ("LINK", "Chainlink Token", "0x514910771AF9Ca656af840dff83E8264EcF986CA"),
    ("UNI", "Uniswap", "0x1f9840a85d5aF5bf1D1762F925BDADdC4201F984"),
    ("AAVE", "Aave Token", "0x7Fc66500c84A76Ad7e9c93437bFc5Ac33E2DDaE9"),
    ("COMP", "Compound", "0xc00e94Cb662C3520282E6f5717214004A7f26888"),
    ("MKR", "Maker", "0x9f8F72aA9304c8B593d555F12eF6589cC3A579A2"),
)

MAX_DYNAMIC_TOKENS = 3


def generate_mock_tokens(*, query: str, chain_id: int, limit: int) -> list[SearchToken]:
    lowered = query.lower()
    matches = [
        (symbol, name, address, True)
        for symbol, name, address in COMMON_TOKENS
        if lowered in symbol.lower() or lowered in name.lower()
    ]

    # Placeholder entries so the UI always has something to render.
    for idx in range(min(MAX_DYNAMIC_TOKENS, max(0, limit - len(matches)))):
        matches.append((f"{query.upper()}{idx + 1}", f"{query} Token {idx + 1}", mock_address(), False))

    return [
        SearchToken(
            address=address,
            name=name,
            symbol=symbol,
            decimals=18,
            chain_id=chain_id,
            logo_uri=f"https://tokens.1inch.io/{address}.png",
            tags=["verified"] if verified else [],
            verified=verified,
        )
        for symbol, name, address, verified in matches[:limit]
    ]
