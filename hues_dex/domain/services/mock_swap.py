from __future__ import annotations

from decimal import Decimal, InvalidOperation
import secrets

from hues_dex.domain.entities.swap import QuoteToken, SwapQuote
from hues_dex.domain.exceptions import SwapInputError
from hues_dex.shared.config import ZERO_ADDRESS


MOCK_OUTPUT_FACTOR = Decimal("0.95")
MOCK_PRICE_IMPACT = 0.5
MOCK_SLIPPAGE = 0.5
MOCK_GAS = "21000"


def mock_tx_hash() -> str:
    """Locally fabricated transaction id; nothing is broadcast."""
    return "0x" + secrets.token_hex(32)


def mock_address() -> str:
    return "0x" + secrets.token_hex(20)


def _mock_token(address: str, *, native_symbol: str) -> QuoteToken:
    symbol = native_symbol if address.lower() == ZERO_ADDRESS else "TOKEN"
    return QuoteToken(address=address, symbol=symbol, decimals=18)


def generate_mock_quote(
    *,
    from_token_address: str,
    to_token_address: str,
    amount: str,
    native_symbol: str = "RBTC",
) -> SwapQuote:
    try:
        from_amount = Decimal(amount)
    except InvalidOperation as exc:
        raise SwapInputError(f"amount must be numeric: {amount!r}") from exc
    if not from_amount.is_finite() or from_amount < 0:
        raise SwapInputError("amount must be a non-negative number.")

    to_amount = from_amount * MOCK_OUTPUT_FACTOR
    from_token = _mock_token(from_token_address, native_symbol=native_symbol)
    to_token = _mock_token(to_token_address, native_symbol=native_symbol)
    return SwapQuote(
        from_token=from_token,
        to_token=to_token,
        from_amount=amount,
        to_amount=str(to_amount),
        price_impact=MOCK_PRICE_IMPACT,
        estimated_gas=MOCK_GAS,
        slippage=MOCK_SLIPPAGE,
        route=[
            {
                "name": "Mock DEX",
                "percent": 100,
                "swaps": [
                    {
                        "from_token": from_token.address,
                        "to_token": to_token.address,
                        "amount": amount,
                        "amount_out": str(to_amount),
                    }
                ],
            }
        ],
        source="mock",
    )
