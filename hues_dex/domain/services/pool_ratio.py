from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext

from hues_dex.domain.entities.rebalance import RatioEvaluation
from hues_dex.domain.exceptions import ReserveInputError


# uint112 reserves scaled by 18 decimals still fit comfortably.
DECIMAL_PRECISION = 78


def parse_reserve(value: str | int) -> int:
    if isinstance(value, bool):
        raise ReserveInputError("Reserve must be an integer amount.")
    if isinstance(value, int):
        parsed = value
    else:
        text = str(value).strip()
        if not text or not text.isdigit():
            raise ReserveInputError(f"Reserve must be a non-negative integer string: {value!r}")
        parsed = int(text)
    if parsed < 0:
        raise ReserveInputError("Reserve must be non-negative.")
    return parsed


def normalize_amount(raw: str | int, decimals: int = 18) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return Decimal(parse_reserve(raw)).scaleb(-decimals)


def to_base_units(amount: Decimal, decimals: int = 18) -> int:
    if amount <= 0:
        return 0
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        try:
            return int(amount.scaleb(decimals).to_integral_value(rounding=ROUND_DOWN))
        except InvalidOperation as exc:
            raise ReserveInputError(f"Amount cannot be converted to base units: {amount}") from exc


def calculate_ratio(
    reserve_a: str | int,
    reserve_b: str | int,
    *,
    decimals_a: int = 18,
    decimals_b: int = 18,
) -> Decimal:
    amount_a = normalize_amount(reserve_a, decimals_a)
    amount_b = normalize_amount(reserve_b, decimals_b)
    if amount_b <= 0:
        return Decimal("0")
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return amount_a / amount_b


def calculate_tvl(
    reserve_a: str | int,
    reserve_b: str | int,
    *,
    decimals_a: int = 18,
    decimals_b: int = 18,
    price_a: Decimal = Decimal("1"),
    price_b: Decimal = Decimal("1"),
) -> Decimal:
    amount_a = normalize_amount(reserve_a, decimals_a)
    amount_b = normalize_amount(reserve_b, decimals_b)
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return amount_a * price_a + amount_b * price_b


def needs_rebalancing(ratio: Decimal, target_ratio: Decimal, threshold: Decimal) -> bool:
    return abs(ratio - target_ratio) > threshold


def evaluate_pool_ratio(
    *,
    reserve_a: str | int,
    reserve_b: str | int,
    target_ratio: Decimal,
    threshold: Decimal,
    decimals_a: int = 18,
    decimals_b: int = 18,
    price_a: Decimal = Decimal("1"),
    price_b: Decimal = Decimal("1"),
) -> RatioEvaluation:
    """Ratio, TVL and imbalance flag for a pair of raw reserves.

    Zero reserves are not an error: ratio and tvl collapse to 0.
    """
    ratio = calculate_ratio(reserve_a, reserve_b, decimals_a=decimals_a, decimals_b=decimals_b)
    tvl = calculate_tvl(
        reserve_a,
        reserve_b,
        decimals_a=decimals_a,
        decimals_b=decimals_b,
        price_a=price_a,
        price_b=price_b,
    )
    return RatioEvaluation(
        ratio=ratio,
        tvl=tvl,
        needs_rebalancing=needs_rebalancing(ratio, target_ratio, threshold),
        normalized_a=normalize_amount(reserve_a, decimals_a),
        normalized_b=normalize_amount(reserve_b, decimals_b),
    )
