from __future__ import annotations

from decimal import Decimal, InvalidOperation

from hues_dex.application.ports.token_price_port import TokenPricePort
from hues_dex.domain.entities.pool import HistoricalPoint, Pool
from hues_dex.domain.entities.rebalance import PoolReserves, RatioEvaluation
from hues_dex.domain.exceptions import DomainError
from hues_dex.domain.services.pool_ratio import evaluate_pool_ratio


def parse_decimal(value, *, field: str, error_cls: type[DomainError]) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise error_cls(f"{field} must be a number.")
    try:
        parsed = Decimal(str(value))
    except InvalidOperation as exc:
        raise error_cls(f"{field} must be a number.") from exc
    if not parsed.is_finite():
        raise error_cls(f"{field} must be a finite number.")
    return parsed


def evaluate_reserves(
    reserves: PoolReserves,
    *,
    target_ratio: Decimal,
    threshold: Decimal,
    price_port: TokenPricePort | None = None,
) -> RatioEvaluation:
    price_a = Decimal("1")
    price_b = Decimal("1")
    if price_port is not None:
        price_a = price_port.get_price(
            token_address=reserves.token_a.address,
            symbol=reserves.token_a.symbol,
        )
        price_b = price_port.get_price(
            token_address=reserves.token_b.address,
            symbol=reserves.token_b.symbol,
        )
    return evaluate_pool_ratio(
        reserve_a=reserves.reserve_a,
        reserve_b=reserves.reserve_b,
        target_ratio=target_ratio,
        threshold=threshold,
        decimals_a=reserves.token_a.decimals,
        decimals_b=reserves.token_b.decimals,
        price_a=price_a,
        price_b=price_b,
    )


def reserves_of(pool: Pool) -> PoolReserves:
    return PoolReserves(
        token_a=pool.token_a,
        token_b=pool.token_b,
        reserve_a=pool.reserve_a,
        reserve_b=pool.reserve_b,
        total_supply=pool.total_supply,
    )


def new_pool(
    address: str,
    reserves: PoolReserves,
    evaluation: RatioEvaluation,
    *,
    target_ratio: Decimal,
    now_ms: int,
) -> Pool:
    return Pool(
        address=address,
        token_a=reserves.token_a,
        token_b=reserves.token_b,
        reserve_a=reserves.reserve_a,
        reserve_b=reserves.reserve_b,
        total_supply=reserves.total_supply,
        current_ratio=evaluation.ratio,
        target_ratio=target_ratio,
        needs_rebalancing=evaluation.needs_rebalancing,
        tvl=evaluation.tvl,
        created_at=now_ms,
    )


def reserve_changes(reserves: PoolReserves, evaluation: RatioEvaluation) -> dict:
    return {
        "reserve_a": reserves.reserve_a,
        "reserve_b": reserves.reserve_b,
        "total_supply": reserves.total_supply,
        "current_ratio": evaluation.ratio,
        "tvl": evaluation.tvl,
        "needs_rebalancing": evaluation.needs_rebalancing,
    }


def status_point(pool: Pool, *, now_ms: int) -> HistoricalPoint:
    return HistoricalPoint(
        timestamp=now_ms,
        ratio=pool.current_ratio,
        tvl=pool.tvl,
        volume=pool.volume_24h or Decimal("0"),
        fees=pool.fees_24h,
    )
