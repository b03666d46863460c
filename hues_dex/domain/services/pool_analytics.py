from __future__ import annotations

from decimal import Decimal

from hues_dex.domain.entities.pool import PoolAnalytics, PoolMetrics
from hues_dex.domain.exceptions import PoolInputError


TIMEFRAME_MS = {
    "1h": 60 * 60 * 1000,
    "24h": 24 * 60 * 60 * 1000,
    "7d": 7 * 24 * 60 * 60 * 1000,
    "30d": 30 * 24 * 60 * 60 * 1000,
}


def timeframe_start(timeframe: str, *, now_ms: int) -> int:
    window = TIMEFRAME_MS.get(timeframe)
    if window is None:
        raise PoolInputError(f"timeframe must be one of {', '.join(TIMEFRAME_MS)}.")
    return now_ms - window


def population_std_dev(values: list[Decimal]) -> Decimal:
    if len(values) < 2:
        return Decimal("0")
    mean = sum(values, Decimal("0")) / len(values)
    variance = sum(((value - mean) ** 2 for value in values), Decimal("0")) / len(values)
    return variance.sqrt()


def filter_metrics(metrics: PoolMetrics, *, start_ms: int) -> PoolMetrics:
    return PoolMetrics(
        address=metrics.address,
        historical_data=tuple(p for p in metrics.historical_data if p.timestamp >= start_ms),
        rebalance_history=tuple(e for e in metrics.rebalance_history if e.timestamp >= start_ms),
        performance=metrics.performance,
    )


def build_pool_analytics(metrics: PoolMetrics, *, timeframe: str, now_ms: int) -> PoolAnalytics | None:
    start_ms = timeframe_start(timeframe, now_ms=now_ms)
    points = [p for p in metrics.historical_data if p.timestamp >= start_ms]
    if not points:
        return None

    earliest = points[0]
    latest = points[-1]
    tvl_change = latest.tvl - earliest.tvl
    tvl_change_percent = Decimal("0")
    if earliest.tvl > 0:
        tvl_change_percent = tvl_change / earliest.tvl * 100

    return PoolAnalytics(
        timeframe=timeframe,
        data_points=len(points),
        tvl_change=tvl_change,
        tvl_change_percent=tvl_change_percent,
        volume_total=sum((p.volume for p in points), Decimal("0")),
        fees_total=sum((p.fees for p in points), Decimal("0")),
        ratio_volatility=population_std_dev([p.ratio for p in points]),
        rebalance_count=sum(1 for e in metrics.rebalance_history if e.timestamp >= start_ms),
    )
