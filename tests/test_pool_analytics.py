from __future__ import annotations

from decimal import Decimal

import pytest

from hues_dex.domain.entities.pool import HistoricalPoint, PoolMetrics, RebalanceEvent
from hues_dex.domain.exceptions import PoolInputError
from hues_dex.domain.services.pool_analytics import (
    build_pool_analytics,
    filter_metrics,
    population_std_dev,
    timeframe_start,
)


NOW = 1_700_000_000_000
HOUR = 60 * 60 * 1000
POOL = "0x" + "cc" * 20


def _point(age_ms: int, ratio: str, tvl: str, volume: str = "0", fees: str = "0") -> HistoricalPoint:
    return HistoricalPoint(
        timestamp=NOW - age_ms,
        ratio=Decimal(ratio),
        tvl=Decimal(tvl),
        volume=Decimal(volume),
        fees=Decimal(fees),
    )


def _event(age_ms: int) -> RebalanceEvent:
    return RebalanceEvent(
        tx_hash=f"0x{age_ms:064x}",
        timestamp=NOW - age_ms,
        pool_address=POOL,
        from_ratio=Decimal("1.5"),
        to_ratio=Decimal("1"),
        target_ratio=Decimal("1"),
        gas_used="0",
        gas_price="0",
        status="confirmed",
    )


def test_population_std_dev():
    values = [Decimal("2"), Decimal("4"), Decimal("4"), Decimal("4"), Decimal("5"), Decimal("5"), Decimal("7"), Decimal("9")]
    assert population_std_dev(values) == Decimal("2")
    assert population_std_dev([Decimal("3")]) == Decimal("0")


def test_unknown_timeframe_is_rejected():
    with pytest.raises(PoolInputError):
        timeframe_start("2d", now_ms=NOW)


def test_analytics_uses_points_inside_window():
    metrics = PoolMetrics(
        address=POOL,
        historical_data=(
            _point(48 * HOUR, "9", "1"),
            _point(20 * HOUR, "1", "100", volume="10", fees="1"),
            _point(10 * HOUR, "3", "150", volume="5", fees="0.5"),
        ),
        rebalance_history=(_event(30 * HOUR), _event(5 * HOUR)),
    )

    analytics = build_pool_analytics(metrics, timeframe="24h", now_ms=NOW)

    assert analytics.data_points == 2
    assert analytics.tvl_change == Decimal("50")
    assert analytics.tvl_change_percent == Decimal("50")
    assert analytics.volume_total == Decimal("15")
    assert analytics.fees_total == Decimal("1.5")
    assert analytics.ratio_volatility == Decimal("1")
    assert analytics.rebalance_count == 1


def test_analytics_is_none_without_points():
    metrics = PoolMetrics(address=POOL, historical_data=(_point(48 * HOUR, "1", "1"),))
    assert build_pool_analytics(metrics, timeframe="1h", now_ms=NOW) is None


def test_filter_metrics_keeps_performance():
    metrics = PoolMetrics(
        address=POOL,
        historical_data=(_point(2 * HOUR, "1", "1"), _point(10, "1", "2")),
        rebalance_history=(_event(2 * HOUR),),
    )
    filtered = filter_metrics(metrics, start_ms=NOW - HOUR)
    assert [p.tvl for p in filtered.historical_data] == [Decimal("2")]
    assert filtered.rebalance_history == ()
    assert filtered.performance == metrics.performance
