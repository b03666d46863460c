from __future__ import annotations

from decimal import Decimal

from hues_dex.domain.entities.pool import (
    HistoricalPoint,
    Pool,
    PoolMetrics,
    RebalanceEvent,
    TokenRef,
)
from hues_dex.infrastructure.registry.in_memory_registry import InMemoryPoolRegistry


def _pool(address: str, *, symbol_a: str = "RIF", tvl: str = "10", volume: str | None = None, imbalanced: bool = False) -> Pool:
    return Pool(
        address=address,
        token_a=TokenRef(address="0x" + "aa" * 20, symbol=symbol_a),
        token_b=TokenRef(address="0x" + "bb" * 20, symbol="USDRIF"),
        reserve_a="1",
        reserve_b="1",
        total_supply="1",
        current_ratio=Decimal("1"),
        target_ratio=Decimal("1"),
        needs_rebalancing=imbalanced,
        tvl=Decimal(tvl),
        volume_24h=Decimal(volume) if volume is not None else None,
    )


def _event(tx_hash: str, pool: str, timestamp: int) -> RebalanceEvent:
    return RebalanceEvent(
        tx_hash=tx_hash,
        timestamp=timestamp,
        pool_address=pool,
        from_ratio=Decimal("1.5"),
        to_ratio=Decimal("1"),
        target_ratio=Decimal("1"),
        gas_used="0",
        gas_price="60000000",
        status="pending",
    )


def test_pools_keep_insertion_order(registry):
    for address in ("0x03", "0x01", "0x02"):
        registry.add_pool(_pool(address))
    assert [p.address for p in registry.get_all_pools()] == ["0x03", "0x01", "0x02"]


def test_update_pool_merges_fields_and_ignores_unknown(registry):
    registry.add_pool(_pool("0x01"))
    updated = registry.update_pool("0x01", target_ratio=Decimal("2"), needs_rebalancing=True)

    assert updated.target_ratio == Decimal("2")
    assert registry.get_pool("0x01").needs_rebalancing is True
    assert registry.update_pool("0xmissing", tvl=Decimal("1")) is None
    assert registry.get_dashboard_stats().imbalanced_pools == 1


def test_dashboard_stats_track_pools(registry):
    registry.add_pool(_pool("0x01", tvl="10", volume="4"))
    registry.add_pool(_pool("0x02", tvl="5", imbalanced=True))

    stats = registry.get_dashboard_stats()
    assert stats.total_pools == 2
    assert stats.total_tvl == Decimal("15")
    assert stats.total_volume_24h == Decimal("4")
    assert stats.active_pools == 2
    assert stats.imbalanced_pools == 1

    registry.remove_pool("0x02")
    assert registry.get_dashboard_stats().total_pools == 1


def test_search_and_rankings(registry):
    registry.add_pool(_pool("0xAB01", symbol_a="RIF", tvl="1", volume="30"))
    registry.add_pool(_pool("0x02", symbol_a="WRBTC", tvl="50", volume="10", imbalanced=True))
    registry.add_pool(_pool("0x03", symbol_a="DOC", tvl="20"))

    assert [p.address for p in registry.search_pools("wrbtc")] == ["0x02"]
    assert [p.address for p in registry.search_pools("ab01")] == ["0xAB01"]
    assert [p.address for p in registry.get_imbalanced_pools()] == ["0x02"]
    assert [p.address for p in registry.get_pools_by_tvl(2)] == ["0x02", "0x03"]
    assert [p.address for p in registry.get_pools_by_volume(1)] == ["0xAB01"]


def test_history_is_capped_when_configured(clock):
    registry = InMemoryPoolRegistry(history_max_points=2, clock=clock)
    registry.add_pool(_pool("0x01"))
    for ts in (1, 2, 3):
        assert registry.add_historical_data("0x01", HistoricalPoint(timestamp=ts, ratio=Decimal("1"), tvl=Decimal("1")))

    history = registry.get_pool_metrics("0x01").historical_data
    assert [p.timestamp for p in history] == [2, 3]


def test_pool_analytics_uses_recent_window(registry, clock):
    registry.add_pool(_pool("0x01"))
    old = clock.now - 2 * 60 * 60 * 1000
    registry.add_historical_data("0x01", HistoricalPoint(timestamp=old, ratio=Decimal("9"), tvl=Decimal("1")))
    registry.add_historical_data("0x01", HistoricalPoint(timestamp=clock.now - 10, ratio=Decimal("1"), tvl=Decimal("100")))
    registry.add_historical_data("0x01", HistoricalPoint(timestamp=clock.now, ratio=Decimal("3"), tvl=Decimal("150")))

    analytics = registry.get_pool_analytics("0x01", "1h")

    assert analytics.data_points == 2
    assert analytics.tvl_change == Decimal("50")
    assert analytics.tvl_change_percent == Decimal("50")
    assert analytics.ratio_volatility == Decimal("1")
    assert registry.get_pool_analytics("0x01", "24h").data_points == 3
    assert registry.get_pool_analytics("0xmissing", "1h") is None


def test_history_for_unknown_pool_is_rejected(registry):
    point = HistoricalPoint(timestamp=1, ratio=Decimal("1"), tvl=Decimal("1"))
    assert registry.add_historical_data("0xmissing", point) is False


def test_rebalance_events_update_performance(registry):
    registry.add_pool(_pool("0x01"))
    registry.add_pool_metrics(PoolMetrics(address="0x01"))

    registry.add_rebalance_event(_event("0xa", "0x01", 1_000))
    registry.add_rebalance_event(_event("0xb", "0x01", 4_000))
    registry.add_rebalance_event(_event("0xc", "0x01", 7_000))

    performance = registry.get_pool_metrics("0x01").performance
    assert performance.total_rebalances == 3
    assert performance.avg_time_between_rebalances == Decimal("3000")

    registry.update_rebalance_event("0xb", status="confirmed", gas_used="21000")
    assert registry.get_rebalance_event("0xb").status == "confirmed"
    history = registry.get_pool_metrics("0x01").rebalance_history
    assert [e.status for e in history] == ["pending", "confirmed", "pending"]
    assert registry.update_rebalance_event("0xmissing", status="failed") is None


def test_reset_metrics_zeros_performance(registry):
    registry.add_pool(_pool("0x01"))
    registry.add_pool_metrics(PoolMetrics(address="0x01"))
    registry.add_historical_data("0x01", HistoricalPoint(timestamp=1, ratio=Decimal("1"), tvl=Decimal("1")))
    registry.add_rebalance_event(_event("0xa", "0x01", 1_000))

    metrics = registry.reset_metrics("0x01")

    assert metrics.historical_data == ()
    assert metrics.rebalance_history == ()
    assert metrics.performance.total_rebalances == 0
    assert metrics.performance.avg_time_between_rebalances == Decimal("0")


def test_export_then_import_restores_state(registry, clock):
    registry.add_pool(_pool("0x01", tvl="12.5", volume="3"))
    registry.add_pool_metrics(PoolMetrics(address="0x01"))
    registry.add_historical_data("0x01", HistoricalPoint(timestamp=5, ratio=Decimal("1.25"), tvl=Decimal("12.5")))
    registry.add_rebalance_event(_event("0xa", "0x01", 1_000))
    payload = registry.export_data()

    restored = InMemoryPoolRegistry(clock=clock)
    restored.import_data(payload)

    assert restored.get_pool("0x01") == registry.get_pool("0x01")
    assert restored.get_pool_metrics("0x01") == registry.get_pool_metrics("0x01")
    assert restored.get_rebalance_events() == registry.get_rebalance_events()
    assert restored.get_dashboard_stats() == registry.get_dashboard_stats()


def test_clear_empties_everything(registry):
    registry.add_pool(_pool("0x01"))
    registry.add_rebalance_event(_event("0xa", "0x01", 1))
    registry.clear()

    assert registry.get_all_pools() == []
    assert registry.get_rebalance_events() == []
    assert registry.get_dashboard_stats().total_pools == 0
