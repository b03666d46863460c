from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import pytest

from hues_dex.application.dto.pool_metrics import GetPoolMetricsInput, UpdatePoolMetricsInput
from hues_dex.application.dto.pools import (
    DiscoverPoolsInput,
    ListPoolsInput,
    PoolStatusActionInput,
    PoolStatusInput,
    SetTargetRatiosInput,
)
from hues_dex.application.use_cases.discover_pools import DiscoverPoolsUseCase, SetTargetRatiosUseCase
from hues_dex.application.use_cases.list_pools import ListPoolsUseCase
from hues_dex.application.use_cases.pool_metrics import GetPoolMetricsUseCase, UpdatePoolMetricsUseCase
from hues_dex.application.use_cases.pool_status import (
    GetPoolStatusUseCase,
    PoolStatusActionUseCase,
    PoolStatusRefresher,
)
from hues_dex.domain.exceptions import (
    PoolInputError,
    PoolMetricsNotFoundError,
    PoolNotFoundError,
    RebalanceInputError,
)
from hues_dex.infrastructure.clients.pricing import PriceOverrides


FACTORY = "0x" + "fa" * 20
POOL_1 = "0x" + "01" * 20
POOL_2 = "0x" + "02" * 20
POOL_3 = "0x" + "03" * 20
THRESHOLD = Decimal("0.1")


def _discover(registry, gateway, clock, price_port=None) -> DiscoverPoolsUseCase:
    return DiscoverPoolsUseCase(
        registry=registry,
        contract_gateway=gateway,
        clock=clock,
        price_port=price_port,
        default_factory_address=FACTORY,
        default_target_ratio=Decimal("1"),
        threshold=THRESHOLD,
        max_pairs=1000,
    )


def _refresher(registry, gateway, clock) -> PoolStatusRefresher:
    return PoolStatusRefresher(
        registry=registry,
        contract_gateway=gateway,
        clock=clock,
        price_port=None,
        threshold=THRESHOLD,
    )


def test_discovery_registers_pools_and_skips_failing_pairs(registry, gateway, clock, reserves):
    gateway.pairs = {POOL_1: reserves(150, 100), POOL_2: reserves(100, 100), POOL_3: reserves(1, 1)}
    gateway.failing_pairs = {POOL_3}

    result = _discover(registry, gateway, clock).execute(DiscoverPoolsInput())

    assert result.total_discovered == 2
    assert result.imbalanced_count == 1
    assert [p.address for p in registry.get_all_pools()] == [POOL_1, POOL_2]
    pool = registry.get_pool(POOL_1)
    assert pool.current_ratio == Decimal("1.5")
    assert pool.target_ratio == Decimal("1")
    assert pool.tvl == Decimal("250")
    assert pool.created_at == clock.now
    history = registry.get_pool_metrics(POOL_1).historical_data
    assert len(history) == 1
    assert history[0].ratio == Decimal("1.5")


def test_rediscovery_keeps_target_ratio_and_metrics(registry, gateway, clock, reserves):
    gateway.pairs = {POOL_1: reserves(150, 100)}
    use_case = _discover(registry, gateway, clock)
    use_case.execute(DiscoverPoolsInput())
    registry.update_pool(POOL_1, target_ratio=Decimal("1.5"))

    gateway.pairs = {POOL_1: reserves(160, 100)}
    use_case.execute(DiscoverPoolsInput())

    pool = registry.get_pool(POOL_1)
    assert pool.target_ratio == Decimal("1.5")
    assert pool.current_ratio == Decimal("1.6")
    assert pool.needs_rebalancing is False
    assert len(registry.get_pool_metrics(POOL_1).historical_data) == 1


def test_discovery_applies_price_overrides(registry, gateway, clock, reserves):
    gateway.pairs = {POOL_1: reserves(2, 3)}
    prices = PriceOverrides({"rif": "10"})

    _discover(registry, gateway, clock, price_port=prices).execute(DiscoverPoolsInput())

    assert registry.get_pool(POOL_1).tvl == Decimal("23")


def test_set_target_ratios_updates_listed_pools(registry, gateway, clock, reserves):
    gateway.pairs = {POOL_1: reserves(150, 100), POOL_2: reserves(100, 100)}
    _discover(registry, gateway, clock).execute(DiscoverPoolsInput())
    use_case = SetTargetRatiosUseCase(
        registry=registry,
        default_target_ratio=Decimal("1"),
        threshold=THRESHOLD,
    )

    result = use_case.execute(
        SetTargetRatiosInput(pools=(POOL_1, "0xunknown"), target_ratios={POOL_1: "1.5"})
    )

    assert result.updated == 1
    pool = registry.get_pool(POOL_1)
    assert pool.target_ratio == Decimal("1.5")
    assert pool.needs_rebalancing is False


def test_set_target_ratios_rejects_bad_values(registry):
    use_case = SetTargetRatiosUseCase(
        registry=registry,
        default_target_ratio=Decimal("1"),
        threshold=THRESHOLD,
    )
    with pytest.raises(PoolInputError):
        use_case.execute(SetTargetRatiosInput(target_ratios={POOL_1: "abc"}))
    with pytest.raises(RebalanceInputError):
        use_case.execute(SetTargetRatiosInput(target_ratios={POOL_1: "-2"}))


def test_status_refresh_updates_pools_and_keeps_failed_ones(registry, gateway, clock, reserves):
    gateway.pairs = {POOL_1: reserves(100, 100), POOL_2: reserves(100, 100)}
    _discover(registry, gateway, clock).execute(DiscoverPoolsInput())
    gateway.pairs[POOL_1] = reserves(200, 100)
    gateway.failing_pairs = {POOL_2}
    clock.advance(1_000)

    result = GetPoolStatusUseCase(
        registry=registry,
        refresher=_refresher(registry, gateway, clock),
        clock=clock,
    ).execute(PoolStatusInput(detailed=True))

    assert result.total_pools == 2
    assert result.imbalanced_pools == 1
    assert result.imbalanced_addresses == [POOL_1]
    assert [p.address for p in result.pools] == [POOL_1, POOL_2]
    assert registry.get_pool(POOL_2).current_ratio == Decimal("1")
    assert len(registry.get_pool_metrics(POOL_1).historical_data) == 2
    assert len(registry.get_pool_metrics(POOL_2).historical_data) == 1


def test_status_without_detail_omits_pools(registry, gateway, clock):
    result = GetPoolStatusUseCase(
        registry=registry,
        refresher=_refresher(registry, gateway, clock),
        clock=clock,
    ).execute(PoolStatusInput())
    assert result.pools is None
    assert result.total_pools == 0


def test_status_actions(registry, gateway, clock, reserves):
    gateway.pairs = {POOL_1: reserves(150, 100), POOL_2: reserves(100, 100)}
    _discover(registry, gateway, clock).execute(DiscoverPoolsInput())
    registry.update_pool(POOL_1, target_ratio=Decimal("1.5"), needs_rebalancing=False)
    use_case = PoolStatusActionUseCase(
        registry=registry,
        refresher=_refresher(registry, gateway, clock),
        default_target_ratio=Decimal("1"),
        threshold=THRESHOLD,
    )

    single = use_case.execute(PoolStatusActionInput(action="refresh", pool_address=POOL_2))
    assert single.refreshed == [POOL_2]

    everything = use_case.execute(PoolStatusActionInput(action="refresh"))
    assert everything.refreshed == [POOL_1, POOL_2]

    reset = use_case.execute(PoolStatusActionInput(action="reset_target_ratios"))
    assert reset.reset == 2
    assert registry.get_pool(POOL_1).target_ratio == Decimal("1")
    assert registry.get_pool(POOL_1).needs_rebalancing is True

    with pytest.raises(PoolNotFoundError):
        use_case.execute(PoolStatusActionInput(action="refresh", pool_address="0xmissing"))
    with pytest.raises(PoolInputError):
        use_case.execute(PoolStatusActionInput(action="explode"))


def test_list_pools_filters_and_sorts(registry, gateway, clock, reserves):
    gateway.pairs = {
        POOL_1: reserves(150, 100),
        POOL_2: reserves(10, 10),
        POOL_3: reserves(500, 100),
    }
    _discover(registry, gateway, clock).execute(DiscoverPoolsInput())
    use_case = ListPoolsUseCase(registry=registry)

    by_tvl = use_case.execute(ListPoolsInput(sort_by="tvl", limit=2))
    assert [p.address for p in by_tvl.pools] == [POOL_3, POOL_1]

    imbalanced = use_case.execute(ListPoolsInput(imbalanced=True, sort_by="tvl"))
    assert [p.address for p in imbalanced.pools] == [POOL_3, POOL_1]

    searched = use_case.execute(ListPoolsInput(query="0202"))
    assert [p.address for p in searched.pools] == [POOL_2]
    assert searched.dashboard_stats.total_pools == 3

    with pytest.raises(PoolInputError):
        use_case.execute(ListPoolsInput(sort_by="apy"))


def test_metrics_read_with_analytics(registry, gateway, clock, reserves):
    gateway.pairs = {POOL_1: reserves(150, 100)}
    _discover(registry, gateway, clock).execute(DiscoverPoolsInput())
    use_case = GetPoolMetricsUseCase(registry=registry, clock=clock)

    result = use_case.execute(GetPoolMetricsInput(address=POOL_1, timeframe="1h", include_analytics=True))

    assert result.pool.address == POOL_1
    assert len(result.metrics.historical_data) == 1
    assert result.analytics.data_points == 1
    assert result.analytics.ratio_volatility == Decimal("0")


def test_metrics_errors(registry, gateway, clock, reserves):
    use_case = GetPoolMetricsUseCase(registry=registry, clock=clock)
    with pytest.raises(PoolNotFoundError):
        use_case.execute(GetPoolMetricsInput(address=POOL_1))

    gateway.pairs = {POOL_1: reserves(150, 100)}
    _discover(registry, gateway, clock).execute(DiscoverPoolsInput())
    with pytest.raises(PoolInputError):
        use_case.execute(GetPoolMetricsInput(address=POOL_1, timeframe="90d"))

    registry.add_pool(replace(registry.get_pool(POOL_1), address=POOL_2))
    with pytest.raises(PoolMetricsNotFoundError):
        use_case.execute(GetPoolMetricsInput(address=POOL_2))


def test_metrics_actions(registry, gateway, clock, reserves):
    gateway.pairs = {POOL_1: reserves(150, 100)}
    _discover(registry, gateway, clock).execute(DiscoverPoolsInput())
    use_case = UpdatePoolMetricsUseCase(registry=registry, clock=clock, threshold=THRESHOLD)

    updated = use_case.execute(
        UpdatePoolMetricsInput(address=POOL_1, action="update_target_ratio", data={"target_ratio": 1.45})
    )
    assert updated.target_ratio == Decimal("1.45")
    assert registry.get_pool(POOL_1).needs_rebalancing is False

    added = use_case.execute(
        UpdatePoolMetricsInput(
            address=POOL_1,
            action="add_historical_data",
            data={"historical_data": {"timestamp": clock.now + 1, "ratio": "1.4", "volume": "3"}},
        )
    )
    assert added.added is True
    history = registry.get_pool_metrics(POOL_1).historical_data
    assert history[-1].ratio == Decimal("1.4")
    assert history[-1].tvl == Decimal("250")
    assert history[-1].volume == Decimal("3")

    reset = use_case.execute(UpdatePoolMetricsInput(address=POOL_1, action="reset_metrics"))
    assert reset.reset is True
    assert registry.get_pool_metrics(POOL_1).historical_data == ()

    with pytest.raises(PoolInputError):
        use_case.execute(
            UpdatePoolMetricsInput(address=POOL_1, action="update_target_ratio", data={"target_ratio": 0})
        )
    with pytest.raises(PoolInputError):
        use_case.execute(UpdatePoolMetricsInput(address=POOL_1, action="add_historical_data", data={}))
    with pytest.raises(PoolInputError):
        use_case.execute(UpdatePoolMetricsInput(address=POOL_1, action="rename"))
    with pytest.raises(PoolNotFoundError):
        use_case.execute(UpdatePoolMetricsInput(address=POOL_2, action="reset_metrics"))
