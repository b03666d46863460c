from __future__ import annotations

from typing import Protocol

from hues_dex.domain.entities.pool import (
    DashboardStats,
    HistoricalPoint,
    Pool,
    PoolAnalytics,
    PoolMetrics,
    RebalanceEvent,
)


class PoolRegistryPort(Protocol):
    def add_pool(self, pool: Pool) -> None:
        ...

    def get_pool(self, address: str) -> Pool | None:
        ...

    def get_all_pools(self) -> list[Pool]:
        ...

    def update_pool(self, address: str, **changes) -> Pool | None:
        ...

    def add_pool_metrics(self, metrics: PoolMetrics) -> None:
        ...

    def get_pool_metrics(self, address: str) -> PoolMetrics | None:
        ...

    def add_historical_data(self, address: str, point: HistoricalPoint) -> bool:
        ...

    def reset_metrics(self, address: str) -> PoolMetrics:
        ...

    def get_pool_analytics(self, address: str, timeframe: str) -> PoolAnalytics | None:
        ...

    def add_rebalance_event(self, event: RebalanceEvent) -> None:
        ...

    def get_rebalance_event(self, tx_hash: str) -> RebalanceEvent | None:
        ...

    def get_rebalance_events(self, pool_address: str | None = None) -> list[RebalanceEvent]:
        ...

    def update_rebalance_event(self, tx_hash: str, **changes) -> RebalanceEvent | None:
        ...

    def get_dashboard_stats(self) -> DashboardStats:
        ...

    def search_pools(self, query: str) -> list[Pool]:
        ...

    def get_imbalanced_pools(self) -> list[Pool]:
        ...

    def get_pools_by_tvl(self, limit: int = 10) -> list[Pool]:
        ...

    def get_pools_by_volume(self, limit: int = 10) -> list[Pool]:
        ...

    def export_data(self) -> str:
        ...

    def import_data(self, payload: str) -> None:
        ...
