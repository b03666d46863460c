from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
import json
import logging
from threading import Lock

from hues_dex.application.ports.pool_registry_port import PoolRegistryPort
from hues_dex.application.ports.system_state_port import ClockPort
from hues_dex.domain.entities.pool import (
    DashboardStats,
    HistoricalPoint,
    Pool,
    PoolAnalytics,
    PoolMetrics,
    PoolPerformance,
    RebalanceEvent,
)
from hues_dex.domain.services.pool_analytics import build_pool_analytics
from hues_dex.infrastructure.clock import SystemClock
from hues_dex.infrastructure.registry.mappers import (
    event_from_dict,
    event_to_dict,
    metrics_from_dict,
    metrics_to_dict,
    pool_from_dict,
    pool_to_dict,
    stats_to_dict,
)


logger = logging.getLogger(__name__)


def _avg_interval(events: tuple[RebalanceEvent, ...]) -> Decimal:
    if len(events) < 2:
        return Decimal("0")
    timestamps = sorted(e.timestamp for e in events)
    return Decimal(timestamps[-1] - timestamps[0]) / (len(timestamps) - 1)


class InMemoryPoolRegistry(PoolRegistryPort):
    """Pools, metrics and rebalance events for a single process.

    Writes are last-write-wins; the lock only keeps the dicts consistent.
    ``history_max_points`` <= 0 keeps the full historical series.
    """

    def __init__(self, *, history_max_points: int = 0, clock: ClockPort | None = None):
        self._history_max_points = history_max_points
        self._clock = clock or SystemClock()
        self._pools: dict[str, Pool] = {}
        self._metrics: dict[str, PoolMetrics] = {}
        self._events: list[RebalanceEvent] = []
        self._stats = DashboardStats()
        self._lock = Lock()

    def add_pool(self, pool: Pool) -> None:
        with self._lock:
            self._pools[pool.address] = pool
            self._refresh_stats()

    def get_pool(self, address: str) -> Pool | None:
        with self._lock:
            return self._pools.get(address)

    def get_all_pools(self) -> list[Pool]:
        with self._lock:
            return list(self._pools.values())

    def update_pool(self, address: str, **changes) -> Pool | None:
        with self._lock:
            pool = self._pools.get(address)
            if pool is None:
                return None
            updated = replace(pool, **changes)
            self._pools[address] = updated
            self._refresh_stats()
            return updated

    def remove_pool(self, address: str) -> None:
        with self._lock:
            self._pools.pop(address, None)
            self._metrics.pop(address, None)
            self._refresh_stats()

    def add_pool_metrics(self, metrics: PoolMetrics) -> None:
        with self._lock:
            self._metrics[metrics.address] = metrics

    def get_pool_metrics(self, address: str) -> PoolMetrics | None:
        with self._lock:
            return self._metrics.get(address)

    def add_historical_data(self, address: str, point: HistoricalPoint) -> bool:
        with self._lock:
            metrics = self._metrics.get(address)
            if metrics is None:
                if address not in self._pools:
                    return False
                metrics = PoolMetrics(address=address)
            history = metrics.historical_data + (point,)
            if self._history_max_points > 0 and len(history) > self._history_max_points:
                history = history[-self._history_max_points :]
            self._metrics[address] = replace(metrics, historical_data=history)
            return True

    def reset_metrics(self, address: str) -> PoolMetrics:
        metrics = PoolMetrics(address=address, performance=PoolPerformance())
        with self._lock:
            self._metrics[address] = metrics
        return metrics

    def get_pool_analytics(self, address: str, timeframe: str) -> PoolAnalytics | None:
        metrics = self.get_pool_metrics(address)
        if metrics is None:
            return None
        return build_pool_analytics(metrics, timeframe=timeframe, now_ms=self._clock.now_ms())

    def add_rebalance_event(self, event: RebalanceEvent) -> None:
        with self._lock:
            self._events.append(event)
            metrics = self._metrics.get(event.pool_address)
            if metrics is not None:
                history = metrics.rebalance_history + (event,)
                performance = replace(
                    metrics.performance,
                    total_rebalances=metrics.performance.total_rebalances + 1,
                    avg_time_between_rebalances=_avg_interval(history),
                )
                self._metrics[event.pool_address] = replace(
                    metrics,
                    rebalance_history=history,
                    performance=performance,
                )
            self._refresh_stats()

    def get_rebalance_event(self, tx_hash: str) -> RebalanceEvent | None:
        with self._lock:
            for event in self._events:
                if event.tx_hash == tx_hash:
                    return event
            return None

    def get_rebalance_events(self, pool_address: str | None = None) -> list[RebalanceEvent]:
        with self._lock:
            if pool_address:
                return [e for e in self._events if e.pool_address == pool_address]
            return list(self._events)

    def update_rebalance_event(self, tx_hash: str, **changes) -> RebalanceEvent | None:
        with self._lock:
            for idx, event in enumerate(self._events):
                if event.tx_hash != tx_hash:
                    continue
                updated = replace(event, **changes)
                self._events[idx] = updated
                metrics = self._metrics.get(updated.pool_address)
                if metrics is not None:
                    history = tuple(
                        updated if item.tx_hash == tx_hash else item
                        for item in metrics.rebalance_history
                    )
                    self._metrics[updated.pool_address] = replace(metrics, rebalance_history=history)
                return updated
            return None

    def get_dashboard_stats(self) -> DashboardStats:
        with self._lock:
            return self._stats

    def search_pools(self, query: str) -> list[Pool]:
        lowered = query.lower()
        return [
            pool
            for pool in self.get_all_pools()
            if lowered in pool.address.lower()
            or lowered in pool.token_a.symbol.lower()
            or lowered in pool.token_b.symbol.lower()
        ]

    def get_imbalanced_pools(self) -> list[Pool]:
        return [pool for pool in self.get_all_pools() if pool.needs_rebalancing]

    def get_pools_by_tvl(self, limit: int = 10) -> list[Pool]:
        return sorted(self.get_all_pools(), key=lambda p: p.tvl, reverse=True)[:limit]

    def get_pools_by_volume(self, limit: int = 10) -> list[Pool]:
        return sorted(
            self.get_all_pools(),
            key=lambda p: p.volume_24h or Decimal("0"),
            reverse=True,
        )[:limit]

    def export_data(self) -> str:
        with self._lock:
            payload = {
                "pools": [pool_to_dict(p) for p in self._pools.values()],
                "pool_metrics": [metrics_to_dict(m) for m in self._metrics.values()],
                "rebalance_events": [event_to_dict(e) for e in self._events],
                "dashboard_stats": stats_to_dict(self._stats),
                "timestamp": self._clock.now_ms(),
            }
        return json.dumps(payload)

    def import_data(self, payload: str) -> None:
        parsed = json.loads(payload)
        pools = [pool_from_dict(row) for row in parsed.get("pools") or []]
        metrics = [metrics_from_dict(row) for row in parsed.get("pool_metrics") or []]
        events = [event_from_dict(row) for row in parsed.get("rebalance_events") or []]
        with self._lock:
            self._pools = {p.address: p for p in pools}
            self._metrics = {m.address: m for m in metrics}
            self._events = events
            self._refresh_stats()
        logger.info(
            "pool_registry: imported pools=%s metrics=%s events=%s",
            len(pools),
            len(metrics),
            len(events),
        )

    def clear(self) -> None:
        with self._lock:
            self._pools.clear()
            self._metrics.clear()
            self._events = []
            self._stats = DashboardStats()

    def _refresh_stats(self) -> None:
        pools = list(self._pools.values())
        total = len(pools)
        self._stats = DashboardStats(
            total_pools=total,
            total_tvl=sum((p.tvl for p in pools), Decimal("0")),
            total_volume_24h=sum((p.volume_24h or Decimal("0") for p in pools), Decimal("0")),
            average_apy=(
                sum((p.apy or Decimal("0") for p in pools), Decimal("0")) / total
                if total
                else Decimal("0")
            ),
            active_pools=sum(1 for p in pools if p.is_active),
            imbalanced_pools=sum(1 for p in pools if p.needs_rebalancing),
        )
