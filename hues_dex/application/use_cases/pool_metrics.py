from __future__ import annotations

from decimal import Decimal
import logging

from hues_dex.application.dto.pool_metrics import (
    GetPoolMetricsInput,
    GetPoolMetricsOutput,
    UpdatePoolMetricsInput,
    UpdatePoolMetricsOutput,
)
from hues_dex.application.ports.pool_registry_port import PoolRegistryPort
from hues_dex.application.ports.system_state_port import ClockPort
from hues_dex.application.use_cases.pool_common import parse_decimal
from hues_dex.domain.entities.pool import HistoricalPoint, Pool
from hues_dex.domain.exceptions import (
    PoolInputError,
    PoolMetricsNotFoundError,
    PoolNotFoundError,
)
from hues_dex.domain.services.pool_analytics import (
    filter_metrics,
    timeframe_start,
)
from hues_dex.domain.services.pool_ratio import needs_rebalancing


logger = logging.getLogger(__name__)


METRICS_ACTIONS = {"update_target_ratio", "add_historical_data", "reset_metrics"}


class GetPoolMetricsUseCase:
    def __init__(self, *, registry: PoolRegistryPort, clock: ClockPort):
        self._registry = registry
        self._clock = clock

    def execute(self, command: GetPoolMetricsInput) -> GetPoolMetricsOutput:
        pool = self._registry.get_pool(command.address)
        if pool is None:
            raise PoolNotFoundError("Pool not found.")
        metrics = self._registry.get_pool_metrics(command.address)
        if metrics is None:
            raise PoolMetricsNotFoundError("Pool metrics not found.")

        now_ms = self._clock.now_ms()
        start_ms = timeframe_start(command.timeframe, now_ms=now_ms)
        analytics = None
        if command.include_analytics:
            analytics = self._registry.get_pool_analytics(command.address, command.timeframe)

        return GetPoolMetricsOutput(
            pool=pool,
            metrics=filter_metrics(metrics, start_ms=start_ms),
            timeframe=command.timeframe,
            analytics=analytics,
        )


class UpdatePoolMetricsUseCase:
    def __init__(self, *, registry: PoolRegistryPort, clock: ClockPort, threshold: Decimal):
        self._registry = registry
        self._clock = clock
        self._threshold = threshold

    def execute(self, command: UpdatePoolMetricsInput) -> UpdatePoolMetricsOutput:
        pool = self._registry.get_pool(command.address)
        if pool is None:
            raise PoolNotFoundError("Pool not found.")
        if command.action not in METRICS_ACTIONS:
            raise PoolInputError(f"Invalid action: {command.action!r}.")

        data = command.data or {}
        if command.action == "update_target_ratio":
            target = parse_decimal(data.get("target_ratio"), field="target_ratio", error_cls=PoolInputError)
            if target <= 0:
                raise PoolInputError("Invalid target ratio.")
            self._registry.update_pool(
                pool.address,
                target_ratio=target,
                needs_rebalancing=needs_rebalancing(pool.current_ratio, target, self._threshold),
            )
            logger.info("pool_metrics: target_ratio_updated pool=%s target=%s", pool.address, target)
            return UpdatePoolMetricsOutput(action=command.action, target_ratio=target)

        if command.action == "add_historical_data":
            point = self._build_point(pool, data.get("historical_data"))
            added = self._registry.add_historical_data(pool.address, point)
            return UpdatePoolMetricsOutput(action=command.action, added=added)

        self._registry.reset_metrics(pool.address)
        logger.info("pool_metrics: reset pool=%s", pool.address)
        return UpdatePoolMetricsOutput(action=command.action, reset=True)

    def _build_point(self, pool: Pool, payload) -> HistoricalPoint:
        if not isinstance(payload, dict):
            raise PoolInputError("Invalid historical data.")

        def value(name: str, default: Decimal) -> Decimal:
            if payload.get(name) is None:
                return default
            return parse_decimal(payload[name], field=name, error_cls=PoolInputError)

        timestamp = payload.get("timestamp")
        if timestamp is None:
            timestamp = self._clock.now_ms()
        elif isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise PoolInputError("timestamp must be an integer in milliseconds.")

        return HistoricalPoint(
            timestamp=timestamp,
            ratio=value("ratio", pool.current_ratio),
            tvl=value("tvl", pool.tvl),
            volume=value("volume", Decimal("0")),
            fees=value("fees", Decimal("0")),
        )
