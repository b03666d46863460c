from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from hues_dex.domain.entities.pool import Pool, PoolAnalytics, PoolMetrics


@dataclass(frozen=True)
class GetPoolMetricsInput:
    address: str
    timeframe: str = "24h"
    include_analytics: bool = False


@dataclass(frozen=True)
class GetPoolMetricsOutput:
    pool: Pool
    metrics: PoolMetrics
    timeframe: str
    analytics: PoolAnalytics | None


@dataclass(frozen=True)
class UpdatePoolMetricsInput:
    address: str
    action: str
    data: dict = field(default_factory=dict)


@dataclass(frozen=True)
class UpdatePoolMetricsOutput:
    action: str
    target_ratio: Decimal | None = None
    added: bool = False
    reset: bool = False
