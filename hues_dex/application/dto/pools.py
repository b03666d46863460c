from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from hues_dex.domain.entities.pool import DashboardStats, Pool


@dataclass(frozen=True)
class DiscoverPoolsInput:
    factory_address: str | None = None


@dataclass(frozen=True)
class DiscoverPoolsOutput:
    pools: list[Pool]
    total_discovered: int
    imbalanced_count: int


@dataclass(frozen=True)
class SetTargetRatiosInput:
    pools: tuple[str, ...] | None = None
    target_ratios: dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class SetTargetRatiosOutput:
    updated: int


@dataclass(frozen=True)
class PoolStatusInput:
    detailed: bool = False


@dataclass(frozen=True)
class PoolStatusOutput:
    pools: list[Pool] | None
    total_pools: int
    imbalanced_pools: int
    imbalanced_addresses: list[str]
    dashboard_stats: DashboardStats
    last_update: int


@dataclass(frozen=True)
class PoolStatusActionInput:
    action: str
    pool_address: str | None = None


@dataclass(frozen=True)
class PoolStatusActionOutput:
    action: str
    refreshed: list[str] = field(default_factory=list)
    reset: int = 0


@dataclass(frozen=True)
class ListPoolsInput:
    query: str | None = None
    sort_by: str | None = None
    limit: int | None = None
    imbalanced: bool = False


@dataclass(frozen=True)
class ListPoolsOutput:
    pools: list[Pool]
    total: int
    dashboard_stats: DashboardStats
