from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class TokenRef:
    address: str
    symbol: str
    decimals: int = 18


@dataclass(frozen=True)
class Pool:
    address: str
    token_a: TokenRef
    token_b: TokenRef
    reserve_a: str
    reserve_b: str
    total_supply: str
    current_ratio: Decimal
    target_ratio: Decimal
    needs_rebalancing: bool
    tvl: Decimal
    volume_24h: Decimal | None = None
    fees_24h: Decimal = Decimal("0")
    apy: Decimal | None = None
    last_rebalance: int | None = None
    rebalance_count: int = 0
    created_at: int | None = None
    is_active: bool = True


@dataclass(frozen=True)
class HistoricalPoint:
    timestamp: int
    ratio: Decimal
    tvl: Decimal
    volume: Decimal = Decimal("0")
    fees: Decimal = Decimal("0")


@dataclass(frozen=True)
class RebalanceEvent:
    tx_hash: str
    timestamp: int
    pool_address: str
    from_ratio: Decimal
    to_ratio: Decimal
    target_ratio: Decimal
    gas_used: str
    gas_price: str
    status: str
    swap_amount0: str = "0"
    swap_amount1: str = "0"
    slippage: Decimal = Decimal("0")


@dataclass(frozen=True)
class PoolPerformance:
    total_rebalances: int = 0
    avg_time_between_rebalances: Decimal = Decimal("0")
    total_volume: Decimal = Decimal("0")
    total_fees: Decimal = Decimal("0")
    impermanent_loss: Decimal = Decimal("0")


@dataclass(frozen=True)
class PoolMetrics:
    address: str
    historical_data: tuple[HistoricalPoint, ...] = ()
    rebalance_history: tuple[RebalanceEvent, ...] = ()
    performance: PoolPerformance = field(default_factory=PoolPerformance)


@dataclass(frozen=True)
class PoolAnalytics:
    timeframe: str
    data_points: int
    tvl_change: Decimal
    tvl_change_percent: Decimal
    volume_total: Decimal
    fees_total: Decimal
    ratio_volatility: Decimal
    rebalance_count: int


@dataclass(frozen=True)
class DashboardStats:
    total_pools: int = 0
    total_tvl: Decimal = Decimal("0")
    total_volume_24h: Decimal = Decimal("0")
    average_apy: Decimal = Decimal("0")
    active_pools: int = 0
    imbalanced_pools: int = 0
