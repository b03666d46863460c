from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from hues_dex.domain.entities.pool import TokenRef


@dataclass(frozen=True)
class PoolReserves:
    token_a: TokenRef
    token_b: TokenRef
    reserve_a: str
    reserve_b: str
    total_supply: str = "0"


@dataclass(frozen=True)
class RatioEvaluation:
    ratio: Decimal
    tvl: Decimal
    needs_rebalancing: bool
    normalized_a: Decimal
    normalized_b: Decimal


@dataclass(frozen=True)
class RebalanceEstimate:
    pool_address: str
    token_a: TokenRef
    token_b: TokenRef
    current_ratio: Decimal
    target_ratio: Decimal
    ratio_difference: Decimal
    is_rebalance_needed: bool
    swap_amount: Decimal
    swap_amount0: str
    swap_amount1: str
    swap_direction: str
    route: tuple[str, ...]
    estimated_gas: int
    gas_price: int | None
    estimated_cost: Decimal | None
    price_impact: Decimal
    expected_out: Decimal
    minimum_received: Decimal
    slippage_tolerance: Decimal
    can_rebalance: bool
    current_tvl: Decimal
    reserve_a: Decimal
    reserve_b: Decimal


@dataclass(frozen=True)
class QuickRebalanceEstimate:
    pool_address: str
    current_ratio: Decimal
    target_ratio: Decimal
    is_rebalance_needed: bool
    estimated_impact: Decimal
    can_rebalance: bool


@dataclass(frozen=True)
class TransactionReceipt:
    tx_hash: str
    status: int
    block_number: int
    gas_used: int
    logs: tuple[dict, ...] = ()
