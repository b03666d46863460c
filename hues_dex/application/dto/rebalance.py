from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from hues_dex.domain.entities.pool import RebalanceEvent


@dataclass(frozen=True)
class QuickEstimateInput:
    pool_address: str
    target_ratio: Decimal | None = None


@dataclass(frozen=True)
class LiveEstimateInput:
    pool_address: str
    target_ratio: Decimal | None = None
    slippage_tolerance: Decimal = Decimal("0.5")


@dataclass(frozen=True)
class ExecuteRebalanceInput:
    pool_address: str
    private_key: str | None
    target_ratio: Decimal | None = None
    max_gas_price: int | None = None
    force_execute: bool = False
    slippage_tolerance: Decimal = Decimal("0.5")


@dataclass(frozen=True)
class ExecuteRebalanceOutput:
    tx_hash: str
    status: str
    estimated_confirmation: int


@dataclass(frozen=True)
class RebalanceStatusInput:
    tx_hash: str


@dataclass(frozen=True)
class RebalanceStatusOutput:
    tx_hash: str
    status: str
    block_number: int | None
    gas_used: str | None
    events: list[dict]
    rebalance_event: RebalanceEvent
    pool_updated: bool


@dataclass(frozen=True)
class RebalanceActivityInput:
    limit: int = 20
    pool_address: str | None = None


@dataclass(frozen=True)
class RebalanceActivityOutput:
    events: list[RebalanceEvent] = field(default_factory=list)
    total: int = 0
