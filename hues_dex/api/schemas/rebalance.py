from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from hues_dex.api.schemas.common import dec_to_str, dec_to_str_or_none
from hues_dex.api.schemas.pools import TokenRefResponse, token_ref_response
from hues_dex.domain.entities.pool import RebalanceEvent
from hues_dex.domain.entities.rebalance import QuickRebalanceEstimate, RebalanceEstimate


class RebalanceEventResponse(BaseModel):
    tx_hash: str
    timestamp: int
    pool_address: str
    from_ratio: str
    to_ratio: str
    target_ratio: str
    gas_used: str
    gas_price: str
    status: str
    swap_amount0: str
    swap_amount1: str
    slippage: str


class QuickEstimateResponse(BaseModel):
    pool_address: str
    current_ratio: str
    target_ratio: str
    is_rebalance_needed: bool
    estimated_impact: str
    can_rebalance: bool


class RebalanceEstimateResponse(BaseModel):
    pool_address: str
    token_a: TokenRefResponse
    token_b: TokenRefResponse
    current_ratio: str
    target_ratio: str
    ratio_difference: str
    is_rebalance_needed: bool
    swap_amount: str
    swap_amount0: str = Field(..., description="Token A amount in base units.")
    swap_amount1: str = Field(..., description="Token B amount in base units.")
    swap_direction: str
    route: list[str]
    estimated_gas: int
    gas_price: str | None = Field(None, description="Gas price in wei.")
    estimated_cost: str | None = Field(None, description="Gas cost in native units.")
    price_impact: str
    expected_out: str
    minimum_received: str
    slippage_tolerance: str
    can_rebalance: bool
    current_tvl: str
    reserve_a: str
    reserve_b: str


class LiveEstimateRequest(BaseModel):
    target_ratio: Decimal | None = Field(None, description="Defaults to the pool's target ratio.")
    slippage_tolerance: Decimal = Field(Decimal("0.5"), description="Percent.")


class ExecuteRebalanceRequest(BaseModel):
    private_key: str | None = None
    target_ratio: Decimal | None = None
    max_gas_price: int | None = Field(None, description="Upper bound for the gas price, in wei.")
    force_execute: bool = False
    slippage_tolerance: Decimal = Field(Decimal("0.5"), description="Percent.")


class ExecuteRebalanceResponse(BaseModel):
    tx_hash: str
    status: str
    estimated_confirmation: int


class RebalanceStatusResponse(BaseModel):
    tx_hash: str
    status: str
    block_number: int | None = None
    gas_used: str | None = None
    events: list[dict]
    rebalance_event: RebalanceEventResponse
    pool_updated: bool


class RebalanceActivityResponse(BaseModel):
    events: list[RebalanceEventResponse]
    total: int


def rebalance_event_response(event: RebalanceEvent) -> RebalanceEventResponse:
    return RebalanceEventResponse(
        tx_hash=event.tx_hash,
        timestamp=event.timestamp,
        pool_address=event.pool_address,
        from_ratio=dec_to_str(event.from_ratio),
        to_ratio=dec_to_str(event.to_ratio),
        target_ratio=dec_to_str(event.target_ratio),
        gas_used=event.gas_used,
        gas_price=event.gas_price,
        status=event.status,
        swap_amount0=event.swap_amount0,
        swap_amount1=event.swap_amount1,
        slippage=dec_to_str(event.slippage),
    )


def quick_estimate_response(estimate: QuickRebalanceEstimate) -> QuickEstimateResponse:
    return QuickEstimateResponse(
        pool_address=estimate.pool_address,
        current_ratio=dec_to_str(estimate.current_ratio),
        target_ratio=dec_to_str(estimate.target_ratio),
        is_rebalance_needed=estimate.is_rebalance_needed,
        estimated_impact=dec_to_str(estimate.estimated_impact),
        can_rebalance=estimate.can_rebalance,
    )


def rebalance_estimate_response(estimate: RebalanceEstimate) -> RebalanceEstimateResponse:
    return RebalanceEstimateResponse(
        pool_address=estimate.pool_address,
        token_a=token_ref_response(estimate.token_a),
        token_b=token_ref_response(estimate.token_b),
        current_ratio=dec_to_str(estimate.current_ratio),
        target_ratio=dec_to_str(estimate.target_ratio),
        ratio_difference=dec_to_str(estimate.ratio_difference),
        is_rebalance_needed=estimate.is_rebalance_needed,
        swap_amount=dec_to_str(estimate.swap_amount),
        swap_amount0=estimate.swap_amount0,
        swap_amount1=estimate.swap_amount1,
        swap_direction=estimate.swap_direction,
        route=list(estimate.route),
        estimated_gas=estimate.estimated_gas,
        gas_price=str(estimate.gas_price) if estimate.gas_price is not None else None,
        estimated_cost=dec_to_str_or_none(estimate.estimated_cost),
        price_impact=dec_to_str(estimate.price_impact),
        expected_out=dec_to_str(estimate.expected_out),
        minimum_received=dec_to_str(estimate.minimum_received),
        slippage_tolerance=dec_to_str(estimate.slippage_tolerance),
        can_rebalance=estimate.can_rebalance,
        current_tvl=dec_to_str(estimate.current_tvl),
        reserve_a=dec_to_str(estimate.reserve_a),
        reserve_b=dec_to_str(estimate.reserve_b),
    )
