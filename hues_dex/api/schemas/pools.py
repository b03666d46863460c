from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from hues_dex.api.schemas.common import dec_to_str, dec_to_str_or_none
from hues_dex.domain.entities.pool import DashboardStats, Pool, TokenRef


class TokenRefResponse(BaseModel):
    address: str
    symbol: str
    decimals: int


class PoolResponse(BaseModel):
    address: str
    token_a: TokenRefResponse
    token_b: TokenRefResponse
    reserve_a: str = Field(..., description="Raw reserve in token A base units.")
    reserve_b: str = Field(..., description="Raw reserve in token B base units.")
    total_supply: str
    current_ratio: str
    target_ratio: str
    needs_rebalancing: bool
    tvl: str
    volume_24h: str | None = None
    fees_24h: str
    apy: str | None = None
    last_rebalance: int | None = None
    rebalance_count: int
    created_at: int | None = None
    is_active: bool


class DashboardStatsResponse(BaseModel):
    total_pools: int
    total_tvl: str
    total_volume_24h: str
    average_apy: str
    active_pools: int
    imbalanced_pools: int


class PoolListResponse(BaseModel):
    pools: list[PoolResponse]
    total: int
    dashboard_stats: DashboardStatsResponse


class DiscoverPoolsResponse(BaseModel):
    pools: list[PoolResponse]
    total_discovered: int
    imbalanced_count: int


class SetTargetRatiosRequest(BaseModel):
    pools: list[str] | None = Field(None, description="Pool addresses to update. Defaults to every pool.")
    target_ratios: dict[str, Any] | None = Field(
        None,
        description="Target ratio per pool address. Pools without an entry get the default.",
    )


class SetTargetRatiosResponse(BaseModel):
    updated: int


class PoolStatusResponse(BaseModel):
    pools: list[PoolResponse] | None = None
    total_pools: int
    imbalanced_pools: int
    imbalanced_addresses: list[str]
    dashboard_stats: DashboardStatsResponse
    last_update: int


class PoolStatusActionRequest(BaseModel):
    action: str = Field(..., description="refresh or reset_target_ratios.")
    pool_address: str | None = Field(None, description="Refresh a single pool.")


class PoolStatusActionResponse(BaseModel):
    action: str
    refreshed: list[str]
    reset: int


def token_ref_response(token: TokenRef) -> TokenRefResponse:
    return TokenRefResponse(address=token.address, symbol=token.symbol, decimals=token.decimals)


def pool_response(pool: Pool) -> PoolResponse:
    return PoolResponse(
        address=pool.address,
        token_a=token_ref_response(pool.token_a),
        token_b=token_ref_response(pool.token_b),
        reserve_a=pool.reserve_a,
        reserve_b=pool.reserve_b,
        total_supply=pool.total_supply,
        current_ratio=dec_to_str(pool.current_ratio),
        target_ratio=dec_to_str(pool.target_ratio),
        needs_rebalancing=pool.needs_rebalancing,
        tvl=dec_to_str(pool.tvl),
        volume_24h=dec_to_str_or_none(pool.volume_24h),
        fees_24h=dec_to_str(pool.fees_24h),
        apy=dec_to_str_or_none(pool.apy),
        last_rebalance=pool.last_rebalance,
        rebalance_count=pool.rebalance_count,
        created_at=pool.created_at,
        is_active=pool.is_active,
    )


def dashboard_stats_response(stats: DashboardStats) -> DashboardStatsResponse:
    return DashboardStatsResponse(
        total_pools=stats.total_pools,
        total_tvl=dec_to_str(stats.total_tvl),
        total_volume_24h=dec_to_str(stats.total_volume_24h),
        average_apy=dec_to_str(stats.average_apy),
        active_pools=stats.active_pools,
        imbalanced_pools=stats.imbalanced_pools,
    )
