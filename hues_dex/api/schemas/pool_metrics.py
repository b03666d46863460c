from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from hues_dex.api.schemas.common import dec_to_str
from hues_dex.api.schemas.pools import PoolResponse
from hues_dex.api.schemas.rebalance import RebalanceEventResponse, rebalance_event_response
from hues_dex.domain.entities.pool import PoolAnalytics, PoolMetrics


class HistoricalPointResponse(BaseModel):
    timestamp: int
    ratio: str
    tvl: str
    volume: str
    fees: str


class PoolPerformanceResponse(BaseModel):
    total_rebalances: int
    avg_time_between_rebalances: str = Field(..., description="Milliseconds.")
    total_volume: str
    total_fees: str
    impermanent_loss: str


class PoolMetricsResponse(BaseModel):
    address: str
    historical_data: list[HistoricalPointResponse]
    rebalance_history: list[RebalanceEventResponse]
    performance: PoolPerformanceResponse


class PoolAnalyticsResponse(BaseModel):
    timeframe: str
    data_points: int
    tvl_change: str
    tvl_change_percent: str
    volume_total: str
    fees_total: str
    ratio_volatility: str = Field(..., description="Population standard deviation of the ratio.")
    rebalance_count: int


class PoolMetricsDetailResponse(BaseModel):
    pool: PoolResponse
    metrics: PoolMetricsResponse
    timeframe: str
    analytics: PoolAnalyticsResponse | None = None


class PoolMetricsActionRequest(BaseModel):
    action: str = Field(..., description="update_target_ratio, add_historical_data or reset_metrics.")
    data: dict[str, Any] = Field(default_factory=dict)


class PoolMetricsActionResponse(BaseModel):
    action: str
    target_ratio: str | None = None
    added: bool = False
    reset: bool = False


def pool_metrics_response(metrics: PoolMetrics) -> PoolMetricsResponse:
    perf = metrics.performance
    return PoolMetricsResponse(
        address=metrics.address,
        historical_data=[
            HistoricalPointResponse(
                timestamp=point.timestamp,
                ratio=dec_to_str(point.ratio),
                tvl=dec_to_str(point.tvl),
                volume=dec_to_str(point.volume),
                fees=dec_to_str(point.fees),
            )
            for point in metrics.historical_data
        ],
        rebalance_history=[rebalance_event_response(event) for event in metrics.rebalance_history],
        performance=PoolPerformanceResponse(
            total_rebalances=perf.total_rebalances,
            avg_time_between_rebalances=dec_to_str(perf.avg_time_between_rebalances),
            total_volume=dec_to_str(perf.total_volume),
            total_fees=dec_to_str(perf.total_fees),
            impermanent_loss=dec_to_str(perf.impermanent_loss),
        ),
    )


def pool_analytics_response(analytics: PoolAnalytics) -> PoolAnalyticsResponse:
    return PoolAnalyticsResponse(
        timeframe=analytics.timeframe,
        data_points=analytics.data_points,
        tvl_change=dec_to_str(analytics.tvl_change),
        tvl_change_percent=dec_to_str(analytics.tvl_change_percent),
        volume_total=dec_to_str(analytics.volume_total),
        fees_total=dec_to_str(analytics.fees_total),
        ratio_volatility=dec_to_str(analytics.ratio_volatility),
        rebalance_count=analytics.rebalance_count,
    )
