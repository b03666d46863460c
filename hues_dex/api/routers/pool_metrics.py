from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from hues_dex.api.deps import get_pool_metrics_use_case, get_update_pool_metrics_use_case
from hues_dex.api.schemas.common import ApiResponse, dec_to_str_or_none, ok
from hues_dex.api.schemas.pool_metrics import (
    PoolMetricsActionRequest,
    PoolMetricsActionResponse,
    PoolMetricsDetailResponse,
    pool_analytics_response,
    pool_metrics_response,
)
from hues_dex.api.schemas.pools import pool_response
from hues_dex.application.dto.pool_metrics import GetPoolMetricsInput, UpdatePoolMetricsInput
from hues_dex.application.use_cases.pool_metrics import GetPoolMetricsUseCase, UpdatePoolMetricsUseCase
from hues_dex.domain.exceptions import PoolInputError, PoolMetricsNotFoundError, PoolNotFoundError

router = APIRouter()


@router.get("/api/pools/{address}/metrics", response_model=ApiResponse[PoolMetricsDetailResponse])
def get_pool_metrics(
    address: str,
    timeframe: str = "24h",
    analytics: bool = False,
    use_case: GetPoolMetricsUseCase = Depends(get_pool_metrics_use_case),
):
    try:
        result = use_case.execute(
            GetPoolMetricsInput(address=address, timeframe=timeframe, include_analytics=analytics)
        )
    except PoolNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PoolMetricsNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PoolInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(
        PoolMetricsDetailResponse(
            pool=pool_response(result.pool),
            metrics=pool_metrics_response(result.metrics),
            timeframe=result.timeframe,
            analytics=pool_analytics_response(result.analytics) if result.analytics else None,
        )
    )


@router.post("/api/pools/{address}/metrics", response_model=ApiResponse[PoolMetricsActionResponse])
def update_pool_metrics(
    address: str,
    payload: PoolMetricsActionRequest,
    use_case: UpdatePoolMetricsUseCase = Depends(get_update_pool_metrics_use_case),
):
    try:
        result = use_case.execute(
            UpdatePoolMetricsInput(address=address, action=payload.action, data=payload.data)
        )
    except PoolNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PoolInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(
        PoolMetricsActionResponse(
            action=result.action,
            target_ratio=dec_to_str_or_none(result.target_ratio),
            added=result.added,
            reset=result.reset,
        )
    )
