from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from hues_dex.api.deps import (
    get_discover_pools_use_case,
    get_list_pools_use_case,
    get_pool_status_action_use_case,
    get_pool_status_use_case,
    get_set_target_ratios_use_case,
)
from hues_dex.api.schemas.common import ApiResponse, ok
from hues_dex.api.schemas.pools import (
    DiscoverPoolsResponse,
    PoolListResponse,
    PoolStatusActionRequest,
    PoolStatusActionResponse,
    PoolStatusResponse,
    SetTargetRatiosRequest,
    SetTargetRatiosResponse,
    dashboard_stats_response,
    pool_response,
)
from hues_dex.application.dto.pools import (
    DiscoverPoolsInput,
    ListPoolsInput,
    PoolStatusActionInput,
    PoolStatusInput,
    SetTargetRatiosInput,
)
from hues_dex.application.use_cases.discover_pools import DiscoverPoolsUseCase, SetTargetRatiosUseCase
from hues_dex.application.use_cases.list_pools import ListPoolsUseCase
from hues_dex.application.use_cases.pool_status import GetPoolStatusUseCase, PoolStatusActionUseCase
from hues_dex.domain.exceptions import (
    InvalidAddressError,
    PoolInputError,
    PoolNotFoundError,
    RebalanceInputError,
)

router = APIRouter()


@router.get("/api/pools", response_model=ApiResponse[PoolListResponse])
def list_pools(
    query: str | None = None,
    sort_by: str | None = None,
    limit: int | None = None,
    imbalanced: bool = False,
    use_case: ListPoolsUseCase = Depends(get_list_pools_use_case),
):
    try:
        result = use_case.execute(
            ListPoolsInput(query=query, sort_by=sort_by, limit=limit, imbalanced=imbalanced)
        )
    except PoolInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(
        PoolListResponse(
            pools=[pool_response(pool) for pool in result.pools],
            total=result.total,
            dashboard_stats=dashboard_stats_response(result.dashboard_stats),
        )
    )


@router.get("/api/pools/discover", response_model=ApiResponse[DiscoverPoolsResponse])
def discover_pools(
    factory_address: str | None = None,
    use_case: DiscoverPoolsUseCase = Depends(get_discover_pools_use_case),
):
    try:
        result = use_case.execute(DiscoverPoolsInput(factory_address=factory_address))
    except InvalidAddressError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(
        DiscoverPoolsResponse(
            pools=[pool_response(pool) for pool in result.pools],
            total_discovered=result.total_discovered,
            imbalanced_count=result.imbalanced_count,
        )
    )


@router.post("/api/pools/discover", response_model=ApiResponse[SetTargetRatiosResponse])
def set_target_ratios(
    payload: SetTargetRatiosRequest,
    use_case: SetTargetRatiosUseCase = Depends(get_set_target_ratios_use_case),
):
    try:
        result = use_case.execute(
            SetTargetRatiosInput(
                pools=tuple(payload.pools) if payload.pools is not None else None,
                target_ratios=payload.target_ratios or {},
            )
        )
    except (PoolInputError, RebalanceInputError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(SetTargetRatiosResponse(updated=result.updated))


@router.get("/api/pools/status", response_model=ApiResponse[PoolStatusResponse])
def get_pool_status(
    detailed: bool = False,
    use_case: GetPoolStatusUseCase = Depends(get_pool_status_use_case),
):
    result = use_case.execute(PoolStatusInput(detailed=detailed))
    return ok(
        PoolStatusResponse(
            pools=[pool_response(pool) for pool in result.pools] if result.pools is not None else None,
            total_pools=result.total_pools,
            imbalanced_pools=result.imbalanced_pools,
            imbalanced_addresses=result.imbalanced_addresses,
            dashboard_stats=dashboard_stats_response(result.dashboard_stats),
            last_update=result.last_update,
        )
    )


@router.post("/api/pools/status", response_model=ApiResponse[PoolStatusActionResponse])
def pool_status_action(
    payload: PoolStatusActionRequest,
    use_case: PoolStatusActionUseCase = Depends(get_pool_status_action_use_case),
):
    try:
        result = use_case.execute(
            PoolStatusActionInput(action=payload.action, pool_address=payload.pool_address)
        )
    except PoolNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PoolInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(
        PoolStatusActionResponse(
            action=result.action,
            refreshed=result.refreshed,
            reset=result.reset,
        )
    )
