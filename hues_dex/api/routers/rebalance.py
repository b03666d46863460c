from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException

from hues_dex.api.deps import (
    get_blockchain_estimate_use_case,
    get_execute_rebalance_use_case,
    get_live_estimate_use_case,
    get_quick_estimate_use_case,
    get_rebalance_activity_use_case,
    get_rebalance_status_use_case,
)
from hues_dex.api.schemas.common import ApiResponse, ok
from hues_dex.api.schemas.rebalance import (
    ExecuteRebalanceRequest,
    ExecuteRebalanceResponse,
    LiveEstimateRequest,
    QuickEstimateResponse,
    RebalanceActivityResponse,
    RebalanceEstimateResponse,
    RebalanceStatusResponse,
    quick_estimate_response,
    rebalance_estimate_response,
    rebalance_event_response,
)
from hues_dex.application.dto.rebalance import (
    ExecuteRebalanceInput,
    LiveEstimateInput,
    QuickEstimateInput,
    RebalanceActivityInput,
    RebalanceStatusInput,
)
from hues_dex.application.use_cases.estimate_rebalance import (
    BlockchainEstimateUseCase,
    LiveEstimateUseCase,
    QuickEstimateUseCase,
)
from hues_dex.application.use_cases.execute_rebalance import ExecuteRebalanceUseCase
from hues_dex.application.use_cases.rebalance_status import (
    GetRebalanceActivityUseCase,
    GetRebalanceStatusUseCase,
)
from hues_dex.domain.exceptions import (
    InvalidAddressError,
    PoolNotFoundError,
    RebalanceExecutionError,
    RebalanceInputError,
    RebalancePreconditionError,
    ReserveInputError,
    TransactionNotFoundError,
)

router = APIRouter()


@router.get("/api/rebalance/activity", response_model=ApiResponse[RebalanceActivityResponse])
def get_rebalance_activity(
    limit: int = 20,
    pool: str | None = None,
    use_case: GetRebalanceActivityUseCase = Depends(get_rebalance_activity_use_case),
):
    try:
        result = use_case.execute(RebalanceActivityInput(limit=limit, pool_address=pool))
    except RebalanceInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(
        RebalanceActivityResponse(
            events=[rebalance_event_response(event) for event in result.events],
            total=result.total,
        )
    )


@router.get("/api/rebalance/status/{tx_hash}", response_model=ApiResponse[RebalanceStatusResponse])
def get_rebalance_status(
    tx_hash: str,
    use_case: GetRebalanceStatusUseCase = Depends(get_rebalance_status_use_case),
):
    try:
        result = use_case.execute(RebalanceStatusInput(tx_hash=tx_hash))
    except TransactionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return ok(
        RebalanceStatusResponse(
            tx_hash=result.tx_hash,
            status=result.status,
            block_number=result.block_number,
            gas_used=result.gas_used,
            events=result.events,
            rebalance_event=rebalance_event_response(result.rebalance_event),
            pool_updated=result.pool_updated,
        )
    )


@router.get(
    "/api/rebalance/blockchain-estimate/{address}",
    response_model=ApiResponse[RebalanceEstimateResponse],
)
def get_blockchain_estimate(
    address: str,
    target_ratio: Decimal | None = None,
    slippage_tolerance: Decimal = Decimal("0.5"),
    use_case: BlockchainEstimateUseCase = Depends(get_blockchain_estimate_use_case),
):
    try:
        result = use_case.execute(
            LiveEstimateInput(
                pool_address=address,
                target_ratio=target_ratio,
                slippage_tolerance=slippage_tolerance,
            )
        )
    except (InvalidAddressError, RebalanceInputError, ReserveInputError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(rebalance_estimate_response(result))


@router.get("/api/rebalance/{address}/estimate", response_model=ApiResponse[QuickEstimateResponse])
def get_quick_estimate(
    address: str,
    target_ratio: Decimal | None = None,
    use_case: QuickEstimateUseCase = Depends(get_quick_estimate_use_case),
):
    try:
        result = use_case.execute(QuickEstimateInput(pool_address=address, target_ratio=target_ratio))
    except PoolNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except RebalanceInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(quick_estimate_response(result))


@router.post("/api/rebalance/{address}/estimate", response_model=ApiResponse[RebalanceEstimateResponse])
def get_live_estimate(
    address: str,
    payload: LiveEstimateRequest,
    use_case: LiveEstimateUseCase = Depends(get_live_estimate_use_case),
):
    try:
        result = use_case.execute(
            LiveEstimateInput(
                pool_address=address,
                target_ratio=payload.target_ratio,
                slippage_tolerance=payload.slippage_tolerance,
            )
        )
    except PoolNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except (InvalidAddressError, RebalanceInputError, ReserveInputError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(rebalance_estimate_response(result))


@router.post("/api/rebalance/{address}/execute", response_model=ApiResponse[ExecuteRebalanceResponse])
def execute_rebalance(
    address: str,
    payload: ExecuteRebalanceRequest,
    use_case: ExecuteRebalanceUseCase = Depends(get_execute_rebalance_use_case),
):
    try:
        result = use_case.execute(
            ExecuteRebalanceInput(
                pool_address=address,
                private_key=payload.private_key,
                target_ratio=payload.target_ratio,
                max_gas_price=payload.max_gas_price,
                force_execute=payload.force_execute,
                slippage_tolerance=payload.slippage_tolerance,
            )
        )
    except PoolNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except (
        InvalidAddressError,
        RebalanceInputError,
        RebalancePreconditionError,
        RebalanceExecutionError,
        ReserveInputError,
    ) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(
        ExecuteRebalanceResponse(
            tx_hash=result.tx_hash,
            status=result.status,
            estimated_confirmation=result.estimated_confirmation,
        )
    )
