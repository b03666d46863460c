from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from hues_dex.api.deps import (
    get_initialize_system_use_case,
    get_save_snapshot_use_case,
    get_system_status_use_case,
)
from hues_dex.api.schemas.common import ApiResponse, ok
from hues_dex.api.schemas.system import (
    InitializeSystemResponse,
    SnapshotResponse,
    SystemStatusResponse,
    initialization_response,
    system_status_response,
)
from hues_dex.application.use_cases.diagnostics import SaveSnapshotUseCase
from hues_dex.application.use_cases.initialize_system import (
    GetSystemStatusUseCase,
    InitializeSystemUseCase,
)
from hues_dex.domain.exceptions import (
    ContractNotDeployedError,
    InvalidAddressError,
    SnapshotUnavailableError,
)

router = APIRouter()


@router.get("/api/system/initialize", response_model=ApiResponse[SystemStatusResponse])
def get_system_status(
    use_case: GetSystemStatusUseCase = Depends(get_system_status_use_case),
):
    return ok(system_status_response(use_case.execute()))


@router.post("/api/system/initialize", response_model=ApiResponse[InitializeSystemResponse])
def initialize_system(
    use_case: InitializeSystemUseCase = Depends(get_initialize_system_use_case),
):
    try:
        result = use_case.execute()
    except (ContractNotDeployedError, InvalidAddressError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(
        InitializeSystemResponse(
            status=system_status_response(result.status),
            initialization=initialization_response(result.initialization),
        )
    )


@router.post("/api/system/snapshot", response_model=ApiResponse[SnapshotResponse])
def save_snapshot(
    use_case: SaveSnapshotUseCase = Depends(get_save_snapshot_use_case),
):
    try:
        result = use_case.execute()
    except SnapshotUnavailableError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(
        SnapshotResponse(
            snapshot_id=result.snapshot_id,
            created_at=result.created_at,
            pools=result.pools,
        )
    )
