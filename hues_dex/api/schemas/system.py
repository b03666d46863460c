from __future__ import annotations

from pydantic import BaseModel, Field

from hues_dex.application.dto.system import InitializationResult
from hues_dex.domain.entities.system import SystemStatus


class ConfigResponse(BaseModel):
    network_id: int
    network_name: str
    rpc_url: str
    rpc_configured: bool
    contracts: dict[str, str]
    has_env_file: bool


class SystemStatusResponse(BaseModel):
    is_initialized: bool
    contracts_deployed: bool
    event_listeners_active: bool
    total_pools: int
    active_rebalances: int
    last_update: int
    network_id: int
    block_number: int


class InitializationResponse(BaseModel):
    outcome: str = Field(..., description="completed, skipped_in_progress, skipped_cooldown or failed.")
    discovered: int
    imbalanced: int
    error: str | None = None
    last_run_ms: int | None = None


class InitializeSystemResponse(BaseModel):
    status: SystemStatusResponse
    initialization: InitializationResponse


class SnapshotResponse(BaseModel):
    snapshot_id: int
    created_at: int
    pools: int


class ContractPresenceResponse(BaseModel):
    name: str
    address: str
    exists: bool
    code_length: int


class RouterWiringResponse(BaseModel):
    factory: str
    wtrbtc: str
    factory_matches: bool
    wtrbtc_matches: bool


class ContractStatusResponse(BaseModel):
    rpc_url: str | None = None
    block_number: int
    contracts: list[ContractPresenceResponse]
    router: RouterWiringResponse | None = None
    deployed_count: int
    all_deployed: bool
    can_create_pools: bool
    can_add_liquidity: bool
    recommendations: list[str]


class CheckPairResponse(BaseModel):
    factory_address: str
    token_a: str
    token_b: str
    pair_address: str
    pair_exists: bool


def system_status_response(status: SystemStatus) -> SystemStatusResponse:
    return SystemStatusResponse(
        is_initialized=status.is_initialized,
        contracts_deployed=status.contracts_deployed,
        event_listeners_active=status.event_listeners_active,
        total_pools=status.total_pools,
        active_rebalances=status.active_rebalances,
        last_update=status.last_update,
        network_id=status.network_id,
        block_number=status.block_number,
    )


def initialization_response(result: InitializationResult) -> InitializationResponse:
    return InitializationResponse(
        outcome=result.outcome,
        discovered=result.discovered,
        imbalanced=result.imbalanced,
        error=result.error,
        last_run_ms=result.last_run_ms,
    )
