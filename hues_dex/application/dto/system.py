from __future__ import annotations

from dataclasses import dataclass, field

from hues_dex.domain.entities.system import ContractPresence, RouterWiring, SystemStatus


@dataclass(frozen=True)
class InitializationResult:
    outcome: str
    discovered: int = 0
    imbalanced: int = 0
    error: str | None = None
    last_run_ms: int | None = None


@dataclass(frozen=True)
class InitializeSystemOutput:
    status: SystemStatus
    initialization: InitializationResult


@dataclass(frozen=True)
class ContractStatusOutput:
    rpc_url: str | None
    block_number: int
    contracts: list[ContractPresence]
    router: RouterWiring | None
    deployed_count: int
    all_deployed: bool
    can_create_pools: bool
    can_add_liquidity: bool
    recommendations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CheckPairInput:
    token_a: str | None = None
    token_b: str | None = None
    factory_address: str | None = None


@dataclass(frozen=True)
class CheckPairOutput:
    factory_address: str
    token_a: str
    token_b: str
    pair_address: str
    pair_exists: bool


@dataclass(frozen=True)
class SnapshotOutput:
    snapshot_id: int
    created_at: int
    pools: int
