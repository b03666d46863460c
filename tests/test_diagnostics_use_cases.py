from __future__ import annotations

from decimal import Decimal

import pytest

from hues_dex.application.dto.pools import DiscoverPoolsInput
from hues_dex.application.dto.system import CheckPairInput
from hues_dex.application.use_cases.diagnostics import (
    DEFAULT_CHECK_TOKEN_A,
    DEFAULT_CHECK_TOKEN_B,
    CheckPairUseCase,
    ContractStatusUseCase,
    SaveSnapshotUseCase,
    restore_latest_snapshot,
)
from hues_dex.application.use_cases.discover_pools import DiscoverPoolsUseCase
from hues_dex.application.use_cases.initialize_system import (
    CONTRACTS_VERIFIED_KEY,
    OUTCOME_COMPLETED,
    GetSystemStatusUseCase,
    InitializationService,
    InitializeSystemUseCase,
)
from hues_dex.domain.exceptions import ContractNotDeployedError, SnapshotUnavailableError
from hues_dex.infrastructure.registry.in_memory_registry import InMemoryPoolRegistry
from hues_dex.shared.config import ContractAddresses


CONTRACTS = ContractAddresses(
    factory="0x" + "fa" * 20,
    router="0x" + "bc" * 20,
    rebalancer_controller="0x" + "ee" * 20,
    keeper_helper="0x" + "cc" * 20,
    wtrbtc="0x" + "dd" * 20,
    token_a="0x" + "aa" * 20,
    token_b="0x" + "bb" * 20,
)
POOL = "0x" + "01" * 20


class FakeSnapshotStore:
    def __init__(self):
        self.saved: list[tuple[str, int]] = []

    def save_snapshot(self, *, payload: str, created_at_ms: int) -> int:
        self.saved.append((payload, created_at_ms))
        return len(self.saved)

    def load_latest_snapshot(self) -> str | None:
        return self.saved[-1][0] if self.saved else None


def _deploy_all(gateway) -> None:
    for address in (CONTRACTS.factory, CONTRACTS.router, CONTRACTS.rebalancer_controller, CONTRACTS.wtrbtc):
        gateway.codes[address] = "0x6080604052"


def _contract_status(gateway) -> ContractStatusUseCase:
    return ContractStatusUseCase(contract_gateway=gateway, contracts=CONTRACTS, rpc_url="http://node")


def test_contract_status_ready(gateway):
    _deploy_all(gateway)
    gateway.router_wiring = (CONTRACTS.factory.upper().replace("0X", "0x"), CONTRACTS.wtrbtc)

    result = _contract_status(gateway).execute()

    assert result.all_deployed is True
    assert result.deployed_count == 4
    assert result.contracts[0].code_length == 5
    assert result.router.factory_matches is True
    assert result.can_add_liquidity is True
    assert result.block_number == 123
    assert result.recommendations == ["System ready for operation"]


def test_contract_status_reports_missing_and_miswired(gateway):
    gateway.codes[CONTRACTS.router] = "0x60"
    gateway.router_wiring = ("0x" + "00" * 19 + "01", CONTRACTS.wtrbtc)

    result = _contract_status(gateway).execute()

    assert result.deployed_count == 1
    assert result.can_create_pools is False
    assert result.can_add_liquidity is False
    assert result.recommendations == [
        "Deploy Factory contract",
        "Router points to wrong Factory - redeploy Router with correct Factory address",
        "Deploy RebalancerController contract (optional for basic functionality)",
        "Deploy WTRBTC contract (optional for native token wrapping)",
    ]


def test_check_pair_defaults(gateway):
    result = CheckPairUseCase(contract_gateway=gateway, default_factory_address=CONTRACTS.factory).execute(
        CheckPairInput()
    )
    assert result.factory_address == CONTRACTS.factory
    assert (result.token_a, result.token_b) == (DEFAULT_CHECK_TOKEN_A, DEFAULT_CHECK_TOKEN_B)
    assert result.pair_exists is False


def test_check_pair_found(gateway):
    gateway.pair_lookup[(CONTRACTS.token_a, CONTRACTS.token_b)] = POOL
    result = CheckPairUseCase(contract_gateway=gateway, default_factory_address=CONTRACTS.factory).execute(
        CheckPairInput(token_a=CONTRACTS.token_a, token_b=CONTRACTS.token_b)
    )
    assert result.pair_address == POOL
    assert result.pair_exists is True


def test_snapshot_requires_store(registry, clock):
    with pytest.raises(SnapshotUnavailableError):
        SaveSnapshotUseCase(registry=registry, snapshot_port=None, clock=clock).execute()


def test_snapshot_save_and_restore(registry, gateway, clock, reserves):
    gateway.pairs = {POOL: reserves(150, 100)}
    DiscoverPoolsUseCase(
        registry=registry,
        contract_gateway=gateway,
        clock=clock,
        price_port=None,
        default_factory_address=CONTRACTS.factory,
        default_target_ratio=Decimal("1"),
        threshold=Decimal("0.1"),
        max_pairs=10,
    ).execute(DiscoverPoolsInput())
    store = FakeSnapshotStore()

    result = SaveSnapshotUseCase(registry=registry, snapshot_port=store, clock=clock).execute()

    assert result.snapshot_id == 1
    assert result.created_at == clock.now
    assert result.pools == 1

    restored = InMemoryPoolRegistry(clock=clock)
    assert restore_latest_snapshot(registry=restored, snapshot_port=store) is True
    assert restored.get_pool(POOL).current_ratio == Decimal("1.5")
    assert restore_latest_snapshot(registry=restored, snapshot_port=FakeSnapshotStore()) is False


def _initialize(registry, gateway, clock, state_store) -> InitializeSystemUseCase:
    discovery = DiscoverPoolsUseCase(
        registry=registry,
        contract_gateway=gateway,
        clock=clock,
        price_port=None,
        default_factory_address=CONTRACTS.factory,
        default_target_ratio=Decimal("1"),
        threshold=Decimal("0.1"),
        max_pairs=10,
    )
    return InitializeSystemUseCase(
        contract_gateway=gateway,
        state_store=state_store,
        initialization=InitializationService(
            clock=clock,
            state_store=state_store,
            discover=lambda: discovery.execute(DiscoverPoolsInput()),
        ),
        status=GetSystemStatusUseCase(
            registry=registry,
            contract_gateway=gateway,
            state_store=state_store,
            clock=clock,
            chain_id=31,
        ),
        factory_address=CONTRACTS.factory,
        rebalancer_address=CONTRACTS.rebalancer_controller,
    )


def test_initialize_requires_deployed_contracts(registry, gateway, clock, state_store):
    gateway.codes[CONTRACTS.factory] = "0x6080"

    with pytest.raises(ContractNotDeployedError):
        _initialize(registry, gateway, clock, state_store).execute()
    assert state_store.get(CONTRACTS_VERIFIED_KEY) == "false"


def test_initialize_discovers_and_reports_status(registry, gateway, clock, state_store, reserves):
    _deploy_all(gateway)
    gateway.pairs = {POOL: reserves(150, 100)}

    result = _initialize(registry, gateway, clock, state_store).execute()

    assert result.initialization.outcome == OUTCOME_COMPLETED
    assert result.initialization.discovered == 1
    status = result.status
    assert status.is_initialized is True
    assert status.contracts_deployed is True
    assert status.event_listeners_active is False
    assert status.total_pools == 1
    assert status.network_id == 31
    assert status.block_number == 123
