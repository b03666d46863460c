from __future__ import annotations

import logging

from hues_dex.application.dto.system import (
    CheckPairInput,
    CheckPairOutput,
    ContractStatusOutput,
    SnapshotOutput,
)
from hues_dex.application.ports.contract_gateway_port import ContractGatewayPort
from hues_dex.application.ports.pool_registry_port import PoolRegistryPort
from hues_dex.application.ports.system_state_port import ClockPort, RegistrySnapshotPort
from hues_dex.domain.entities.system import ContractPresence, RouterWiring
from hues_dex.domain.exceptions import ContractCallError, SnapshotUnavailableError
from hues_dex.shared.config import ZERO_ADDRESS, ContractAddresses


logger = logging.getLogger(__name__)


DEFAULT_CHECK_TOKEN_A = "0x0000000000000000000000000000000000000001"
DEFAULT_CHECK_TOKEN_B = "0x0000000000000000000000000000000000000002"


def _presence(name: str, address: str, code: str) -> ContractPresence:
    body = code[2:] if code.startswith("0x") else code
    return ContractPresence(
        name=name,
        address=address,
        exists=bool(body),
        code_length=len(body) // 2,
    )


class ContractStatusUseCase:
    def __init__(
        self,
        *,
        contract_gateway: ContractGatewayPort,
        contracts: ContractAddresses,
        rpc_url: str | None,
    ):
        self._gateway = contract_gateway
        self._contracts = contracts
        self._rpc_url = rpc_url

    def execute(self) -> ContractStatusOutput:
        targets = (
            ("factory", self._contracts.factory),
            ("router", self._contracts.router),
            ("rebalancer", self._contracts.rebalancer_controller),
            ("wtrbtc", self._contracts.wtrbtc),
        )
        presence = {name: _presence(name, address, self._gateway.get_code(address)) for name, address in targets}

        router = None
        if presence["router"].exists:
            try:
                factory, wtrbtc = self._gateway.get_router_wiring(self._contracts.router)
                router = RouterWiring(
                    factory=factory,
                    wtrbtc=wtrbtc,
                    factory_matches=factory.lower() == self._contracts.factory.lower(),
                    wtrbtc_matches=wtrbtc.lower() == self._contracts.wtrbtc.lower(),
                )
            except ContractCallError as exc:
                logger.warning("contract_status: router_wiring_failed error=%s", exc)

        recommendations = []
        if not presence["factory"].exists:
            recommendations.append("Deploy Factory contract")
        if not presence["router"].exists:
            recommendations.append("Deploy Router contract")
        if router is not None and not router.factory_matches:
            recommendations.append("Router points to wrong Factory - redeploy Router with correct Factory address")
        if not presence["rebalancer"].exists:
            recommendations.append("Deploy RebalancerController contract (optional for basic functionality)")
        if not presence["wtrbtc"].exists:
            recommendations.append("Deploy WTRBTC contract (optional for native token wrapping)")

        deployed = sum(1 for item in presence.values() if item.exists)
        return ContractStatusOutput(
            rpc_url=self._rpc_url,
            block_number=self._gateway.get_block_number(),
            contracts=list(presence.values()),
            router=router,
            deployed_count=deployed,
            all_deployed=deployed == len(presence),
            can_create_pools=presence["factory"].exists,
            can_add_liquidity=(
                presence["factory"].exists
                and presence["router"].exists
                and router is not None
                and router.factory_matches
            ),
            recommendations=recommendations or ["System ready for operation"],
        )


class CheckPairUseCase:
    def __init__(self, *, contract_gateway: ContractGatewayPort, default_factory_address: str):
        self._gateway = contract_gateway
        self._default_factory_address = default_factory_address

    def execute(self, command: CheckPairInput) -> CheckPairOutput:
        factory = command.factory_address or self._default_factory_address
        token_a = command.token_a or DEFAULT_CHECK_TOKEN_A
        token_b = command.token_b or DEFAULT_CHECK_TOKEN_B
        pair = self._gateway.get_pair(factory_address=factory, token_a=token_a, token_b=token_b)
        return CheckPairOutput(
            factory_address=factory,
            token_a=token_a,
            token_b=token_b,
            pair_address=pair,
            pair_exists=bool(pair) and pair.lower() != ZERO_ADDRESS,
        )


class SaveSnapshotUseCase:
    def __init__(
        self,
        *,
        registry: PoolRegistryPort,
        snapshot_port: RegistrySnapshotPort | None,
        clock: ClockPort,
    ):
        self._registry = registry
        self._snapshot_port = snapshot_port
        self._clock = clock

    def execute(self) -> SnapshotOutput:
        if self._snapshot_port is None:
            raise SnapshotUnavailableError("DATABASE_DSN is not configured.")
        created_at = self._clock.now_ms()
        snapshot_id = self._snapshot_port.save_snapshot(
            payload=self._registry.export_data(),
            created_at_ms=created_at,
        )
        return SnapshotOutput(
            snapshot_id=snapshot_id,
            created_at=created_at,
            pools=len(self._registry.get_all_pools()),
        )


def restore_latest_snapshot(*, registry: PoolRegistryPort, snapshot_port: RegistrySnapshotPort) -> bool:
    payload = snapshot_port.load_latest_snapshot()
    if payload is None:
        return False
    registry.import_data(payload)
    return True
