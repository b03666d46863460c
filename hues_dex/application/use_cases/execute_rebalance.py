from __future__ import annotations

from decimal import Decimal
import logging

from hues_dex.application.dto.rebalance import ExecuteRebalanceInput, ExecuteRebalanceOutput
from hues_dex.application.ports.contract_gateway_port import ContractGatewayPort
from hues_dex.application.ports.pool_registry_port import PoolRegistryPort
from hues_dex.application.ports.system_state_port import ClockPort
from hues_dex.application.use_cases.estimate_rebalance import target_ratio_bps
from hues_dex.domain.entities.pool import RebalanceEvent
from hues_dex.domain.exceptions import (
    PoolNotFoundError,
    RebalanceInputError,
    RebalancePreconditionError,
)
from hues_dex.domain.services.rebalance_estimate import (
    estimate_rebalance,
    validate_slippage,
    validate_target_ratio,
)


logger = logging.getLogger(__name__)


CONFIRMATION_ESTIMATE_MS = 30_000
GWEI_DECIMALS = 9


def _gwei(wei: int) -> str:
    return format(Decimal(wei).scaleb(-GWEI_DECIMALS).normalize(), "f")


class ExecuteRebalanceUseCase:
    """Checks pre-conditions, then sends ``rebalance(pair, floor(target * 10000))``.

    The event is recorded as pending; status polling settles it later.
    """

    def __init__(
        self,
        *,
        registry: PoolRegistryPort,
        contract_gateway: ContractGatewayPort,
        clock: ClockPort,
        rebalancer_address: str,
        threshold: Decimal,
    ):
        self._registry = registry
        self._gateway = contract_gateway
        self._clock = clock
        self._rebalancer_address = rebalancer_address
        self._threshold = threshold

    def execute(self, command: ExecuteRebalanceInput) -> ExecuteRebalanceOutput:
        if not command.private_key:
            raise RebalanceInputError("Private key required for rebalance execution.")
        validate_slippage(command.slippage_tolerance)

        pool = self._registry.get_pool(command.pool_address)
        if pool is None:
            raise PoolNotFoundError("Pool not found.")
        target = command.target_ratio if command.target_ratio is not None else pool.target_ratio
        validate_target_ratio(target)

        gas_price = self._gateway.get_gas_price()
        last_rebalance, cooldown = self._gateway.get_rebalancer_state(
            rebalancer_address=self._rebalancer_address,
            pair_address=pool.address,
        )

        if command.max_gas_price is not None and gas_price > command.max_gas_price:
            raise RebalancePreconditionError(
                f"Gas price {_gwei(gas_price)} Gwei exceeds limit {_gwei(command.max_gas_price)} Gwei"
            )

        now_s = self._clock.now_ms() // 1000
        ready_at = last_rebalance + cooldown
        if now_s <= ready_at and not command.force_execute:
            raise RebalancePreconditionError(
                f"Cooldown period active. {ready_at - now_s} seconds remaining"
            )

        reserves = self._gateway.read_pair_reserves(pool.address)
        estimate = estimate_rebalance(
            pool_address=pool.address,
            reserves=reserves,
            target_ratio=target,
            threshold=self._threshold,
            slippage_tolerance=command.slippage_tolerance,
        )
        if not estimate.is_rebalance_needed and not command.force_execute:
            raise RebalancePreconditionError("Pool is already balanced within tolerance")

        tx_hash = self._gateway.send_rebalance(
            rebalancer_address=self._rebalancer_address,
            pair_address=pool.address,
            target_ratio_bps=target_ratio_bps(target),
            private_key=command.private_key,
        )

        now_ms = self._clock.now_ms()
        self._registry.add_rebalance_event(
            RebalanceEvent(
                tx_hash=tx_hash,
                timestamp=now_ms,
                pool_address=pool.address,
                from_ratio=estimate.current_ratio,
                to_ratio=target,
                target_ratio=target,
                gas_used="0",
                gas_price=str(gas_price),
                status="pending",
                swap_amount0=estimate.swap_amount0,
                swap_amount1=estimate.swap_amount1,
                slippage=command.slippage_tolerance,
            )
        )
        self._registry.update_pool(
            pool.address,
            last_rebalance=now_ms,
            rebalance_count=pool.rebalance_count + 1,
        )
        logger.info(
            "execute_rebalance: submitted pool=%s tx=%s from_ratio=%s target=%s forced=%s",
            pool.address,
            tx_hash,
            estimate.current_ratio,
            target,
            command.force_execute,
        )
        return ExecuteRebalanceOutput(
            tx_hash=tx_hash,
            status="pending",
            estimated_confirmation=now_ms + CONFIRMATION_ESTIMATE_MS,
        )
