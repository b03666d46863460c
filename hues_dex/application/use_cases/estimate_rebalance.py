from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal
import logging

from hues_dex.application.dto.rebalance import LiveEstimateInput, QuickEstimateInput
from hues_dex.application.ports.contract_gateway_port import ContractGatewayPort
from hues_dex.application.ports.pool_registry_port import PoolRegistryPort
from hues_dex.domain.entities.rebalance import (
    PoolReserves,
    QuickRebalanceEstimate,
    RebalanceEstimate,
)
from hues_dex.domain.exceptions import ContractCallError, PoolNotFoundError
from hues_dex.domain.services.rebalance_estimate import (
    DEFAULT_MAX_PRICE_IMPACT_PCT,
    estimate_rebalance,
    quick_estimate,
    validate_slippage,
    validate_target_ratio,
)


logger = logging.getLogger(__name__)


def target_ratio_bps(target_ratio: Decimal) -> int:
    return int((target_ratio * 10000).to_integral_value(rounding=ROUND_FLOOR))


class QuickEstimateUseCase:
    """Estimate from registry data only; no RPC calls."""

    def __init__(
        self,
        *,
        registry: PoolRegistryPort,
        threshold: Decimal,
        max_price_impact_pct: Decimal = DEFAULT_MAX_PRICE_IMPACT_PCT,
    ):
        self._registry = registry
        self._threshold = threshold
        self._max_price_impact_pct = max_price_impact_pct

    def execute(self, command: QuickEstimateInput) -> QuickRebalanceEstimate:
        pool = self._registry.get_pool(command.pool_address)
        if pool is None:
            raise PoolNotFoundError("Pool not found.")
        target = command.target_ratio if command.target_ratio is not None else pool.target_ratio
        return quick_estimate(
            pool_address=pool.address,
            current_ratio=pool.current_ratio,
            target_ratio=target,
            threshold=self._threshold,
            max_price_impact_pct=self._max_price_impact_pct,
        )


class LiveEstimator:
    """Reads reserves, gas estimate and gas price, then runs the estimator."""

    def __init__(
        self,
        *,
        contract_gateway: ContractGatewayPort,
        rebalancer_address: str,
        threshold: Decimal,
        max_price_impact_pct: Decimal,
        default_gas_estimate: int,
    ):
        self._gateway = contract_gateway
        self._rebalancer_address = rebalancer_address
        self._threshold = threshold
        self._max_price_impact_pct = max_price_impact_pct
        self._default_gas_estimate = default_gas_estimate

    def estimate(
        self,
        *,
        pool_address: str,
        target_ratio: Decimal,
        slippage_tolerance: Decimal,
        reserves: PoolReserves | None = None,
    ) -> RebalanceEstimate:
        validate_target_ratio(target_ratio)
        validate_slippage(slippage_tolerance)
        if reserves is None:
            reserves = self._gateway.read_pair_reserves(pool_address)

        draft = estimate_rebalance(
            pool_address=pool_address,
            reserves=reserves,
            target_ratio=target_ratio,
            threshold=self._threshold,
            slippage_tolerance=slippage_tolerance,
            max_price_impact_pct=self._max_price_impact_pct,
            gas_estimate=self._default_gas_estimate,
        )
        gas = self._default_gas_estimate
        if draft.swap_amount > 0:
            try:
                gas = self._gateway.estimate_rebalance_gas(
                    rebalancer_address=self._rebalancer_address,
                    pair_address=pool_address,
                    target_ratio_bps=target_ratio_bps(target_ratio),
                )
            except ContractCallError as exc:
                logger.warning(
                    "estimate_rebalance: gas_estimate_failed pool=%s error=%s",
                    pool_address,
                    exc,
                )
        gas_price = self._gateway.get_gas_price()

        return estimate_rebalance(
            pool_address=pool_address,
            reserves=reserves,
            target_ratio=target_ratio,
            threshold=self._threshold,
            slippage_tolerance=slippage_tolerance,
            max_price_impact_pct=self._max_price_impact_pct,
            gas_estimate=gas,
            gas_price=gas_price,
        )


class LiveEstimateUseCase:
    def __init__(self, *, registry: PoolRegistryPort, estimator: LiveEstimator):
        self._registry = registry
        self._estimator = estimator

    def execute(self, command: LiveEstimateInput) -> RebalanceEstimate:
        pool = self._registry.get_pool(command.pool_address)
        if pool is None:
            raise PoolNotFoundError("Pool not found.")
        target = command.target_ratio if command.target_ratio is not None else pool.target_ratio
        return self._estimator.estimate(
            pool_address=pool.address,
            target_ratio=target,
            slippage_tolerance=command.slippage_tolerance,
        )


class BlockchainEstimateUseCase:
    """Same estimate for any pair address, registered or not."""

    def __init__(self, *, estimator: LiveEstimator, default_target_ratio: Decimal):
        self._estimator = estimator
        self._default_target_ratio = default_target_ratio

    def execute(self, command: LiveEstimateInput) -> RebalanceEstimate:
        target = command.target_ratio if command.target_ratio is not None else self._default_target_ratio
        return self._estimator.estimate(
            pool_address=command.pool_address,
            target_ratio=target,
            slippage_tolerance=command.slippage_tolerance,
        )
