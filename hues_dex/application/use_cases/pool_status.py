from __future__ import annotations

from decimal import Decimal
import logging

from hues_dex.application.dto.pools import (
    PoolStatusActionInput,
    PoolStatusActionOutput,
    PoolStatusInput,
    PoolStatusOutput,
)
from hues_dex.application.ports.contract_gateway_port import ContractGatewayPort
from hues_dex.application.ports.pool_registry_port import PoolRegistryPort
from hues_dex.application.ports.system_state_port import ClockPort
from hues_dex.application.ports.token_price_port import TokenPricePort
from hues_dex.application.use_cases.pool_common import (
    evaluate_reserves,
    reserve_changes,
    status_point,
)
from hues_dex.domain.entities.pool import Pool
from hues_dex.domain.exceptions import ContractCallError, PoolInputError, PoolNotFoundError
from hues_dex.domain.services.pool_ratio import needs_rebalancing


logger = logging.getLogger(__name__)


STATUS_ACTIONS = {"refresh", "reset_target_ratios"}


class PoolStatusRefresher:
    """Re-reads reserves for registered pools and records a history point."""

    def __init__(
        self,
        *,
        registry: PoolRegistryPort,
        contract_gateway: ContractGatewayPort,
        clock: ClockPort,
        price_port: TokenPricePort | None,
        threshold: Decimal,
    ):
        self._registry = registry
        self._gateway = contract_gateway
        self._clock = clock
        self._price_port = price_port
        self._threshold = threshold

    def refresh_pool(self, pool: Pool) -> Pool:
        reserves = self._gateway.read_pair_reserves(pool.address)
        evaluation = evaluate_reserves(
            reserves,
            target_ratio=pool.target_ratio,
            threshold=self._threshold,
            price_port=self._price_port,
        )
        updated = self._registry.update_pool(pool.address, **reserve_changes(reserves, evaluation))
        if updated is None:
            return pool
        self._registry.add_historical_data(
            pool.address,
            status_point(updated, now_ms=self._clock.now_ms()),
        )
        return updated

    def refresh_all(self) -> list[Pool]:
        refreshed: list[Pool] = []
        for pool in self._registry.get_all_pools():
            try:
                refreshed.append(self.refresh_pool(pool))
            except ContractCallError as exc:
                logger.warning(
                    "pool_status: refresh_failed pool=%s error=%s",
                    pool.address,
                    exc,
                )
                refreshed.append(pool)
        return refreshed


class GetPoolStatusUseCase:
    def __init__(self, *, registry: PoolRegistryPort, refresher: PoolStatusRefresher, clock: ClockPort):
        self._registry = registry
        self._refresher = refresher
        self._clock = clock

    def execute(self, command: PoolStatusInput) -> PoolStatusOutput:
        pools = self._refresher.refresh_all()
        imbalanced = [pool.address for pool in pools if pool.needs_rebalancing]
        logger.info(
            "pool_status: refreshed pools=%s imbalanced=%s",
            len(pools),
            len(imbalanced),
        )
        return PoolStatusOutput(
            pools=pools if command.detailed else None,
            total_pools=len(pools),
            imbalanced_pools=len(imbalanced),
            imbalanced_addresses=imbalanced,
            dashboard_stats=self._registry.get_dashboard_stats(),
            last_update=self._clock.now_ms(),
        )


class PoolStatusActionUseCase:
    def __init__(
        self,
        *,
        registry: PoolRegistryPort,
        refresher: PoolStatusRefresher,
        default_target_ratio: Decimal,
        threshold: Decimal,
    ):
        self._registry = registry
        self._refresher = refresher
        self._default_target_ratio = default_target_ratio
        self._threshold = threshold

    def execute(self, command: PoolStatusActionInput) -> PoolStatusActionOutput:
        if command.action not in STATUS_ACTIONS:
            raise PoolInputError(f"Invalid action: {command.action!r}.")

        if command.action == "refresh":
            if command.pool_address:
                pool = self._registry.get_pool(command.pool_address)
                if pool is None:
                    raise PoolNotFoundError("Pool not found.")
                self._refresher.refresh_pool(pool)
                return PoolStatusActionOutput(action=command.action, refreshed=[pool.address])
            pools = self._refresher.refresh_all()
            return PoolStatusActionOutput(
                action=command.action,
                refreshed=[pool.address for pool in pools],
            )

        pools = self._registry.get_all_pools()
        for pool in pools:
            self._registry.update_pool(
                pool.address,
                target_ratio=self._default_target_ratio,
                needs_rebalancing=needs_rebalancing(
                    pool.current_ratio,
                    self._default_target_ratio,
                    self._threshold,
                ),
            )
        logger.info("pool_status: target_ratios_reset pools=%s", len(pools))
        return PoolStatusActionOutput(action=command.action, reset=len(pools))
