from __future__ import annotations

from decimal import Decimal
import logging

from hues_dex.application.dto.pools import (
    DiscoverPoolsInput,
    DiscoverPoolsOutput,
    SetTargetRatiosInput,
    SetTargetRatiosOutput,
)
from hues_dex.application.ports.contract_gateway_port import ContractGatewayPort
from hues_dex.application.ports.pool_registry_port import PoolRegistryPort
from hues_dex.application.ports.system_state_port import ClockPort
from hues_dex.application.ports.token_price_port import TokenPricePort
from hues_dex.application.use_cases.pool_common import (
    evaluate_reserves,
    new_pool,
    parse_decimal,
    reserve_changes,
    status_point,
)
from hues_dex.domain.entities.pool import Pool, PoolMetrics
from hues_dex.domain.exceptions import ContractCallError, PoolInputError
from hues_dex.domain.services.pool_ratio import needs_rebalancing
from hues_dex.domain.services.rebalance_estimate import validate_target_ratio


logger = logging.getLogger(__name__)


class DiscoverPoolsUseCase:
    """Registers every pair the factory knows about.

    New pools start at the default target ratio with one historical point.
    Pools already in the registry keep their target ratio and metrics.
    """

    def __init__(
        self,
        *,
        registry: PoolRegistryPort,
        contract_gateway: ContractGatewayPort,
        clock: ClockPort,
        price_port: TokenPricePort | None,
        default_factory_address: str,
        default_target_ratio: Decimal,
        threshold: Decimal,
        max_pairs: int,
    ):
        self._registry = registry
        self._gateway = contract_gateway
        self._clock = clock
        self._price_port = price_port
        self._default_factory_address = default_factory_address
        self._default_target_ratio = default_target_ratio
        self._threshold = threshold
        self._max_pairs = max_pairs

    def execute(self, command: DiscoverPoolsInput) -> DiscoverPoolsOutput:
        factory_address = command.factory_address or self._default_factory_address
        pair_addresses = self._gateway.list_pair_addresses(
            factory_address=factory_address,
            max_pairs=self._max_pairs,
        )

        discovered: list[Pool] = []
        for index, pair_address in enumerate(pair_addresses):
            try:
                discovered.append(self._register(pair_address))
            except ContractCallError as exc:
                logger.warning(
                    "discover_pools: pair_skipped index=%s pair=%s error=%s",
                    index,
                    pair_address,
                    exc,
                )

        imbalanced = sum(1 for pool in discovered if pool.needs_rebalancing)
        logger.info(
            "discover_pools: completed factory=%s listed=%s registered=%s imbalanced=%s",
            factory_address,
            len(pair_addresses),
            len(discovered),
            imbalanced,
        )
        return DiscoverPoolsOutput(
            pools=discovered,
            total_discovered=len(discovered),
            imbalanced_count=imbalanced,
        )

    def _register(self, pair_address: str) -> Pool:
        reserves = self._gateway.read_pair_reserves(pair_address)
        now_ms = self._clock.now_ms()
        existing = self._registry.get_pool(pair_address)
        target_ratio = existing.target_ratio if existing else self._default_target_ratio
        evaluation = evaluate_reserves(
            reserves,
            target_ratio=target_ratio,
            threshold=self._threshold,
            price_port=self._price_port,
        )

        if existing is not None:
            return self._registry.update_pool(
                pair_address,
                token_a=reserves.token_a,
                token_b=reserves.token_b,
                **reserve_changes(reserves, evaluation),
            )

        pool = new_pool(
            pair_address,
            reserves,
            evaluation,
            target_ratio=target_ratio,
            now_ms=now_ms,
        )
        self._registry.add_pool(pool)
        if self._registry.get_pool_metrics(pair_address) is None:
            self._registry.add_pool_metrics(
                PoolMetrics(
                    address=pair_address,
                    historical_data=(status_point(pool, now_ms=now_ms),),
                )
            )
        return pool


class SetTargetRatiosUseCase:
    def __init__(
        self,
        *,
        registry: PoolRegistryPort,
        default_target_ratio: Decimal,
        threshold: Decimal,
    ):
        self._registry = registry
        self._default_target_ratio = default_target_ratio
        self._threshold = threshold

    def execute(self, command: SetTargetRatiosInput) -> SetTargetRatiosOutput:
        ratios: dict[str, Decimal] = {}
        for address, value in (command.target_ratios or {}).items():
            ratio = parse_decimal(value, field=f"target_ratios[{address}]", error_cls=PoolInputError)
            validate_target_ratio(ratio)
            ratios[address] = ratio

        if command.pools is not None:
            addresses = list(command.pools)
        else:
            addresses = [pool.address for pool in self._registry.get_all_pools()]

        updated = 0
        for address in addresses:
            pool = self._registry.get_pool(address)
            if pool is None:
                continue
            target = ratios.get(address, self._default_target_ratio)
            self._registry.update_pool(
                address,
                target_ratio=target,
                needs_rebalancing=needs_rebalancing(pool.current_ratio, target, self._threshold),
            )
            updated += 1

        logger.info("set_target_ratios: updated=%s", updated)
        return SetTargetRatiosOutput(updated=updated)
