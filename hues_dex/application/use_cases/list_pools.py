from __future__ import annotations

from decimal import Decimal

from hues_dex.application.dto.pools import ListPoolsInput, ListPoolsOutput
from hues_dex.application.ports.pool_registry_port import PoolRegistryPort
from hues_dex.domain.exceptions import PoolInputError


SORT_FIELDS = {"tvl", "volume"}
DEFAULT_SORT_LIMIT = 10


class ListPoolsUseCase:
    def __init__(self, *, registry: PoolRegistryPort):
        self._registry = registry

    def execute(self, command: ListPoolsInput) -> ListPoolsOutput:
        if command.sort_by is not None and command.sort_by not in SORT_FIELDS:
            raise PoolInputError("sort_by must be tvl or volume.")
        if command.limit is not None and command.limit < 1:
            raise PoolInputError("limit must be >= 1.")

        filtered = bool(command.query) or command.imbalanced
        if command.sort_by and not filtered:
            limit = command.limit or DEFAULT_SORT_LIMIT
            if command.sort_by == "tvl":
                pools = self._registry.get_pools_by_tvl(limit)
            else:
                pools = self._registry.get_pools_by_volume(limit)
        else:
            if command.query:
                pools = self._registry.search_pools(command.query)
            else:
                pools = self._registry.get_all_pools()
            if command.imbalanced:
                pools = [pool for pool in pools if pool.needs_rebalancing]
            if command.sort_by == "tvl":
                pools = sorted(pools, key=lambda p: p.tvl, reverse=True)
            elif command.sort_by == "volume":
                pools = sorted(pools, key=lambda p: p.volume_24h or Decimal("0"), reverse=True)
            if command.limit is not None:
                pools = pools[: command.limit]

        return ListPoolsOutput(
            pools=pools,
            total=len(pools),
            dashboard_stats=self._registry.get_dashboard_stats(),
        )
