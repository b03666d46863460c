from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SystemStatus:
    is_initialized: bool
    contracts_deployed: bool
    event_listeners_active: bool
    total_pools: int
    active_rebalances: int
    last_update: int
    network_id: int
    block_number: int


@dataclass(frozen=True)
class ContractPresence:
    name: str
    address: str
    exists: bool
    code_length: int


@dataclass(frozen=True)
class RouterWiring:
    factory: str
    wtrbtc: str
    factory_matches: bool
    wtrbtc_matches: bool
