from __future__ import annotations

from typing import Protocol

from hues_dex.domain.entities.rebalance import PoolReserves, TransactionReceipt
from hues_dex.domain.entities.token import TokenInfo


class ContractGatewayPort(Protocol):
    def get_code(self, address: str) -> str:
        ...

    def get_block_number(self) -> int:
        ...

    def get_gas_price(self) -> int:
        ...

    def list_pair_addresses(self, *, factory_address: str, max_pairs: int) -> list[str]:
        ...

    def get_pair(self, *, factory_address: str, token_a: str, token_b: str) -> str:
        ...

    def read_pair_reserves(self, pair_address: str) -> PoolReserves:
        ...

    def get_token_info(self, address: str) -> TokenInfo:
        ...

    def get_router_wiring(self, router_address: str) -> tuple[str, str]:
        ...

    def get_rebalancer_state(self, *, rebalancer_address: str, pair_address: str) -> tuple[int, int]:
        ...

    def estimate_rebalance_gas(
        self,
        *,
        rebalancer_address: str,
        pair_address: str,
        target_ratio_bps: int,
    ) -> int:
        ...

    def send_rebalance(
        self,
        *,
        rebalancer_address: str,
        pair_address: str,
        target_ratio_bps: int,
        private_key: str,
    ) -> str:
        ...

    def get_transaction(self, tx_hash: str) -> dict | None:
        ...

    def get_transaction_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        ...

    def address_for_key(self, private_key: str) -> str:
        ...
