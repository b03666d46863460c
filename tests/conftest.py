from __future__ import annotations

from decimal import Decimal

import pytest

from hues_dex.domain.entities.pool import TokenRef
from hues_dex.domain.entities.rebalance import PoolReserves
from hues_dex.domain.exceptions import AggregatorError, ContractCallError, TokenNotFoundError
from hues_dex.infrastructure.clock import InMemoryStateStore
from hues_dex.infrastructure.registry.in_memory_registry import InMemoryPoolRegistry
from hues_dex.shared.config import ZERO_ADDRESS


TOKEN_A = TokenRef(address="0x" + "aa" * 20, symbol="RIF", decimals=18)
TOKEN_B = TokenRef(address="0x" + "bb" * 20, symbol="USDRIF", decimals=18)
SENT_TX_HASH = "0x" + "ab" * 32


def units(amount, decimals: int = 18) -> str:
    return str(int(Decimal(str(amount)) * (Decimal(10) ** decimals)))


def make_reserves(amount_a, amount_b, *, token_a: TokenRef = TOKEN_A, token_b: TokenRef = TOKEN_B) -> PoolReserves:
    return PoolReserves(
        token_a=token_a,
        token_b=token_b,
        reserve_a=units(amount_a, token_a.decimals),
        reserve_b=units(amount_b, token_b.decimals),
        total_supply=units(100),
    )


class FakeClock:
    def __init__(self, now_ms: int = 1_700_000_000_000):
        self.now = now_ms

    def now_ms(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeContractGateway:
    def __init__(self):
        self.pairs: dict[str, PoolReserves] = {}
        self.failing_pairs: set[str] = set()
        self.codes: dict[str, str] = {}
        self.tokens: dict = {}
        self.pair_lookup: dict[tuple[str, str], str] = {}
        self.router_wiring = (ZERO_ADDRESS, ZERO_ADDRESS)
        self.block_number = 123
        self.gas_price = 60_000_000
        self.gas_estimate = 150_000
        self.gas_estimate_fails = False
        self.rebalancer_state = (0, 0)
        self.sent: list[dict] = []
        self.transactions: dict[str, dict] = {}
        self.receipts: dict = {}

    def get_code(self, address: str) -> str:
        return self.codes.get(address, "0x")

    def get_block_number(self) -> int:
        return self.block_number

    def get_gas_price(self) -> int:
        return self.gas_price

    def list_pair_addresses(self, *, factory_address: str, max_pairs: int) -> list[str]:
        return list(self.pairs)[:max_pairs]

    def get_pair(self, *, factory_address: str, token_a: str, token_b: str) -> str:
        return self.pair_lookup.get((token_a, token_b), ZERO_ADDRESS)

    def read_pair_reserves(self, pair_address: str) -> PoolReserves:
        if pair_address in self.failing_pairs:
            raise ContractCallError(f"reserves failed for {pair_address}")
        return self.pairs[pair_address]

    def get_token_info(self, address: str):
        if address not in self.tokens:
            raise TokenNotFoundError("Token not found at provided address")
        return self.tokens[address]

    def get_router_wiring(self, router_address: str) -> tuple[str, str]:
        return self.router_wiring

    def get_rebalancer_state(self, *, rebalancer_address: str, pair_address: str) -> tuple[int, int]:
        return self.rebalancer_state

    def estimate_rebalance_gas(self, *, rebalancer_address: str, pair_address: str, target_ratio_bps: int) -> int:
        if self.gas_estimate_fails:
            raise ContractCallError("execution reverted")
        return self.gas_estimate

    def send_rebalance(self, **kwargs) -> str:
        self.sent.append(kwargs)
        return SENT_TX_HASH

    def get_transaction(self, tx_hash: str):
        return self.transactions.get(tx_hash)

    def get_transaction_receipt(self, tx_hash: str):
        return self.receipts.get(tx_hash)

    def address_for_key(self, private_key: str) -> str:
        return "0x" + "11" * 20


class FakeAggregator:
    def __init__(self):
        self.fail = False
        self.quote = None
        self.tokens: list = []
        self.swap_calls: list[dict] = []

    def get_quote(self, **kwargs):
        if self.fail:
            raise AggregatorError("aggregator down")
        return self.quote

    def get_swap(self, **kwargs):
        if self.fail:
            raise AggregatorError("aggregator down")
        self.swap_calls.append(kwargs)
        return {"tx": {"to": kwargs["to_token_address"]}}

    def search_tokens(self, **kwargs):
        if self.fail:
            raise AggregatorError("aggregator down")
        return self.tokens


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def gateway() -> FakeContractGateway:
    return FakeContractGateway()


@pytest.fixture
def aggregator() -> FakeAggregator:
    return FakeAggregator()


@pytest.fixture
def registry(clock) -> InMemoryPoolRegistry:
    return InMemoryPoolRegistry(clock=clock)


@pytest.fixture
def state_store() -> InMemoryStateStore:
    return InMemoryStateStore()


@pytest.fixture
def reserves():
    return make_reserves
