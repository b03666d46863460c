from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from threading import Lock

from eth_account import Account
from web3 import HTTPProvider, Web3
from web3.exceptions import (
    BadFunctionCallOutput,
    ContractLogicError,
    TransactionNotFound,
)

from hues_dex.domain.entities.pool import TokenRef
from hues_dex.domain.entities.rebalance import PoolReserves, TransactionReceipt
from hues_dex.domain.entities.token import TokenInfo
from hues_dex.domain.exceptions import (
    ContractCallError,
    InvalidAddressError,
    RebalanceExecutionError,
    TokenNotFoundError,
)
from hues_dex.shared.config import ZERO_ADDRESS


logger = logging.getLogger(__name__)


FACTORY_ABI = [
    {
        "inputs": [{"name": "", "type": "uint256"}],
        "name": "allPairs",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "tokenA", "type": "address"},
            {"name": "tokenB", "type": "address"},
        ],
        "name": "getPair",
        "outputs": [{"name": "pair", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
]

PAIR_ABI = [
    {
        "inputs": [],
        "name": "token0",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "token1",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "reserve0",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "reserve1",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "totalSupply",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

ERC20_ABI = [
    {
        "inputs": [],
        "name": "name",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "totalSupply",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

ROUTER_ABI = [
    {
        "inputs": [],
        "name": "factory",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "wtrbtc",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
]

REBALANCER_ABI = [
    {
        "inputs": [
            {"name": "pair", "type": "address"},
            {"name": "targetRatio", "type": "uint256"},
        ],
        "name": "rebalance",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [{"name": "", "type": "address"}],
        "name": "lastRebalance",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "cooldown",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

UNKNOWN_TOKEN_NAME = "Unknown Token"
UNKNOWN_TOKEN_SYMBOL = "UNKNOWN"


def _checksum(address: str) -> str:
    try:
        return Web3.to_checksum_address(address)
    except (TypeError, ValueError) as exc:
        raise InvalidAddressError(f"Invalid address: {address!r}") from exc


@dataclass(frozen=True)
class ContractGatewaySettings:
    rpc_urls: tuple[str, ...]
    timeout_seconds: float
    chain_id: int
    rebalance_gas_limit: int = 500_000


class Web3ContractGateway:
    """JSON-RPC access to the factory, pairs, tokens, router and rebalancer.

    The provider is created lazily on first use. Each configured endpoint is
    tried in order until one answers ``is_connected``.
    """

    def __init__(self, settings: ContractGatewaySettings):
        self._settings = settings
        self._lock = Lock()
        self._w3: Web3 | None = None
        self._rpc_url: str | None = None
        self._token_cache: dict[str, TokenRef] = {}

    @property
    def rpc_url(self) -> str | None:
        return self._rpc_url

    def _client(self) -> Web3:
        with self._lock:
            if self._w3 is not None:
                return self._w3
            for url in self._settings.rpc_urls:
                w3 = Web3(HTTPProvider(url, request_kwargs={"timeout": self._settings.timeout_seconds}))
                try:
                    connected = w3.is_connected()
                except Exception as exc:
                    logger.warning("contract_gateway: connect_failed url=%s error=%s", url, exc)
                    continue
                if not connected:
                    logger.warning("contract_gateway: connect_failed url=%s", url)
                    continue
                logger.info("contract_gateway: connected url=%s", url)
                self._w3 = w3
                self._rpc_url = url
                return w3
        raise ContractCallError("Unable to connect to any configured RPC endpoint.")

    def _contract(self, address: str, abi: list[dict]):
        checksum = _checksum(address)
        return self._client().eth.contract(address=checksum, abi=abi)

    def _call(self, label: str, fn, *args):
        try:
            return fn(*args).call()
        except (ContractLogicError, BadFunctionCallOutput) as exc:
            raise ContractCallError(f"{label} reverted: {exc}") from exc
        except Exception as exc:
            raise ContractCallError(f"{label} failed: {exc}") from exc

    def get_code(self, address: str) -> str:
        checksum = _checksum(address)
        w3 = self._client()
        try:
            code = w3.eth.get_code(checksum)
        except Exception as exc:
            raise ContractCallError(f"getCode failed for {address}: {exc}") from exc
        return "0x" + bytes(code).hex()

    def get_block_number(self) -> int:
        try:
            return int(self._client().eth.block_number)
        except ContractCallError:
            raise
        except Exception as exc:
            raise ContractCallError(f"blockNumber failed: {exc}") from exc

    def get_gas_price(self) -> int:
        try:
            return int(self._client().eth.gas_price)
        except ContractCallError:
            raise
        except Exception as exc:
            raise ContractCallError(f"gasPrice failed: {exc}") from exc

    def list_pair_addresses(self, *, factory_address: str, max_pairs: int) -> list[str]:
        factory = self._contract(factory_address, FACTORY_ABI)
        pairs: list[str] = []
        # The factory exposes no length getter; walk until the index reverts.
        for idx in range(max_pairs):
            try:
                pair = factory.functions.allPairs(idx).call()
            except (ContractLogicError, BadFunctionCallOutput):
                break
            except Exception as exc:
                if pairs:
                    logger.warning(
                        "contract_gateway: all_pairs_stopped index=%s error=%s", idx, exc
                    )
                    break
                raise ContractCallError(f"allPairs({idx}) failed: {exc}") from exc
            if not pair or pair.lower() == ZERO_ADDRESS:
                break
            pairs.append(pair)
        logger.info(
            "contract_gateway: listed_pairs factory=%s count=%s", factory_address, len(pairs)
        )
        return pairs

    def get_pair(self, *, factory_address: str, token_a: str, token_b: str) -> str:
        factory = self._contract(factory_address, FACTORY_ABI)
        return self._call(
            "getPair",
            factory.functions.getPair,
            _checksum(token_a),
            _checksum(token_b),
        )

    def _token_ref(self, address: str) -> TokenRef:
        key = address.lower()
        with self._lock:
            cached = self._token_cache.get(key)
        if cached is not None:
            return cached
        token = self._contract(address, ERC20_ABI)
        try:
            symbol = token.functions.symbol().call()
        except Exception as exc:
            logger.warning("contract_gateway: symbol_failed token=%s error=%s", address, exc)
            symbol = UNKNOWN_TOKEN_SYMBOL
        try:
            decimals = int(token.functions.decimals().call())
        except Exception as exc:
            logger.warning("contract_gateway: decimals_failed token=%s error=%s", address, exc)
            decimals = 18
        ref = TokenRef(address=address, symbol=symbol, decimals=decimals)
        with self._lock:
            self._token_cache[key] = ref
        return ref

    def read_pair_reserves(self, pair_address: str) -> PoolReserves:
        pair = self._contract(pair_address, PAIR_ABI)
        token0 = self._call("token0", pair.functions.token0)
        token1 = self._call("token1", pair.functions.token1)
        reserve0 = self._call("reserve0", pair.functions.reserve0)
        reserve1 = self._call("reserve1", pair.functions.reserve1)
        total_supply = self._call("totalSupply", pair.functions.totalSupply)
        return PoolReserves(
            token_a=self._token_ref(token0),
            token_b=self._token_ref(token1),
            reserve_a=str(reserve0),
            reserve_b=str(reserve1),
            total_supply=str(total_supply),
        )

    def get_token_info(self, address: str) -> TokenInfo:
        code = self.get_code(address)
        if code in ("0x", ""):
            raise TokenNotFoundError(f"No contract found at address {address}.")
        token = self._contract(address, ERC20_ABI)
        fields = (
            ("name", UNKNOWN_TOKEN_NAME),
            ("symbol", UNKNOWN_TOKEN_SYMBOL),
            ("decimals", 18),
            ("totalSupply", 0),
        )
        values = {}
        for name, default in fields:
            try:
                values[name] = getattr(token.functions, name)().call()
            except Exception as exc:
                logger.warning(
                    "contract_gateway: erc20_field_failed token=%s field=%s error=%s",
                    address,
                    name,
                    exc,
                )
                values[name] = default
        return TokenInfo(
            address=address,
            name=values["name"],
            symbol=values["symbol"],
            decimals=int(values["decimals"]),
            total_supply=str(values["totalSupply"]),
            is_valid=True,
        )

    def get_router_wiring(self, router_address: str) -> tuple[str, str]:
        router = self._contract(router_address, ROUTER_ABI)
        return (
            self._call("factory", router.functions.factory),
            self._call("wtrbtc", router.functions.wtrbtc),
        )

    def get_rebalancer_state(self, *, rebalancer_address: str, pair_address: str) -> tuple[int, int]:
        rebalancer = self._contract(rebalancer_address, REBALANCER_ABI)
        last = self._call(
            "lastRebalance",
            rebalancer.functions.lastRebalance,
            _checksum(pair_address),
        )
        cooldown = self._call("cooldown", rebalancer.functions.cooldown)
        return int(last), int(cooldown)

    def estimate_rebalance_gas(
        self,
        *,
        rebalancer_address: str,
        pair_address: str,
        target_ratio_bps: int,
    ) -> int:
        rebalancer = self._contract(rebalancer_address, REBALANCER_ABI)
        fn = rebalancer.functions.rebalance(_checksum(pair_address), target_ratio_bps)
        try:
            return int(fn.estimate_gas())
        except Exception as exc:
            raise ContractCallError(f"rebalance gas estimation failed: {exc}") from exc

    def send_rebalance(
        self,
        *,
        rebalancer_address: str,
        pair_address: str,
        target_ratio_bps: int,
        private_key: str,
    ) -> str:
        w3 = self._client()
        rebalancer = self._contract(rebalancer_address, REBALANCER_ABI)
        try:
            account = w3.eth.account.from_key(private_key)
        except Exception as exc:
            raise RebalanceExecutionError(f"Invalid private key: {exc}") from exc

        try:
            tx = rebalancer.functions.rebalance(
                _checksum(pair_address),
                target_ratio_bps,
            ).build_transaction(
                {
                    "chainId": self._settings.chain_id,
                    "from": account.address,
                    "gas": self._settings.rebalance_gas_limit,
                    "gasPrice": w3.eth.gas_price,
                    "nonce": w3.eth.get_transaction_count(account.address),
                }
            )
            signed = w3.eth.account.sign_transaction(tx, private_key)
            tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
        except ContractLogicError as exc:
            reason = getattr(exc, "message", None) or str(exc)
            raise RebalanceExecutionError(reason) from exc
        except Exception as exc:
            raise RebalanceExecutionError(f"Transaction execution failed: {exc}") from exc

        tx_hex = Web3.to_hex(tx_hash)
        logger.info(
            "contract_gateway: rebalance_sent pair=%s target_bps=%s tx=%s",
            pair_address,
            target_ratio_bps,
            tx_hex,
        )
        return tx_hex

    def get_transaction(self, tx_hash: str) -> dict | None:
        w3 = self._client()
        try:
            tx = w3.eth.get_transaction(tx_hash)
        except TransactionNotFound:
            return None
        except Exception as exc:
            raise ContractCallError(f"getTransaction failed: {exc}") from exc
        return dict(tx) if tx is not None else None

    def get_transaction_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        w3 = self._client()
        try:
            receipt = w3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            return None
        except Exception as exc:
            raise ContractCallError(f"getTransactionReceipt failed: {exc}") from exc
        if receipt is None:
            return None
        return TransactionReceipt(
            tx_hash=tx_hash,
            status=int(receipt["status"]),
            block_number=int(receipt["blockNumber"]),
            gas_used=int(receipt["gasUsed"]),
            logs=tuple(json.loads(Web3.to_json(log)) for log in receipt.get("logs", [])),
        )

    def address_for_key(self, private_key: str) -> str:
        try:
            return Account.from_key(private_key).address
        except Exception as exc:
            raise InvalidAddressError(f"Invalid private key: {exc}") from exc
