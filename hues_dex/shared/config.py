from __future__ import annotations

import json
import os
from dataclasses import dataclass
from decimal import Decimal

from dotenv import load_dotenv


load_dotenv()


ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

DEFAULT_RPC_ENDPOINTS = (
    "https://public-node.testnet.rsk.co",
    "https://rpc.testnet.rootstock.io/public",
    "https://mycrypto.testnet.rsk.co",
)


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _json(name: str) -> dict:
    value = _env(name)
    if not value:
        return {}
    return json.loads(value)


def _list(name: str, default: tuple[str, ...] = ()) -> tuple[str, ...]:
    value = _env(name)
    if not value:
        return default
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class ContractAddresses:
    factory: str
    router: str
    rebalancer_controller: str
    keeper_helper: str
    wtrbtc: str
    token_a: str
    token_b: str


@dataclass(frozen=True)
class Settings:
    chain_id: int
    network_name: str
    rpc_url: str
    rpc_fallback_urls: tuple[str, ...]
    rpc_timeout_seconds: float
    rpc_configured: bool
    contracts: ContractAddresses
    one_inch_api_key: str
    one_inch_api_base: str
    one_inch_dev_api_base: str
    one_inch_timeout_seconds: float
    one_inch_max_retries: int
    rebalance_threshold: Decimal
    default_target_ratio: Decimal
    max_price_impact_pct: Decimal
    default_gas_estimate: int
    history_max_points: int
    discovery_max_pairs: int
    discovery_interval_seconds: float
    init_cooldown_seconds: float
    database_dsn: str
    token_price_overrides: dict
    log_level: str


def get_settings() -> Settings:
    contracts = ContractAddresses(
        factory=_env("FACTORY_ADDRESS", ZERO_ADDRESS),
        router=_env("ROUTER_ADDRESS", ZERO_ADDRESS),
        rebalancer_controller=_env("REBALANCER_ADDRESS", ZERO_ADDRESS),
        keeper_helper=_env("KEEPER_HELPER_ADDRESS", ZERO_ADDRESS),
        wtrbtc=_env("WTRBTC_ADDRESS", ZERO_ADDRESS),
        token_a=_env("TOKEN_A_ADDRESS", ZERO_ADDRESS),
        token_b=_env("TOKEN_B_ADDRESS", ZERO_ADDRESS),
    )
    rpc_url = _env("RPC_URL", "")
    return Settings(
        chain_id=int(_env("CHAIN_ID", "31")),
        network_name=_env("NETWORK_NAME", "Rootstock Testnet"),
        rpc_url=rpc_url or DEFAULT_RPC_ENDPOINTS[0],
        rpc_fallback_urls=_list("RPC_FALLBACK_URLS", DEFAULT_RPC_ENDPOINTS[1:]),
        rpc_timeout_seconds=float(_env("RPC_TIMEOUT_SECONDS", "30")),
        rpc_configured=bool(rpc_url),
        contracts=contracts,
        one_inch_api_key=_env("ONE_INCH_API_KEY", ""),
        one_inch_api_base=_env("ONE_INCH_API_BASE", "https://api.1inch.io/v5.2"),
        one_inch_dev_api_base=_env("ONE_INCH_DEV_API_BASE", "https://api.1inch.dev"),
        one_inch_timeout_seconds=float(_env("ONE_INCH_TIMEOUT_SECONDS", "10")),
        one_inch_max_retries=int(_env("ONE_INCH_MAX_RETRIES", "2")),
        rebalance_threshold=Decimal(_env("REBALANCE_THRESHOLD", "0.1")),
        default_target_ratio=Decimal(_env("DEFAULT_TARGET_RATIO", "1.0")),
        max_price_impact_pct=Decimal(_env("MAX_PRICE_IMPACT_PCT", "5")),
        default_gas_estimate=int(_env("DEFAULT_GAS_ESTIMATE", "200000")),
        history_max_points=int(_env("HISTORY_MAX_POINTS", "0")),
        discovery_max_pairs=int(_env("DISCOVERY_MAX_PAIRS", "1000")),
        discovery_interval_seconds=float(_env("DISCOVERY_INTERVAL_SECONDS", "3600")),
        init_cooldown_seconds=float(_env("INIT_COOLDOWN_SECONDS", "600")),
        database_dsn=_env("DATABASE_DSN", ""),
        token_price_overrides=_json("TOKEN_PRICE_OVERRIDES"),
        log_level=_env("LOG_LEVEL", "INFO"),
    )
