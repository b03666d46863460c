from __future__ import annotations

from functools import lru_cache

from hues_dex.application.dto.pools import DiscoverPoolsInput
from hues_dex.application.use_cases.diagnostics import (
    CheckPairUseCase,
    ContractStatusUseCase,
    SaveSnapshotUseCase,
)
from hues_dex.application.use_cases.discover_pools import DiscoverPoolsUseCase, SetTargetRatiosUseCase
from hues_dex.application.use_cases.estimate_rebalance import (
    BlockchainEstimateUseCase,
    LiveEstimateUseCase,
    LiveEstimator,
    QuickEstimateUseCase,
)
from hues_dex.application.use_cases.execute_rebalance import ExecuteRebalanceUseCase
from hues_dex.application.use_cases.initialize_system import (
    GetSystemStatusUseCase,
    InitializationService,
    InitializeSystemUseCase,
)
from hues_dex.application.use_cases.list_pools import ListPoolsUseCase
from hues_dex.application.use_cases.pool_metrics import GetPoolMetricsUseCase, UpdatePoolMetricsUseCase
from hues_dex.application.use_cases.pool_status import (
    GetPoolStatusUseCase,
    PoolStatusActionUseCase,
    PoolStatusRefresher,
)
from hues_dex.application.use_cases.rebalance_status import (
    GetRebalanceActivityUseCase,
    GetRebalanceStatusUseCase,
)
from hues_dex.application.use_cases.swap import ExecuteSwapUseCase, GetSwapQuoteUseCase
from hues_dex.application.use_cases.tokens import GetTokenInfoUseCase, SearchTokensUseCase
from hues_dex.infrastructure.clients.aggregator_client import (
    OneInchAggregatorClient,
    OneInchClientSettings,
)
from hues_dex.infrastructure.clients.contract_gateway import (
    ContractGatewaySettings,
    Web3ContractGateway,
)
from hues_dex.infrastructure.clients.pricing import PriceOverrides
from hues_dex.infrastructure.clock import InMemoryStateStore, SystemClock
from hues_dex.infrastructure.db.engine import get_engine
from hues_dex.infrastructure.db.repositories.registry_snapshot_repository import (
    SqlRegistrySnapshotRepository,
)
from hues_dex.infrastructure.registry.in_memory_registry import InMemoryPoolRegistry
from hues_dex.shared.config import get_settings


@lru_cache(maxsize=1)
def _get_clock() -> SystemClock:
    return SystemClock()


@lru_cache(maxsize=1)
def _get_registry() -> InMemoryPoolRegistry:
    settings = get_settings()
    return InMemoryPoolRegistry(history_max_points=settings.history_max_points, clock=_get_clock())


@lru_cache(maxsize=1)
def _get_state_store() -> InMemoryStateStore:
    return InMemoryStateStore()


@lru_cache(maxsize=1)
def _get_contract_gateway() -> Web3ContractGateway:
    settings = get_settings()
    rpc_urls = (settings.rpc_url,) + tuple(
        url for url in settings.rpc_fallback_urls if url != settings.rpc_url
    )
    return Web3ContractGateway(
        ContractGatewaySettings(
            rpc_urls=rpc_urls,
            timeout_seconds=settings.rpc_timeout_seconds,
            chain_id=settings.chain_id,
        )
    )


@lru_cache(maxsize=1)
def _get_aggregator_client() -> OneInchAggregatorClient:
    settings = get_settings()
    return OneInchAggregatorClient(
        OneInchClientSettings(
            api_base=settings.one_inch_api_base,
            dev_api_base=settings.one_inch_dev_api_base,
            api_key=settings.one_inch_api_key,
            timeout_seconds=settings.one_inch_timeout_seconds,
            max_retries=settings.one_inch_max_retries,
        )
    )


@lru_cache(maxsize=1)
def _get_price_overrides() -> PriceOverrides:
    settings = get_settings()
    return PriceOverrides(settings.token_price_overrides, network=str(settings.chain_id))


@lru_cache(maxsize=1)
def get_snapshot_repository() -> SqlRegistrySnapshotRepository | None:
    settings = get_settings()
    if not settings.database_dsn:
        return None
    repository = SqlRegistrySnapshotRepository(get_engine(settings.database_dsn))
    repository.ensure_schema()
    return repository


def get_registry() -> InMemoryPoolRegistry:
    return _get_registry()


def _get_refresher() -> PoolStatusRefresher:
    settings = get_settings()
    return PoolStatusRefresher(
        registry=_get_registry(),
        contract_gateway=_get_contract_gateway(),
        clock=_get_clock(),
        price_port=_get_price_overrides(),
        threshold=settings.rebalance_threshold,
    )


def _get_live_estimator() -> LiveEstimator:
    settings = get_settings()
    return LiveEstimator(
        contract_gateway=_get_contract_gateway(),
        rebalancer_address=settings.contracts.rebalancer_controller,
        threshold=settings.rebalance_threshold,
        max_price_impact_pct=settings.max_price_impact_pct,
        default_gas_estimate=settings.default_gas_estimate,
    )


def get_discover_pools_use_case() -> DiscoverPoolsUseCase:
    settings = get_settings()
    return DiscoverPoolsUseCase(
        registry=_get_registry(),
        contract_gateway=_get_contract_gateway(),
        clock=_get_clock(),
        price_port=_get_price_overrides(),
        default_factory_address=settings.contracts.factory,
        default_target_ratio=settings.default_target_ratio,
        threshold=settings.rebalance_threshold,
        max_pairs=settings.discovery_max_pairs,
    )


def get_set_target_ratios_use_case() -> SetTargetRatiosUseCase:
    settings = get_settings()
    return SetTargetRatiosUseCase(
        registry=_get_registry(),
        default_target_ratio=settings.default_target_ratio,
        threshold=settings.rebalance_threshold,
    )


def get_list_pools_use_case() -> ListPoolsUseCase:
    return ListPoolsUseCase(registry=_get_registry())


def get_pool_status_use_case() -> GetPoolStatusUseCase:
    return GetPoolStatusUseCase(registry=_get_registry(), refresher=_get_refresher(), clock=_get_clock())


def get_pool_status_action_use_case() -> PoolStatusActionUseCase:
    settings = get_settings()
    return PoolStatusActionUseCase(
        registry=_get_registry(),
        refresher=_get_refresher(),
        default_target_ratio=settings.default_target_ratio,
        threshold=settings.rebalance_threshold,
    )


def get_pool_metrics_use_case() -> GetPoolMetricsUseCase:
    return GetPoolMetricsUseCase(registry=_get_registry(), clock=_get_clock())


def get_update_pool_metrics_use_case() -> UpdatePoolMetricsUseCase:
    settings = get_settings()
    return UpdatePoolMetricsUseCase(
        registry=_get_registry(),
        clock=_get_clock(),
        threshold=settings.rebalance_threshold,
    )


def get_quick_estimate_use_case() -> QuickEstimateUseCase:
    settings = get_settings()
    return QuickEstimateUseCase(
        registry=_get_registry(),
        threshold=settings.rebalance_threshold,
        max_price_impact_pct=settings.max_price_impact_pct,
    )


def get_live_estimate_use_case() -> LiveEstimateUseCase:
    return LiveEstimateUseCase(registry=_get_registry(), estimator=_get_live_estimator())


def get_blockchain_estimate_use_case() -> BlockchainEstimateUseCase:
    settings = get_settings()
    return BlockchainEstimateUseCase(
        estimator=_get_live_estimator(),
        default_target_ratio=settings.default_target_ratio,
    )


def get_execute_rebalance_use_case() -> ExecuteRebalanceUseCase:
    settings = get_settings()
    return ExecuteRebalanceUseCase(
        registry=_get_registry(),
        contract_gateway=_get_contract_gateway(),
        clock=_get_clock(),
        rebalancer_address=settings.contracts.rebalancer_controller,
        threshold=settings.rebalance_threshold,
    )


def get_rebalance_status_use_case() -> GetRebalanceStatusUseCase:
    return GetRebalanceStatusUseCase(
        registry=_get_registry(),
        contract_gateway=_get_contract_gateway(),
        refresher=_get_refresher(),
    )


def get_rebalance_activity_use_case() -> GetRebalanceActivityUseCase:
    return GetRebalanceActivityUseCase(registry=_get_registry())


def get_swap_quote_use_case() -> GetSwapQuoteUseCase:
    return GetSwapQuoteUseCase(aggregator=_get_aggregator_client())


def get_execute_swap_use_case() -> ExecuteSwapUseCase:
    return ExecuteSwapUseCase(
        aggregator=_get_aggregator_client(),
        contract_gateway=_get_contract_gateway(),
        clock=_get_clock(),
    )


def get_search_tokens_use_case() -> SearchTokensUseCase:
    return SearchTokensUseCase(aggregator=_get_aggregator_client())


def get_token_info_use_case() -> GetTokenInfoUseCase:
    return GetTokenInfoUseCase(contract_gateway=_get_contract_gateway())


@lru_cache(maxsize=1)
def get_initialization_service() -> InitializationService:
    settings = get_settings()
    return InitializationService(
        clock=_get_clock(),
        state_store=_get_state_store(),
        discover=lambda: get_discover_pools_use_case().execute(DiscoverPoolsInput()),
        cooldown_seconds=settings.init_cooldown_seconds,
    )


def get_system_status_use_case() -> GetSystemStatusUseCase:
    settings = get_settings()
    return GetSystemStatusUseCase(
        registry=_get_registry(),
        contract_gateway=_get_contract_gateway(),
        state_store=_get_state_store(),
        clock=_get_clock(),
        chain_id=settings.chain_id,
    )


def get_initialize_system_use_case() -> InitializeSystemUseCase:
    settings = get_settings()
    return InitializeSystemUseCase(
        contract_gateway=_get_contract_gateway(),
        state_store=_get_state_store(),
        initialization=get_initialization_service(),
        status=get_system_status_use_case(),
        factory_address=settings.contracts.factory,
        rebalancer_address=settings.contracts.rebalancer_controller,
    )


def get_save_snapshot_use_case() -> SaveSnapshotUseCase:
    return SaveSnapshotUseCase(
        registry=_get_registry(),
        snapshot_port=get_snapshot_repository(),
        clock=_get_clock(),
    )


def get_contract_status_use_case() -> ContractStatusUseCase:
    settings = get_settings()
    gateway = _get_contract_gateway()
    return ContractStatusUseCase(
        contract_gateway=gateway,
        contracts=settings.contracts,
        rpc_url=gateway.rpc_url or settings.rpc_url,
    )


def get_check_pair_use_case() -> CheckPairUseCase:
    settings = get_settings()
    return CheckPairUseCase(
        contract_gateway=_get_contract_gateway(),
        default_factory_address=settings.contracts.factory,
    )
