from __future__ import annotations

from collections.abc import Callable
import logging
from threading import Lock

from hues_dex.application.dto.pools import DiscoverPoolsOutput
from hues_dex.application.dto.system import InitializationResult, InitializeSystemOutput
from hues_dex.application.ports.contract_gateway_port import ContractGatewayPort
from hues_dex.application.ports.pool_registry_port import PoolRegistryPort
from hues_dex.application.ports.system_state_port import ClockPort, StateStorePort
from hues_dex.domain.entities.system import SystemStatus
from hues_dex.domain.exceptions import ContractCallError, ContractNotDeployedError, DomainError


logger = logging.getLogger(__name__)


LAST_RUN_KEY = "initialization.last_run_ms"
CONTRACTS_VERIFIED_KEY = "initialization.contracts_verified"

OUTCOME_COMPLETED = "completed"
OUTCOME_SKIPPED_IN_PROGRESS = "skipped_in_progress"
OUTCOME_SKIPPED_COOLDOWN = "skipped_cooldown"
OUTCOME_FAILED = "failed"


class InitializationService:
    """Guarded pool discovery.

    At most one run at a time, and at most one successful run per cooldown
    window. A failed run leaves the last-run timestamp untouched so the next
    call retries immediately.
    """

    def __init__(
        self,
        *,
        clock: ClockPort,
        state_store: StateStorePort,
        discover: Callable[[], DiscoverPoolsOutput],
        cooldown_seconds: float = 600,
    ):
        self._clock = clock
        self._state_store = state_store
        self._discover = discover
        self._cooldown_ms = int(cooldown_seconds * 1000)
        self._running = Lock()

    def last_run_ms(self) -> int | None:
        value = self._state_store.get(LAST_RUN_KEY)
        return int(value) if value else None

    def is_running(self) -> bool:
        return self._running.locked()

    def run(self) -> InitializationResult:
        if not self._running.acquire(blocking=False):
            logger.info("initialization: skipped reason=in_progress")
            return InitializationResult(outcome=OUTCOME_SKIPPED_IN_PROGRESS, last_run_ms=self.last_run_ms())
        try:
            last_run = self.last_run_ms()
            now_ms = self._clock.now_ms()
            if last_run is not None and now_ms - last_run < self._cooldown_ms:
                logger.info(
                    "initialization: skipped reason=cooldown remaining_ms=%s",
                    self._cooldown_ms - (now_ms - last_run),
                )
                return InitializationResult(outcome=OUTCOME_SKIPPED_COOLDOWN, last_run_ms=last_run)

            try:
                result = self._discover()
            except DomainError as exc:
                logger.warning("initialization: failed error=%s", exc)
                return InitializationResult(outcome=OUTCOME_FAILED, error=str(exc), last_run_ms=last_run)

            finished_ms = self._clock.now_ms()
            self._state_store.set(LAST_RUN_KEY, str(finished_ms))
            logger.info(
                "initialization: completed discovered=%s imbalanced=%s",
                result.total_discovered,
                result.imbalanced_count,
            )
            return InitializationResult(
                outcome=OUTCOME_COMPLETED,
                discovered=result.total_discovered,
                imbalanced=result.imbalanced_count,
                last_run_ms=finished_ms,
            )
        finally:
            self._running.release()


class GetSystemStatusUseCase:
    def __init__(
        self,
        *,
        registry: PoolRegistryPort,
        contract_gateway: ContractGatewayPort,
        state_store: StateStorePort,
        clock: ClockPort,
        chain_id: int,
    ):
        self._registry = registry
        self._gateway = contract_gateway
        self._state_store = state_store
        self._clock = clock
        self._chain_id = chain_id

    def execute(self) -> SystemStatus:
        try:
            block_number = self._gateway.get_block_number()
        except ContractCallError as exc:
            logger.warning("system_status: block_number_failed error=%s", exc)
            block_number = 0

        stats = self._registry.get_dashboard_stats()
        pending = sum(1 for e in self._registry.get_rebalance_events() if e.status == "pending")
        return SystemStatus(
            is_initialized=self._state_store.get(LAST_RUN_KEY) is not None,
            contracts_deployed=self._state_store.get(CONTRACTS_VERIFIED_KEY) == "true",
            event_listeners_active=False,
            total_pools=stats.total_pools,
            active_rebalances=pending,
            last_update=self._clock.now_ms(),
            network_id=self._chain_id,
            block_number=block_number,
        )


class InitializeSystemUseCase:
    """Verifies factory and rebalancer bytecode, then runs guarded discovery."""

    def __init__(
        self,
        *,
        contract_gateway: ContractGatewayPort,
        state_store: StateStorePort,
        initialization: InitializationService,
        status: GetSystemStatusUseCase,
        factory_address: str,
        rebalancer_address: str,
    ):
        self._gateway = contract_gateway
        self._state_store = state_store
        self._initialization = initialization
        self._status = status
        self._factory_address = factory_address
        self._rebalancer_address = rebalancer_address

    def execute(self) -> InitializeSystemOutput:
        for name, address in (
            ("factory", self._factory_address),
            ("rebalancer", self._rebalancer_address),
        ):
            code = self._gateway.get_code(address)
            if code in ("", "0x"):
                self._state_store.set(CONTRACTS_VERIFIED_KEY, "false")
                logger.warning("initialize_system: contract_missing name=%s address=%s", name, address)
                raise ContractNotDeployedError("Contracts not deployed at provided addresses")
        self._state_store.set(CONTRACTS_VERIFIED_KEY, "true")

        result = self._initialization.run()
        return InitializeSystemOutput(status=self._status.execute(), initialization=result)
