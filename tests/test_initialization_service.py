from __future__ import annotations

import threading

from hues_dex.application.dto.pools import DiscoverPoolsOutput
from hues_dex.application.use_cases.initialize_system import (
    LAST_RUN_KEY,
    OUTCOME_COMPLETED,
    OUTCOME_FAILED,
    OUTCOME_SKIPPED_COOLDOWN,
    OUTCOME_SKIPPED_IN_PROGRESS,
    InitializationService,
)
from hues_dex.domain.exceptions import ContractCallError
from hues_dex.infrastructure.scheduler import PeriodicDiscoveryRunner


class FakeDiscovery:
    def __init__(self, *, discovered: int = 2, imbalanced: int = 1):
        self.calls = 0
        self.error: Exception | None = None
        self._output = DiscoverPoolsOutput(pools=[], total_discovered=discovered, imbalanced_count=imbalanced)

    def __call__(self) -> DiscoverPoolsOutput:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self._output


def _service(clock, state_store, discovery, cooldown_seconds=600) -> InitializationService:
    return InitializationService(
        clock=clock,
        state_store=state_store,
        discover=discovery,
        cooldown_seconds=cooldown_seconds,
    )


def test_first_run_completes_and_records_timestamp(clock, state_store):
    discovery = FakeDiscovery()
    service = _service(clock, state_store, discovery)

    result = service.run()

    assert result.outcome == OUTCOME_COMPLETED
    assert result.discovered == 2
    assert result.imbalanced == 1
    assert state_store.get(LAST_RUN_KEY) == str(clock.now)
    assert service.last_run_ms() == clock.now


def test_second_run_inside_cooldown_is_skipped(clock, state_store):
    discovery = FakeDiscovery()
    service = _service(clock, state_store, discovery)
    service.run()

    clock.advance(599_000)
    result = service.run()

    assert result.outcome == OUTCOME_SKIPPED_COOLDOWN
    assert discovery.calls == 1

    clock.advance(1_000)
    assert service.run().outcome == OUTCOME_COMPLETED
    assert discovery.calls == 2


def test_failed_run_does_not_start_cooldown(clock, state_store):
    discovery = FakeDiscovery()
    discovery.error = ContractCallError("rpc down")
    service = _service(clock, state_store, discovery)

    result = service.run()

    assert result.outcome == OUTCOME_FAILED
    assert result.error == "rpc down"
    assert state_store.get(LAST_RUN_KEY) is None
    assert service.is_running() is False

    discovery.error = None
    assert service.run().outcome == OUTCOME_COMPLETED


def test_concurrent_run_is_skipped(clock, state_store):
    started = threading.Event()
    release = threading.Event()
    results = []

    def slow_discovery() -> DiscoverPoolsOutput:
        started.set()
        release.wait(timeout=5)
        return DiscoverPoolsOutput(pools=[], total_discovered=0, imbalanced_count=0)

    service = _service(clock, state_store, slow_discovery)
    worker = threading.Thread(target=lambda: results.append(service.run()))
    worker.start()
    assert started.wait(timeout=5)

    assert service.is_running() is True
    assert service.run().outcome == OUTCOME_SKIPPED_IN_PROGRESS

    release.set()
    worker.join(timeout=5)
    assert results[0].outcome == OUTCOME_COMPLETED


def test_runner_disabled_with_zero_interval(clock, state_store):
    discovery = FakeDiscovery()
    runner = PeriodicDiscoveryRunner(_service(clock, state_store, discovery), interval_seconds=0)

    runner.start()

    assert runner.is_alive() is False
    assert discovery.calls == 0


def test_runner_calls_service_until_stopped(clock, state_store):
    called = threading.Event()

    def discovery() -> DiscoverPoolsOutput:
        called.set()
        return DiscoverPoolsOutput(pools=[], total_discovered=0, imbalanced_count=0)

    runner = PeriodicDiscoveryRunner(_service(clock, state_store, discovery), interval_seconds=60)
    runner.start()
    try:
        assert called.wait(timeout=5)
        assert runner.is_alive() is True
    finally:
        runner.stop()
    assert runner.is_alive() is False
