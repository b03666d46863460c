from __future__ import annotations

import logging

from hues_dex.application.dto.rebalance import (
    RebalanceActivityInput,
    RebalanceActivityOutput,
    RebalanceStatusInput,
    RebalanceStatusOutput,
)
from hues_dex.application.ports.contract_gateway_port import ContractGatewayPort
from hues_dex.application.ports.pool_registry_port import PoolRegistryPort
from hues_dex.application.use_cases.pool_status import PoolStatusRefresher
from hues_dex.domain.exceptions import (
    ContractCallError,
    RebalanceInputError,
    TransactionNotFoundError,
)


logger = logging.getLogger(__name__)


MAX_ACTIVITY_LIMIT = 100


class GetRebalanceStatusUseCase:
    """Polls a rebalance transaction and settles the pending event."""

    def __init__(
        self,
        *,
        registry: PoolRegistryPort,
        contract_gateway: ContractGatewayPort,
        refresher: PoolStatusRefresher,
    ):
        self._registry = registry
        self._gateway = contract_gateway
        self._refresher = refresher

    def execute(self, command: RebalanceStatusInput) -> RebalanceStatusOutput:
        event = self._registry.get_rebalance_event(command.tx_hash)
        if event is None:
            raise TransactionNotFoundError("Transaction not found.")

        tx = self._gateway.get_transaction(command.tx_hash)
        if tx is None:
            raise TransactionNotFoundError("Transaction not found on blockchain.")
        receipt = self._gateway.get_transaction_receipt(command.tx_hash)

        status = event.status
        pool_updated = False
        logs: list[dict] = []
        if receipt is not None:
            status = "confirmed" if receipt.status == 1 else "failed"
            if receipt.status == 1:
                logs = list(receipt.logs)
            if event.status == "pending":
                if receipt.status == 1:
                    pool_updated = self._settle_confirmed(event.pool_address, command.tx_hash, receipt.gas_used)
                else:
                    self._registry.update_rebalance_event(command.tx_hash, status="failed")
                logger.info(
                    "rebalance_status: settled tx=%s status=%s pool=%s",
                    command.tx_hash,
                    status,
                    event.pool_address,
                )

        return RebalanceStatusOutput(
            tx_hash=command.tx_hash,
            status=status,
            block_number=receipt.block_number if receipt else None,
            gas_used=str(receipt.gas_used) if receipt else None,
            events=logs,
            rebalance_event=self._registry.get_rebalance_event(command.tx_hash) or event,
            pool_updated=pool_updated,
        )

    def _settle_confirmed(self, pool_address: str, tx_hash: str, gas_used: int) -> bool:
        self._registry.update_rebalance_event(tx_hash, status="confirmed", gas_used=str(gas_used))
        pool = self._registry.get_pool(pool_address)
        if pool is None:
            return False
        try:
            refreshed = self._refresher.refresh_pool(pool)
        except ContractCallError as exc:
            logger.warning(
                "rebalance_status: pool_refresh_failed pool=%s error=%s",
                pool_address,
                exc,
            )
            return False
        self._registry.update_rebalance_event(tx_hash, to_ratio=refreshed.current_ratio)
        return True


class GetRebalanceActivityUseCase:
    def __init__(self, *, registry: PoolRegistryPort):
        self._registry = registry

    def execute(self, command: RebalanceActivityInput) -> RebalanceActivityOutput:
        if command.limit < 1 or command.limit > MAX_ACTIVITY_LIMIT:
            raise RebalanceInputError(f"limit must be between 1 and {MAX_ACTIVITY_LIMIT}.")
        events = self._registry.get_rebalance_events(command.pool_address)
        ordered = sorted(events, key=lambda e: e.timestamp, reverse=True)
        return RebalanceActivityOutput(events=ordered[: command.limit], total=len(events))
