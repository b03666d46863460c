from __future__ import annotations

import logging

from hues_dex.application.dto.swap import SwapExecuteInput, SwapQuoteInput
from hues_dex.application.ports.aggregator_port import AggregatorPort
from hues_dex.application.ports.contract_gateway_port import ContractGatewayPort
from hues_dex.application.ports.system_state_port import ClockPort
from hues_dex.domain.entities.swap import SwapExecution, SwapQuote
from hues_dex.domain.exceptions import AggregatorError, DomainError, SwapInputError
from hues_dex.domain.services.mock_swap import generate_mock_quote, mock_tx_hash


logger = logging.getLogger(__name__)


MOCK_CHAIN_ID = 31
CONFIRMATION_ESTIMATE_MS = 30_000


class GetSwapQuoteUseCase:
    """Mock quote on the platform chain, aggregator quote elsewhere.

    Aggregator failures fall back to the mock quote; ``source`` tells them apart.
    """

    def __init__(self, *, aggregator: AggregatorPort):
        self._aggregator = aggregator

    def execute(self, command: SwapQuoteInput) -> SwapQuote:
        if not command.from_token_address or not command.to_token_address or not command.amount:
            raise SwapInputError(
                "Missing required parameters: from_token_address, to_token_address, amount"
            )

        if command.chain_id == MOCK_CHAIN_ID:
            return generate_mock_quote(
                from_token_address=command.from_token_address,
                to_token_address=command.to_token_address,
                amount=command.amount,
            )

        try:
            return self._aggregator.get_quote(
                chain_id=command.chain_id,
                from_token_address=command.from_token_address,
                to_token_address=command.to_token_address,
                amount=command.amount,
            )
        except AggregatorError as exc:
            logger.warning(
                "swap_quote: aggregator_fallback chain_id=%s error=%s",
                command.chain_id,
                exc,
            )
            return generate_mock_quote(
                from_token_address=command.from_token_address,
                to_token_address=command.to_token_address,
                amount=command.amount,
            )


class ExecuteSwapUseCase:
    """Nothing is broadcast: both paths return a locally generated pending hash."""

    def __init__(
        self,
        *,
        aggregator: AggregatorPort,
        contract_gateway: ContractGatewayPort,
        clock: ClockPort,
    ):
        self._aggregator = aggregator
        self._gateway = contract_gateway
        self._clock = clock

    def execute(self, command: SwapExecuteInput) -> SwapExecution:
        if not command.private_key:
            raise SwapInputError("Private key required for swap execution")
        if (
            not command.from_token_address
            or not command.to_token_address
            or not command.from_amount
            or not command.to_amount
        ):
            raise SwapInputError("Missing required parameters")

        source = "mock"
        if command.chain_id != MOCK_CHAIN_ID:
            try:
                self._aggregator.get_swap(
                    chain_id=command.chain_id,
                    from_token_address=command.from_token_address,
                    to_token_address=command.to_token_address,
                    amount=command.from_amount,
                    from_address=self._gateway.address_for_key(command.private_key),
                    slippage=command.slippage,
                )
                source = "1inch"
            except AggregatorError as exc:
                logger.warning(
                    "swap_execute: aggregator_fallback chain_id=%s error=%s",
                    command.chain_id,
                    exc,
                )
            except DomainError as exc:
                raise SwapInputError(str(exc)) from exc

        tx_hash = mock_tx_hash()
        logger.info(
            "swap_execute: submitted chain_id=%s source=%s tx=%s",
            command.chain_id,
            source,
            tx_hash,
        )
        return SwapExecution(
            tx_hash=tx_hash,
            status="pending",
            estimated_confirmation=self._clock.now_ms() + CONFIRMATION_ESTIMATE_MS,
            source=source,
        )
