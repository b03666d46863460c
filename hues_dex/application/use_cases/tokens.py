from __future__ import annotations

import logging

from hues_dex.application.dto.tokens import SearchTokensInput, SearchTokensOutput
from hues_dex.application.ports.aggregator_port import AggregatorPort
from hues_dex.application.ports.contract_gateway_port import ContractGatewayPort
from hues_dex.domain.entities.token import TokenInfo
from hues_dex.domain.exceptions import AggregatorError, TokenInputError
from hues_dex.domain.services.mock_tokens import generate_mock_tokens


logger = logging.getLogger(__name__)


MIN_QUERY_LENGTH = 2
MAX_SEARCH_LIMIT = 100


class SearchTokensUseCase:
    def __init__(self, *, aggregator: AggregatorPort):
        self._aggregator = aggregator

    def execute(self, command: SearchTokensInput) -> SearchTokensOutput:
        query = (command.query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            raise TokenInputError("Query must be at least 2 characters long")
        if command.limit < 1 or command.limit > MAX_SEARCH_LIMIT:
            raise TokenInputError(f"limit must be between 1 and {MAX_SEARCH_LIMIT}.")

        try:
            tokens = self._aggregator.search_tokens(
                chain_id=command.chain_id,
                query=query,
                limit=command.limit,
                only_positive_rating=command.only_positive_rating,
            )
            source = "1inch"
        except AggregatorError as exc:
            logger.warning(
                "search_tokens: aggregator_fallback chain_id=%s query=%s error=%s",
                command.chain_id,
                query,
                exc,
            )
            tokens = generate_mock_tokens(query=query, chain_id=command.chain_id, limit=command.limit)
            source = "mock"

        return SearchTokensOutput(
            tokens=tokens,
            total=len(tokens),
            query=query,
            chain_id=command.chain_id,
            source=source,
        )


class GetTokenInfoUseCase:
    def __init__(self, *, contract_gateway: ContractGatewayPort):
        self._gateway = contract_gateway

    def execute(self, address: str) -> TokenInfo:
        if not address:
            raise TokenInputError("Token address is required.")
        return self._gateway.get_token_info(address)
