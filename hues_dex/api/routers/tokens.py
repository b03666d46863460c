from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from hues_dex.api.deps import get_search_tokens_use_case, get_token_info_use_case
from hues_dex.api.schemas.common import ApiResponse, ok
from hues_dex.api.schemas.tokens import (
    SearchTokensResponse,
    TokenInfoResponse,
    search_token_response,
    token_info_response,
)
from hues_dex.application.dto.tokens import SearchTokensInput
from hues_dex.application.use_cases.tokens import GetTokenInfoUseCase, SearchTokensUseCase
from hues_dex.domain.exceptions import InvalidAddressError, TokenInputError, TokenNotFoundError

router = APIRouter()


@router.get("/api/tokens/search", response_model=ApiResponse[SearchTokensResponse])
def search_tokens(
    query: str | None = None,
    chain_id: int = 1,
    limit: int = 20,
    only_positive_rating: bool = True,
    use_case: SearchTokensUseCase = Depends(get_search_tokens_use_case),
):
    try:
        result = use_case.execute(
            SearchTokensInput(
                query=query,
                chain_id=chain_id,
                limit=limit,
                only_positive_rating=only_positive_rating,
            )
        )
    except TokenInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(
        SearchTokensResponse(
            tokens=[search_token_response(token) for token in result.tokens],
            total=result.total,
            query=result.query,
            chain_id=result.chain_id,
            source=result.source,
        )
    )


@router.get("/api/tokens/{address}", response_model=ApiResponse[TokenInfoResponse])
def get_token_info(
    address: str,
    use_case: GetTokenInfoUseCase = Depends(get_token_info_use_case),
):
    try:
        result = use_case.execute(address)
    except TokenNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except (InvalidAddressError, TokenInputError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(token_info_response(result))
