from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from hues_dex.api.deps import get_execute_swap_use_case, get_swap_quote_use_case
from hues_dex.api.schemas.common import ApiResponse, ok
from hues_dex.api.schemas.swap import (
    SwapExecuteRequest,
    SwapExecuteResponse,
    SwapQuoteResponse,
    swap_execute_response,
    swap_quote_response,
)
from hues_dex.application.dto.swap import SwapExecuteInput, SwapQuoteInput
from hues_dex.application.use_cases.swap import ExecuteSwapUseCase, GetSwapQuoteUseCase
from hues_dex.domain.exceptions import SwapInputError

router = APIRouter()


@router.get("/api/swap/quote", response_model=ApiResponse[SwapQuoteResponse])
def get_swap_quote(
    from_token_address: str | None = None,
    to_token_address: str | None = None,
    amount: str | None = None,
    chain_id: int = 31,
    use_case: GetSwapQuoteUseCase = Depends(get_swap_quote_use_case),
):
    try:
        result = use_case.execute(
            SwapQuoteInput(
                from_token_address=from_token_address,
                to_token_address=to_token_address,
                amount=amount,
                chain_id=chain_id,
            )
        )
    except SwapInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(swap_quote_response(result))


@router.post("/api/swap/execute", response_model=ApiResponse[SwapExecuteResponse])
def execute_swap(
    payload: SwapExecuteRequest,
    use_case: ExecuteSwapUseCase = Depends(get_execute_swap_use_case),
):
    try:
        result = use_case.execute(
            SwapExecuteInput(
                from_token_address=payload.from_token_address,
                to_token_address=payload.to_token_address,
                from_amount=payload.from_amount,
                to_amount=payload.to_amount,
                private_key=payload.private_key,
                chain_id=payload.chain_id,
                slippage=payload.slippage,
            )
        )
    except SwapInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(swap_execute_response(result))
