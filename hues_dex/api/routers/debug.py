from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from hues_dex.api.deps import get_check_pair_use_case, get_contract_status_use_case
from hues_dex.api.schemas.common import ApiResponse, ok
from hues_dex.api.schemas.system import (
    CheckPairResponse,
    ContractPresenceResponse,
    ContractStatusResponse,
    RouterWiringResponse,
)
from hues_dex.application.dto.system import CheckPairInput
from hues_dex.application.use_cases.diagnostics import CheckPairUseCase, ContractStatusUseCase
from hues_dex.domain.exceptions import InvalidAddressError

router = APIRouter()


@router.get("/api/debug/contract-status", response_model=ApiResponse[ContractStatusResponse])
def get_contract_status(
    use_case: ContractStatusUseCase = Depends(get_contract_status_use_case),
):
    try:
        result = use_case.execute()
    except InvalidAddressError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    router_wiring = None
    if result.router is not None:
        router_wiring = RouterWiringResponse(
            factory=result.router.factory,
            wtrbtc=result.router.wtrbtc,
            factory_matches=result.router.factory_matches,
            wtrbtc_matches=result.router.wtrbtc_matches,
        )
    return ok(
        ContractStatusResponse(
            rpc_url=result.rpc_url,
            block_number=result.block_number,
            contracts=[
                ContractPresenceResponse(
                    name=item.name,
                    address=item.address,
                    exists=item.exists,
                    code_length=item.code_length,
                )
                for item in result.contracts
            ],
            router=router_wiring,
            deployed_count=result.deployed_count,
            all_deployed=result.all_deployed,
            can_create_pools=result.can_create_pools,
            can_add_liquidity=result.can_add_liquidity,
            recommendations=result.recommendations,
        )
    )


@router.get("/api/debug/check-pair", response_model=ApiResponse[CheckPairResponse])
def check_pair(
    token_a: str | None = None,
    token_b: str | None = None,
    factory_address: str | None = None,
    use_case: CheckPairUseCase = Depends(get_check_pair_use_case),
):
    try:
        result = use_case.execute(
            CheckPairInput(token_a=token_a, token_b=token_b, factory_address=factory_address)
        )
    except InvalidAddressError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(
        CheckPairResponse(
            factory_address=result.factory_address,
            token_a=result.token_a,
            token_b=result.token_b,
            pair_address=result.pair_address,
            pair_exists=result.pair_exists,
        )
    )
