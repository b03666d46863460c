from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter

from hues_dex.api.schemas.common import ApiResponse, ok
from hues_dex.api.schemas.system import ConfigResponse
from hues_dex.shared.config import get_settings

router = APIRouter()


@router.get("/api/config", response_model=ApiResponse[ConfigResponse])
def get_config():
    settings = get_settings()
    contracts = settings.contracts
    return ok(
        ConfigResponse(
            network_id=settings.chain_id,
            network_name=settings.network_name,
            rpc_url=settings.rpc_url,
            rpc_configured=settings.rpc_configured,
            contracts={
                "factory": contracts.factory,
                "router": contracts.router,
                "rebalancer_controller": contracts.rebalancer_controller,
                "keeper_helper": contracts.keeper_helper,
                "wtrbtc": contracts.wtrbtc,
                "token_a": contracts.token_a,
                "token_b": contracts.token_b,
            },
            has_env_file=Path(".env").is_file(),
        )
    )
