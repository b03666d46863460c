from __future__ import annotations

from pydantic import BaseModel

from hues_dex.domain.entities.token import SearchToken, TokenInfo


class TokenInfoResponse(BaseModel):
    address: str
    name: str
    symbol: str
    decimals: int
    total_supply: str
    is_valid: bool


class SearchTokenResponse(BaseModel):
    address: str
    name: str
    symbol: str
    decimals: int
    chain_id: int
    logo_uri: str | None = None
    tags: list[str]
    verified: bool


class SearchTokensResponse(BaseModel):
    tokens: list[SearchTokenResponse]
    total: int
    query: str
    chain_id: int
    source: str


def token_info_response(token: TokenInfo) -> TokenInfoResponse:
    return TokenInfoResponse(
        address=token.address,
        name=token.name,
        symbol=token.symbol,
        decimals=token.decimals,
        total_supply=token.total_supply,
        is_valid=token.is_valid,
    )


def search_token_response(token: SearchToken) -> SearchTokenResponse:
    return SearchTokenResponse(
        address=token.address,
        name=token.name,
        symbol=token.symbol,
        decimals=token.decimals,
        chain_id=token.chain_id,
        logo_uri=token.logo_uri,
        tags=list(token.tags),
        verified=token.verified,
    )
