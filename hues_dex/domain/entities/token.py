from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TokenInfo:
    address: str
    name: str
    symbol: str
    decimals: int
    total_supply: str
    is_valid: bool = True


@dataclass(frozen=True)
class SearchToken:
    address: str
    name: str
    symbol: str
    decimals: int
    chain_id: int
    logo_uri: str | None = None
    tags: list[str] = field(default_factory=list)
    verified: bool = False
