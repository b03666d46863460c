from __future__ import annotations

from dataclasses import dataclass

from hues_dex.domain.entities.token import SearchToken


@dataclass(frozen=True)
class SearchTokensInput:
    query: str | None
    chain_id: int = 1
    limit: int = 20
    only_positive_rating: bool = True


@dataclass(frozen=True)
class SearchTokensOutput:
    tokens: list[SearchToken]
    total: int
    query: str
    chain_id: int
    source: str
