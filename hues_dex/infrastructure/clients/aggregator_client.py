from __future__ import annotations

from dataclasses import dataclass
import logging
import time

import httpx

from hues_dex.domain.entities.swap import QuoteToken, SwapQuote
from hues_dex.domain.entities.token import SearchToken
from hues_dex.domain.exceptions import AggregatorError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OneInchClientSettings:
    api_base: str
    dev_api_base: str
    api_key: str
    timeout_seconds: float
    max_retries: int = 1


def _quote_token(payload: dict | None, fallback_address: str) -> QuoteToken:
    payload = payload or {}
    return QuoteToken(
        address=payload.get("address") or fallback_address,
        symbol=payload.get("symbol") or "TOKEN",
        decimals=int(payload.get("decimals") or 18),
    )


class OneInchAggregatorClient:
    """1inch REST client. Every failure surfaces as ``AggregatorError``."""

    def __init__(self, settings: OneInchClientSettings):
        self._settings = settings

    def _get_json(self, url: str, *, params: dict, headers: dict | None = None) -> dict | list:
        attempts = max(1, self._settings.max_retries)
        delay = 0.25
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                with httpx.Client(timeout=self._settings.timeout_seconds) as client:
                    response = client.get(url, params=params, headers=headers or {"Accept": "application/json"})
                    response.raise_for_status()
                    return response.json()
            except (httpx.HTTPError, ValueError) as exc:
                last_exc = exc
                if attempt == attempts:
                    break
                logger.warning(
                    "aggregator_client: request_retry attempt=%s/%s url=%s error=%s",
                    attempt,
                    attempts,
                    url,
                    exc,
                )
                time.sleep(delay)
                delay *= 2

        raise AggregatorError(f"Aggregator request failed: {last_exc}") from last_exc

    def get_quote(
        self,
        *,
        chain_id: int,
        from_token_address: str,
        to_token_address: str,
        amount: str,
    ) -> SwapQuote:
        url = f"{self._settings.api_base.rstrip('/')}/{chain_id}/quote"
        payload = self._get_json(
            url,
            params={
                "fromTokenAddress": from_token_address,
                "toTokenAddress": to_token_address,
                "amount": amount,
            },
        )
        if not isinstance(payload, dict) or "toAmount" not in payload:
            raise AggregatorError("Aggregator quote response is missing toAmount.")

        estimated_gas = str(payload.get("estimatedGas") or "0")
        try:
            # The quote endpoint has no impact field; gas is used as a rough proxy.
            price_impact = float(estimated_gas) / 1_000_000
        except ValueError:
            price_impact = 0.0
        return SwapQuote(
            from_token=_quote_token(payload.get("fromToken"), from_token_address),
            to_token=_quote_token(payload.get("toToken"), to_token_address),
            from_amount=str(payload.get("fromAmount") or amount),
            to_amount=str(payload["toAmount"]),
            price_impact=price_impact,
            estimated_gas=estimated_gas,
            slippage=0.5,
            route=list(payload.get("protocols") or []),
            source="1inch",
        )

    def get_swap(
        self,
        *,
        chain_id: int,
        from_token_address: str,
        to_token_address: str,
        amount: str,
        from_address: str,
        slippage: float,
    ) -> dict:
        url = f"{self._settings.api_base.rstrip('/')}/{chain_id}/swap"
        payload = self._get_json(
            url,
            params={
                "fromTokenAddress": from_token_address,
                "toTokenAddress": to_token_address,
                "amount": amount,
                "fromAddress": from_address,
                "slippage": slippage,
            },
        )
        if not isinstance(payload, dict) or "tx" not in payload:
            raise AggregatorError("Aggregator swap response is missing tx.")
        logger.info(
            "aggregator_client: swap_payload chain_id=%s from=%s to=%s",
            chain_id,
            from_token_address,
            to_token_address,
        )
        return payload

    def search_tokens(
        self,
        *,
        chain_id: int,
        query: str,
        limit: int,
        only_positive_rating: bool,
    ) -> list[SearchToken]:
        if not self._settings.api_key:
            raise AggregatorError("ONE_INCH_API_KEY is not configured.")

        url = f"{self._settings.dev_api_base.rstrip('/')}/token/v1.4/{chain_id}/search"
        payload = self._get_json(
            url,
            params={
                "query": query,
                "only_positive_rating": str(only_positive_rating).lower(),
                "limit": limit,
            },
            headers={
                "Authorization": f"Bearer {self._settings.api_key}",
                "Accept": "application/json",
            },
        )
        if not isinstance(payload, list):
            raise AggregatorError("Aggregator token search returned an unexpected payload.")

        tokens = []
        for row in payload:
            tags = list(row.get("tags") or [])
            tokens.append(
                SearchToken(
                    address=row.get("address", ""),
                    name=row.get("name", ""),
                    symbol=row.get("symbol", ""),
                    decimals=int(row.get("decimals") or 18),
                    chain_id=chain_id,
                    logo_uri=row.get("logoURI"),
                    tags=tags,
                    verified="verified" in tags,
                )
            )
        logger.info(
            "aggregator_client: token_search chain_id=%s query=%s results=%s",
            chain_id,
            query,
            len(tokens),
        )
        return tokens
