from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from hues_dex.domain.entities.pool import (
    DashboardStats,
    HistoricalPoint,
    Pool,
    PoolMetrics,
    PoolPerformance,
    RebalanceEvent,
    TokenRef,
)


def _dec(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def _dec_or_none(value: Any) -> Decimal | None:
    return Decimal(str(value)) if value is not None else None


def _str_or_none(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


def token_to_dict(token: TokenRef) -> dict:
    return {"address": token.address, "symbol": token.symbol, "decimals": token.decimals}


def token_from_dict(row: Mapping[str, Any]) -> TokenRef:
    return TokenRef(
        address=row["address"],
        symbol=row["symbol"],
        decimals=int(row.get("decimals", 18)),
    )


def pool_to_dict(pool: Pool) -> dict:
    return {
        "address": pool.address,
        "token_a": token_to_dict(pool.token_a),
        "token_b": token_to_dict(pool.token_b),
        "reserve_a": pool.reserve_a,
        "reserve_b": pool.reserve_b,
        "total_supply": pool.total_supply,
        "current_ratio": str(pool.current_ratio),
        "target_ratio": str(pool.target_ratio),
        "needs_rebalancing": pool.needs_rebalancing,
        "tvl": str(pool.tvl),
        "volume_24h": _str_or_none(pool.volume_24h),
        "fees_24h": str(pool.fees_24h),
        "apy": _str_or_none(pool.apy),
        "last_rebalance": pool.last_rebalance,
        "rebalance_count": pool.rebalance_count,
        "created_at": pool.created_at,
        "is_active": pool.is_active,
    }


def pool_from_dict(row: Mapping[str, Any]) -> Pool:
    return Pool(
        address=row["address"],
        token_a=token_from_dict(row["token_a"]),
        token_b=token_from_dict(row["token_b"]),
        reserve_a=str(row["reserve_a"]),
        reserve_b=str(row["reserve_b"]),
        total_supply=str(row.get("total_supply", "0")),
        current_ratio=_dec(row.get("current_ratio")),
        target_ratio=_dec(row.get("target_ratio")),
        needs_rebalancing=bool(row.get("needs_rebalancing", False)),
        tvl=_dec(row.get("tvl")),
        volume_24h=_dec_or_none(row.get("volume_24h")),
        fees_24h=_dec(row.get("fees_24h")),
        apy=_dec_or_none(row.get("apy")),
        last_rebalance=row.get("last_rebalance"),
        rebalance_count=int(row.get("rebalance_count", 0)),
        created_at=row.get("created_at"),
        is_active=bool(row.get("is_active", True)),
    )


def point_to_dict(point: HistoricalPoint) -> dict:
    return {
        "timestamp": point.timestamp,
        "ratio": str(point.ratio),
        "tvl": str(point.tvl),
        "volume": str(point.volume),
        "fees": str(point.fees),
    }


def point_from_dict(row: Mapping[str, Any]) -> HistoricalPoint:
    return HistoricalPoint(
        timestamp=int(row["timestamp"]),
        ratio=_dec(row.get("ratio")),
        tvl=_dec(row.get("tvl")),
        volume=_dec(row.get("volume")),
        fees=_dec(row.get("fees")),
    )


def event_to_dict(event: RebalanceEvent) -> dict:
    return {
        "tx_hash": event.tx_hash,
        "timestamp": event.timestamp,
        "pool_address": event.pool_address,
        "from_ratio": str(event.from_ratio),
        "to_ratio": str(event.to_ratio),
        "target_ratio": str(event.target_ratio),
        "gas_used": event.gas_used,
        "gas_price": event.gas_price,
        "status": event.status,
        "swap_amount0": event.swap_amount0,
        "swap_amount1": event.swap_amount1,
        "slippage": str(event.slippage),
    }


def event_from_dict(row: Mapping[str, Any]) -> RebalanceEvent:
    return RebalanceEvent(
        tx_hash=row["tx_hash"],
        timestamp=int(row["timestamp"]),
        pool_address=row["pool_address"],
        from_ratio=_dec(row.get("from_ratio")),
        to_ratio=_dec(row.get("to_ratio")),
        target_ratio=_dec(row.get("target_ratio")),
        gas_used=str(row.get("gas_used", "0")),
        gas_price=str(row.get("gas_price", "0")),
        status=row.get("status", "pending"),
        swap_amount0=str(row.get("swap_amount0", "0")),
        swap_amount1=str(row.get("swap_amount1", "0")),
        slippage=_dec(row.get("slippage")),
    )


def metrics_to_dict(metrics: PoolMetrics) -> dict:
    perf = metrics.performance
    return {
        "address": metrics.address,
        "historical_data": [point_to_dict(p) for p in metrics.historical_data],
        "rebalance_history": [event_to_dict(e) for e in metrics.rebalance_history],
        "performance": {
            "total_rebalances": perf.total_rebalances,
            "avg_time_between_rebalances": str(perf.avg_time_between_rebalances),
            "total_volume": str(perf.total_volume),
            "total_fees": str(perf.total_fees),
            "impermanent_loss": str(perf.impermanent_loss),
        },
    }


def metrics_from_dict(row: Mapping[str, Any]) -> PoolMetrics:
    perf = row.get("performance") or {}
    return PoolMetrics(
        address=row["address"],
        historical_data=tuple(point_from_dict(p) for p in row.get("historical_data") or []),
        rebalance_history=tuple(event_from_dict(e) for e in row.get("rebalance_history") or []),
        performance=PoolPerformance(
            total_rebalances=int(perf.get("total_rebalances", 0)),
            avg_time_between_rebalances=_dec(perf.get("avg_time_between_rebalances")),
            total_volume=_dec(perf.get("total_volume")),
            total_fees=_dec(perf.get("total_fees")),
            impermanent_loss=_dec(perf.get("impermanent_loss")),
        ),
    )


def stats_to_dict(stats: DashboardStats) -> dict:
    return {
        "total_pools": stats.total_pools,
        "total_tvl": str(stats.total_tvl),
        "total_volume_24h": str(stats.total_volume_24h),
        "average_apy": str(stats.average_apy),
        "active_pools": stats.active_pools,
        "imbalanced_pools": stats.imbalanced_pools,
    }
