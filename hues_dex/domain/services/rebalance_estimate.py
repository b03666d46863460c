from __future__ import annotations

from decimal import Decimal, localcontext

from hues_dex.domain.entities.rebalance import (
    PoolReserves,
    QuickRebalanceEstimate,
    RebalanceEstimate,
)
from hues_dex.domain.exceptions import RebalanceInputError
from hues_dex.domain.services.pool_ratio import (
    DECIMAL_PRECISION,
    evaluate_pool_ratio,
    needs_rebalancing,
    to_base_units,
)


SWAP_FRACTION = Decimal("0.5")
DEFAULT_GAS_ESTIMATE = 200_000
DEFAULT_MAX_PRICE_IMPACT_PCT = Decimal("5")
WEI_DECIMALS = 18


def validate_target_ratio(target_ratio: Decimal) -> None:
    if not target_ratio.is_finite() or target_ratio <= 0:
        raise RebalanceInputError("target_ratio must be a positive number.")


def validate_slippage(slippage_tolerance: Decimal) -> None:
    if not slippage_tolerance.is_finite() or slippage_tolerance < 0 or slippage_tolerance >= 100:
        raise RebalanceInputError("slippage_tolerance must be between 0 and 100.")


def constant_product_out(amount_in: Decimal, reserve_in: Decimal, reserve_out: Decimal) -> Decimal:
    if amount_in <= 0 or reserve_in + amount_in <= 0:
        return Decimal("0")
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return amount_in * reserve_out / (reserve_in + amount_in)


def estimate_rebalance(
    *,
    pool_address: str,
    reserves: PoolReserves,
    target_ratio: Decimal,
    threshold: Decimal,
    slippage_tolerance: Decimal = Decimal("0.5"),
    max_price_impact_pct: Decimal = DEFAULT_MAX_PRICE_IMPACT_PCT,
    gas_estimate: int | None = None,
    gas_price: int | None = None,
) -> RebalanceEstimate:
    """One-sided swap that moves the pool toward ``target_ratio``.

    The amount is ``|current - target| * reserve_in * 0.5``. It approximates
    the trade; it does not solve the constant-product invariant exactly.
    """
    validate_target_ratio(target_ratio)
    validate_slippage(slippage_tolerance)

    token_a = reserves.token_a
    token_b = reserves.token_b
    evaluation = evaluate_pool_ratio(
        reserve_a=reserves.reserve_a,
        reserve_b=reserves.reserve_b,
        target_ratio=target_ratio,
        threshold=threshold,
        decimals_a=token_a.decimals,
        decimals_b=token_b.decimals,
    )
    current_ratio = evaluation.ratio
    reserve_a = evaluation.normalized_a
    reserve_b = evaluation.normalized_b
    ratio_difference = abs(current_ratio - target_ratio)
    is_needed = evaluation.needs_rebalancing

    swap_amount = Decimal("0")
    swap_amount0 = "0"
    swap_amount1 = "0"
    swap_direction = ""
    route = (token_a.address, token_b.address)
    reserve_in = reserve_a
    reserve_out = reserve_b

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        if is_needed and current_ratio > target_ratio:
            swap_amount = (current_ratio - target_ratio) * reserve_a * SWAP_FRACTION
            swap_amount0 = str(to_base_units(swap_amount, token_a.decimals))
            swap_direction = f"Sell {token_a.symbol} for {token_b.symbol}"
        elif is_needed and current_ratio < target_ratio:
            swap_amount = (target_ratio - current_ratio) * reserve_b * SWAP_FRACTION
            swap_amount1 = str(to_base_units(swap_amount, token_b.decimals))
            swap_direction = f"Sell {token_b.symbol} for {token_a.symbol}"
            route = (token_b.address, token_a.address)
            reserve_in = reserve_b
            reserve_out = reserve_a

        price_impact = Decimal("0")
        if swap_amount > 0 and reserve_in > 0:
            price_impact = swap_amount / reserve_in * 100

        expected_out = constant_product_out(swap_amount, reserve_in, reserve_out)
        minimum_received = expected_out * (100 - slippage_tolerance) / 100

        gas = gas_estimate if gas_estimate is not None else DEFAULT_GAS_ESTIMATE
        estimated_cost = None
        if gas_price is not None:
            estimated_cost = Decimal(gas * gas_price).scaleb(-WEI_DECIMALS)

    return RebalanceEstimate(
        pool_address=pool_address,
        token_a=token_a,
        token_b=token_b,
        current_ratio=current_ratio,
        target_ratio=target_ratio,
        ratio_difference=ratio_difference,
        is_rebalance_needed=is_needed,
        swap_amount=swap_amount,
        swap_amount0=swap_amount0,
        swap_amount1=swap_amount1,
        swap_direction=swap_direction,
        route=route,
        estimated_gas=gas,
        gas_price=gas_price,
        estimated_cost=estimated_cost,
        price_impact=price_impact,
        expected_out=expected_out,
        minimum_received=minimum_received,
        slippage_tolerance=slippage_tolerance,
        can_rebalance=is_needed and swap_amount > 0 and price_impact < max_price_impact_pct,
        current_tvl=evaluation.tvl,
        reserve_a=reserve_a,
        reserve_b=reserve_b,
    )


def quick_estimate(
    *,
    pool_address: str,
    current_ratio: Decimal,
    target_ratio: Decimal,
    threshold: Decimal,
    max_price_impact_pct: Decimal = DEFAULT_MAX_PRICE_IMPACT_PCT,
) -> QuickRebalanceEstimate:
    validate_target_ratio(target_ratio)
    is_needed = needs_rebalancing(current_ratio, target_ratio, threshold)
    impact = Decimal("0")
    if current_ratio > 0:
        impact = abs(current_ratio - target_ratio) / current_ratio * 100
    return QuickRebalanceEstimate(
        pool_address=pool_address,
        current_ratio=current_ratio,
        target_ratio=target_ratio,
        is_rebalance_needed=is_needed,
        estimated_impact=impact,
        can_rebalance=is_needed and impact < max_price_impact_pct,
    )
