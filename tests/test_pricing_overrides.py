from __future__ import annotations

from decimal import Decimal

from hues_dex.infrastructure.clients.pricing import PriceOverrides


def test_flat_overrides_match_address_case_insensitively():
    overrides = PriceOverrides({"0xabc": 2.5})
    assert overrides.get_price(token_address="0xABC", symbol="RIF") == Decimal("2.5")


def test_symbol_is_used_when_address_is_missing():
    overrides = PriceOverrides({"rbtc": 65000})
    assert overrides.get_price(token_address="0xdef", symbol="RBTC") == Decimal("65000")


def test_network_bucket_wins_over_default():
    overrides = PriceOverrides(
        {"31": {"rif": "0.1"}, "default": {"rif": "0.5", "doc": "1"}},
        network="31",
    )
    assert overrides.get_price(token_address="0x1", symbol="RIF") == Decimal("0.1")
    assert overrides.get_price(token_address="0x2", symbol="DOC") == Decimal("1")


def test_unknown_token_falls_back_to_one():
    overrides = PriceOverrides({})
    assert overrides.get_price(token_address="0x1", symbol="XYZ") == Decimal("1")
