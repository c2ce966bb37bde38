from __future__ import annotations

from decimal import Decimal

import pytest

from crewledger.models import RateEntry
from crewledger.services.rates import RateResolver, as_resolver


def test_known_rate_resolves():
    resolver = RateResolver({"w1": 25, "w2": Decimal("31.50"), "w3": RateEntry(worker_id="w3", hourly_rate=40)})
    assert resolver.resolve("w1") == 25.0
    assert resolver.resolve("w2") == pytest.approx(31.5)
    assert resolver.resolve("w3") == 40.0
    assert len(resolver) == 3


@pytest.mark.parametrize("value", [None, -5, "abc", float("nan"), float("inf"), True])
def test_unusable_rates_resolve_to_zero(value):
    resolver = RateResolver({"w1": value})
    assert resolver.resolve("w1") == 0.0
    assert resolver.has_rate("w1") is False


def test_unknown_or_none_worker_is_zero():
    resolver = RateResolver({"w1": 25})
    assert resolver.resolve("nobody") == 0.0
    assert resolver.resolve(None) == 0.0
    assert resolver.has_rate(None) is False


def test_zero_rate_is_a_known_rate():
    resolver = RateResolver({"w1": 0})
    assert resolver.has_rate("w1") is True
    assert resolver.resolve("w1") == 0.0


def test_as_resolver_accepts_entry_iterables():
    resolver = as_resolver([RateEntry(worker_id="w1", hourly_rate="18.75")])
    assert resolver.resolve("w1") == pytest.approx(18.75)
    assert as_resolver(resolver) is resolver
    assert len(as_resolver(None)) == 0
