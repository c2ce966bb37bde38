from __future__ import annotations

import math
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Optional, Union

from ..models import RateEntry

RateValue = Union[RateEntry, Decimal, float, int, None]
RateSource = Union["RateResolver", Mapping[str, RateValue], Iterable[RateEntry], None]


def _as_rate(value: RateValue) -> Optional[float]:
    if isinstance(value, RateEntry):
        value = value.hourly_rate
    if value is None or isinstance(value, bool):
        return None
    try:
        rate = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(rate) or rate < 0:
        return None
    return rate


class RateResolver:
    """Total lookup from worker id to hourly billing rate.

    Anything that cannot be resolved to a usable rate (unknown id, ``None``,
    negative or non-numeric value) resolves to ``0.0``.
    """

    def __init__(self, rates: Optional[Mapping[str, RateValue]] = None) -> None:
        self._rates: Dict[str, float] = {}
        for worker_id, value in (rates or {}).items():
            rate = _as_rate(value)
            if rate is not None:
                self._rates[str(worker_id)] = rate

    @classmethod
    def from_entries(cls, entries: Iterable[RateEntry]) -> "RateResolver":
        return cls({entry.worker_id: entry for entry in entries})

    def resolve(self, worker_id: Optional[str]) -> float:
        if worker_id is None:
            return 0.0
        return self._rates.get(str(worker_id), 0.0)

    def has_rate(self, worker_id: Optional[str]) -> bool:
        return worker_id is not None and str(worker_id) in self._rates

    def __len__(self) -> int:
        return len(self._rates)


def as_resolver(rates: RateSource) -> RateResolver:
    if isinstance(rates, RateResolver):
        return rates
    if rates is None:
        return RateResolver()
    if isinstance(rates, Mapping):
        return RateResolver(rates)
    return RateResolver.from_entries(rates)
