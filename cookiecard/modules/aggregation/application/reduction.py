from __future__ import annotations

from typing import Callable, Sequence

from cookiecard.modules.aggregation.domain.models import Number


def _average(values: Sequence[Number]) -> float:
    return sum(values) / len(values)


_REDUCERS: dict[str, Callable[[Sequence[Number]], Number]] = {
    "sum": sum,
    "average": _average,
    "count": len,
    "min": min,
    "max": max,
}


def is_supported_aggregation(kind: str | None) -> bool:
    return kind in _REDUCERS


def reduce_values(values: Sequence[Number], kind: str) -> Number:
    """
    Reduce extracted values with the requested aggregation.

    An empty sequence gives 0 for every kind, and an unrecognized kind
    gives 0 rather than an error.
    """
    reducer = _REDUCERS.get(kind)
    if reducer is None or not values:
        return 0
    return reducer(values)
