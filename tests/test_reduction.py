import pytest

from cookiecard.modules.aggregation import AGGREGATION_KINDS, reduce_values


@pytest.mark.parametrize("kind", AGGREGATION_KINDS)
def test_empty_values_reduce_to_zero(kind: str) -> None:
    assert reduce_values([], kind) == 0


def test_reductions_over_sample_values() -> None:
    values = [2, 4, 6]
    assert reduce_values(values, "sum") == 12
    assert reduce_values(values, "average") == 4
    assert reduce_values(values, "count") == 3
    assert reduce_values(values, "min") == 2
    assert reduce_values(values, "max") == 6


def test_average_uses_float_division() -> None:
    result = reduce_values([1, 2], "average")
    assert isinstance(result, float)
    assert result == 1.5


def test_min_max_handle_negative_and_float_values() -> None:
    values = [3.5, -1, 0]
    assert reduce_values(values, "min") == -1
    assert reduce_values(values, "max") == 3.5


@pytest.mark.parametrize("kind", ["median", "SUM", "", "avg"])
def test_unrecognized_kind_returns_zero(kind: str) -> None:
    assert reduce_values([1, 2, 3], kind) == 0
