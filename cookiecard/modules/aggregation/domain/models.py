from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Literal, Union

AggregationKind = Literal["sum", "average", "count", "min", "max"]
AGGREGATION_KINDS: tuple[AggregationKind, ...] = ("sum", "average", "count", "min", "max")
DEFAULT_AGGREGATION: AggregationKind = "sum"

Number = Union[int, float]


class Unavailable(enum.Enum):
    """Resolution could not be attempted. Distinct from a computed zero."""

    UNAVAILABLE = "unavailable"

    def __repr__(self) -> str:
        return "UNAVAILABLE"


UNAVAILABLE = Unavailable.UNAVAILABLE

AggregationResult = Union[int, float, Unavailable]

UnavailableReason = Literal["credential_missing", "metadata_failure", "internal_error"]


@dataclass(frozen=True, slots=True)
class SourceConfig:
    source_id: str
    property_name: str
    aggregation_kind: str = DEFAULT_AGGREGATION


@dataclass(frozen=True, slots=True)
class SubSource:
    id: str


# Property values as returned on a page, one case per shape we read.


@dataclass(frozen=True, slots=True)
class NumberProperty:
    number: Number | None


@dataclass(frozen=True, slots=True)
class FormulaProperty:
    result_type: str | None
    number: Number | None


@dataclass(frozen=True, slots=True)
class RollupProperty:
    result_type: str | None
    number: Number | None


@dataclass(frozen=True, slots=True)
class OtherProperty:
    kind: str | None


PropertyValue = Union[NumberProperty, FormulaProperty, RollupProperty, OtherProperty]


@dataclass(slots=True)
class SubSourceAttempt:
    """Outcome of querying one sub-source. Failures carry no values."""

    sub_source: SubSource
    values: list[Number] = field(default_factory=list)
    error_code: str | None = None
    error_message: str | None = None
    pages_read: int = 0
    rows_seen: int = 0

    @property
    def ok(self) -> bool:
        return self.error_code is None


@dataclass(slots=True)
class Resolution:
    value: AggregationResult
    reason: UnavailableReason | None = None
    attempts: list[SubSourceAttempt] = field(default_factory=list)

    @property
    def available(self) -> bool:
        return self.value is not UNAVAILABLE

    @property
    def failed_sub_sources(self) -> list[str]:
        return [attempt.sub_source.id for attempt in self.attempts if not attempt.ok]

    @classmethod
    def unavailable(cls, reason: UnavailableReason, attempts: list[SubSourceAttempt] | None = None) -> "Resolution":
        return cls(value=UNAVAILABLE, reason=reason, attempts=list(attempts or []))
