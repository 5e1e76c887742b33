from cookiecard.modules.aggregation.application.extraction import extract_values, parse_property, property_number
from cookiecard.modules.aggregation.application.reduction import reduce_values
from cookiecard.modules.aggregation.application.resolver import ValueResolver, resolve
from cookiecard.modules.aggregation.domain.models import (
    AGGREGATION_KINDS,
    UNAVAILABLE,
    AggregationResult,
    Resolution,
    SourceConfig,
    SubSourceAttempt,
    Unavailable,
)

__all__ = [
    "AGGREGATION_KINDS",
    "AggregationResult",
    "Resolution",
    "SourceConfig",
    "SubSourceAttempt",
    "UNAVAILABLE",
    "Unavailable",
    "ValueResolver",
    "extract_values",
    "parse_property",
    "property_number",
    "reduce_values",
    "resolve",
]
