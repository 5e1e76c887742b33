from __future__ import annotations

from typing import Any, Iterable

from cookiecard.modules.aggregation.domain.models import (
    FormulaProperty,
    Number,
    NumberProperty,
    OtherProperty,
    PropertyValue,
    RollupProperty,
)


def _as_number(value: Any) -> Number | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _nested(raw: dict[str, Any], key: str) -> dict[str, Any]:
    inner = raw.get(key)
    return inner if isinstance(inner, dict) else {}


def parse_property(raw: Any) -> PropertyValue:
    """Classify a raw page property into one of the shapes we aggregate."""
    if not isinstance(raw, dict):
        return OtherProperty(kind=None)

    kind = raw.get("type")
    if kind == "number":
        return NumberProperty(number=_as_number(raw.get("number")))
    if kind == "formula":
        inner = _nested(raw, "formula")
        return FormulaProperty(result_type=inner.get("type"), number=_as_number(inner.get("number")))
    if kind == "rollup":
        inner = _nested(raw, "rollup")
        return RollupProperty(result_type=inner.get("type"), number=_as_number(inner.get("number")))
    return OtherProperty(kind=kind if isinstance(kind, str) else None)


def property_number(value: PropertyValue) -> Number | None:
    if isinstance(value, NumberProperty):
        return value.number
    if isinstance(value, (FormulaProperty, RollupProperty)):
        return value.number if value.result_type == "number" else None
    return None


def extract_values(pages: Iterable[Any], property_name: str) -> list[Number]:
    """
    Pull the numeric value of ``property_name`` from each page, in page order.
    Pages without the property, null values and non-numeric kinds are skipped.
    """
    values: list[Number] = []
    for page in pages:
        if not isinstance(page, dict):
            continue
        properties = page.get("properties")
        if not isinstance(properties, dict) or property_name not in properties:
            continue
        number = property_number(parse_property(properties[property_name]))
        if number is not None:
            values.append(number)
    return values
