from __future__ import annotations

import math

from cookiecard.modules.aggregation.domain.models import Number


def _as_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str) and value.strip():
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def format_display_value(value: Number | str | None) -> str:
    """
    Render a widget value for the embed card.

    Numbers get thousands separators and two decimals, with a trailing
    ``.00`` dropped. Anything that does not parse as a number is shown as is.
    """
    number = _as_float(value)
    if number is None or math.isnan(number) or math.isinf(number):
        return "" if value is None else str(value)
    text = f"{number:,.2f}"
    if text.endswith(".00"):
        text = text[:-3]
    return text


def full_display(prefix: str | None, value: Number | str | None) -> str:
    return f"{prefix or ''}{format_display_value(value)}"
