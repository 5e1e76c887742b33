from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, field_validator

from cookiecard.modules.aggregation.domain.models import DEFAULT_AGGREGATION


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class WidgetForm(BaseModel):
    """Fields posted by the dashboard create and edit forms."""

    title: str
    icon: str
    prefix: Optional[str] = None
    subtext: str
    db_id: Optional[str] = None
    property_name: Optional[str] = None
    manual_value: str = "0"
    calculation: str = DEFAULT_AGGREGATION

    @field_validator("title", "icon", "subtext")
    @classmethod
    def _strip_required(cls, value: str) -> str:
        return value.strip()

    @field_validator("prefix", "db_id", "property_name", mode="before")
    @classmethod
    def _normalize_optional(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)

    @field_validator("manual_value", mode="before")
    @classmethod
    def _default_manual_value(cls, value: Optional[str]) -> str:
        return _blank_to_none(value) or "0"

    @field_validator("calculation", mode="before")
    @classmethod
    def _default_calculation(cls, value: Optional[str]) -> str:
        return _blank_to_none(value) or DEFAULT_AGGREGATION


class DatabaseSummary(BaseModel):
    id: str
    title: str
    icon: str

