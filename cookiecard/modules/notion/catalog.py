from __future__ import annotations

from typing import Any

from cookiecard.modules.notion.client import NotionClient
from cookiecard.schemas import DatabaseSummary

DEFAULT_TITLE = "Untitled Database"
DEFAULT_ICON = "📄"


def _plain_title(item: dict[str, Any]) -> str:
    title = item.get("title")
    if isinstance(title, list) and title and isinstance(title[0], dict):
        text = title[0].get("plain_text")
        if isinstance(text, str) and text:
            return text
    return DEFAULT_TITLE


def _emoji(item: dict[str, Any]) -> str:
    icon = item.get("icon")
    if isinstance(icon, dict) and isinstance(icon.get("emoji"), str) and icon["emoji"]:
        return icon["emoji"]
    return DEFAULT_ICON


def _database_id(item: dict[str, Any]) -> str | None:
    # Search returns data sources; widgets store the parent database id so the
    # metadata lookup can fan back out to every data source of that database.
    parent = item.get("parent")
    if isinstance(parent, dict) and isinstance(parent.get("database_id"), str) and parent["database_id"]:
        return parent["database_id"]
    item_id = item.get("id")
    return item_id if isinstance(item_id, str) and item_id else None


async def list_databases(client: NotionClient, *, token: str) -> list[DatabaseSummary]:
    summaries: list[DatabaseSummary] = []
    seen: set[str] = set()
    for item in await client.search_data_sources(token=token):
        database_id = _database_id(item)
        if database_id is None or database_id in seen:
            continue
        seen.add(database_id)
        summaries.append(DatabaseSummary(id=database_id, title=_plain_title(item), icon=_emoji(item)))
    return summaries


def _property_names(payload: dict[str, Any]) -> set[str]:
    properties = payload.get("properties")
    return set(properties) if isinstance(properties, dict) else set()


async def list_property_names(client: NotionClient, *, token: str, database_id: str) -> list[str]:
    metadata = await client.retrieve_database(token=token, database_id=database_id)
    names = _property_names(metadata)
    data_sources = metadata.get("data_sources")
    if isinstance(data_sources, list):
        for item in data_sources:
            if not isinstance(item, dict) or not isinstance(item.get("id"), str):
                continue
            data_source = await client.retrieve_data_source(token=token, data_source_id=item["id"])
            names |= _property_names(data_source)
    return sorted(names)
