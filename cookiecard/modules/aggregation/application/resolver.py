from __future__ import annotations

import asyncio
import logging
from time import perf_counter
from typing import Any

from cookiecard.modules.aggregation.application.extraction import extract_values
from cookiecard.modules.aggregation.application.reduction import is_supported_aggregation, reduce_values
from cookiecard.modules.aggregation.domain.models import (
    DEFAULT_AGGREGATION,
    AggregationResult,
    Number,
    Resolution,
    SourceConfig,
    SubSource,
    SubSourceAttempt,
)
from cookiecard.modules.aggregation.domain.ports import SourceGatewayPort
from cookiecard.modules.notion.client import NotionClient, NotionRequestError
from cookiecard.shared.infrastructure.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class ValueResolver:
    """
    Resolves a widget source into one aggregated number.

    A source id is expanded through a metadata lookup into one or more
    data sources, each data source is queried independently, numeric
    property values are extracted from the returned pages and reduced
    with the requested aggregation.

    Failure has two tiers. A failed metadata lookup makes the whole call
    UNAVAILABLE. A failed data-source query is logged and contributes no
    values, and the remaining data sources are still aggregated.

    By default only the first result page of each data source is read
    (``notion_page_size`` rows); set ``notion_follow_pagination`` to walk
    ``next_cursor`` up to ``notion_max_pages`` pages. A data source whose
    later page fails contributes nothing, including pages already read.
    """

    def __init__(self, *, gateway: SourceGatewayPort | None = None, settings: Settings | None = None) -> None:
        self._gateway = gateway
        self._settings = settings or get_settings()

    async def resolve(
        self,
        credential: str | None,
        source_id: str,
        property_name: str | None = None,
        aggregation_kind: str | None = None,
    ) -> AggregationResult:
        resolution = await self.resolve_detailed(credential, source_id, property_name, aggregation_kind)
        return resolution.value

    async def resolve_config(self, credential: str | None, config: SourceConfig) -> AggregationResult:
        return await self.resolve(credential, config.source_id, config.property_name, config.aggregation_kind)

    async def resolve_detailed(
        self,
        credential: str | None,
        source_id: str,
        property_name: str | None = None,
        aggregation_kind: str | None = None,
    ) -> Resolution:
        if not credential:
            logger.info("aggregation.credential_missing | %s", {"source_id": source_id})
            return Resolution.unavailable("credential_missing")

        config = SourceConfig(
            source_id=source_id,
            property_name=property_name or self._settings.default_property_name,
            aggregation_kind=aggregation_kind or DEFAULT_AGGREGATION,
        )
        if not is_supported_aggregation(config.aggregation_kind):
            logger.warning(
                "aggregation.unknown_kind | %s",
                {"source_id": source_id, "aggregation_kind": config.aggregation_kind},
            )

        started = perf_counter()
        try:
            if self._gateway is not None:
                resolution = await self._resolve(self._gateway, credential, config)
            else:
                async with NotionClient(settings=self._settings) as gateway:
                    resolution = await self._resolve(gateway, credential, config)
        except Exception:
            logger.exception("aggregation.internal_error | %s", {"source_id": source_id})
            return Resolution.unavailable("internal_error")

        logger.info(
            "aggregation.resolved | %s",
            {
                "source_id": source_id,
                "property_name": config.property_name,
                "aggregation_kind": config.aggregation_kind,
                "available": resolution.available,
                "reason": resolution.reason,
                "sub_sources": len(resolution.attempts),
                "failed_sub_sources": len(resolution.failed_sub_sources),
                "duration_ms": int((perf_counter() - started) * 1000),
            },
        )
        return resolution

    async def _resolve(self, gateway: SourceGatewayPort, credential: str, config: SourceConfig) -> Resolution:
        try:
            sub_sources = await self._expand_sources(gateway, credential, config.source_id)
        except NotionRequestError as exc:
            logger.warning(
                "aggregation.metadata_failed | %s",
                {
                    "source_id": config.source_id,
                    "code": exc.code,
                    "upstream_status": exc.upstream_status,
                    "message": exc.message,
                },
            )
            return Resolution.unavailable("metadata_failure")

        # Metadata must succeed before any query; queries are independent of each other.
        attempts = await asyncio.gather(
            *(self._query_sub_source(gateway, credential, sub_source, config.property_name) for sub_source in sub_sources)
        )

        values: list[Number] = []
        for attempt in attempts:
            values.extend(attempt.values)

        return Resolution(value=reduce_values(values, config.aggregation_kind), attempts=list(attempts))

    async def _expand_sources(self, gateway: SourceGatewayPort, credential: str, source_id: str) -> list[SubSource]:
        metadata = await gateway.retrieve_database(token=credential, database_id=source_id)
        if self._settings.notion_query_endpoint == "databases":
            # Legacy queries address the database itself, not its data sources.
            return [SubSource(id=source_id)]
        listed = metadata.get("data_sources")
        sub_sources: list[SubSource] = []
        if isinstance(listed, list):
            for item in listed:
                if isinstance(item, dict) and isinstance(item.get("id"), str) and item["id"]:
                    sub_sources.append(SubSource(id=item["id"]))
        return sub_sources or [SubSource(id=source_id)]

    async def _query_sub_source(
        self,
        gateway: SourceGatewayPort,
        credential: str,
        sub_source: SubSource,
        property_name: str,
    ) -> SubSourceAttempt:
        attempt = SubSourceAttempt(sub_source=sub_source)
        cursor: str | None = None
        try:
            while True:
                payload = await gateway.query_data_source(
                    token=credential,
                    data_source_id=sub_source.id,
                    page_size=self._settings.notion_page_size,
                    start_cursor=cursor,
                )
                results = payload.get("results")
                if not isinstance(results, list):
                    raise NotionRequestError(
                        status_code=502,
                        code="notion_invalid_response",
                        message="Query response has no results list",
                    )
                attempt.pages_read += 1
                attempt.rows_seen += len(results)
                attempt.values.extend(extract_values(results, property_name))

                cursor = _next_cursor(payload)
                if not self._settings.notion_follow_pagination or cursor is None:
                    break
                if attempt.pages_read >= self._settings.notion_max_pages:
                    logger.warning(
                        "aggregation.page_limit_reached | %s",
                        {"sub_source_id": sub_source.id, "pages_read": attempt.pages_read},
                    )
                    break
        except NotionRequestError as exc:
            logger.warning(
                "aggregation.sub_source_failed | %s",
                {
                    "sub_source_id": sub_source.id,
                    "code": exc.code,
                    "upstream_status": exc.upstream_status,
                    "message": exc.message,
                },
            )
            return SubSourceAttempt(
                sub_source=sub_source,
                error_code=exc.code,
                error_message=exc.message,
                pages_read=attempt.pages_read,
                rows_seen=attempt.rows_seen,
            )
        except Exception:
            logger.exception("aggregation.sub_source_error | %s", {"sub_source_id": sub_source.id})
            return SubSourceAttempt(
                sub_source=sub_source,
                error_code="internal_error",
                error_message="Unexpected error while querying data source",
                pages_read=attempt.pages_read,
                rows_seen=attempt.rows_seen,
            )
        return attempt


def _next_cursor(payload: dict[str, Any]) -> str | None:
    if not payload.get("has_more"):
        return None
    cursor = payload.get("next_cursor")
    return cursor if isinstance(cursor, str) and cursor else None


async def resolve(
    credential: str | None,
    source_id: str,
    property_name: str | None = None,
    aggregation_kind: str | None = None,
) -> AggregationResult:
    return await ValueResolver().resolve(credential, source_id, property_name, aggregation_kind)
