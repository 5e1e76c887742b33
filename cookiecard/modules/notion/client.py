from __future__ import annotations

from time import perf_counter
from typing import Any
from urllib.parse import urlencode

import httpx

from cookiecard.errors import CookieCardError
from cookiecard.shared.infrastructure.settings import Settings, get_settings
from cookiecard.shared.observability.notion_request_logging import log_notion_request

NOTION_AUTHORIZE_URL = "https://api.notion.com/v1/oauth/authorize"


class NotionRequestError(CookieCardError):
    """Raised for any failed call to the Notion API. Never retried."""

    def __init__(self, *, status_code: int, code: str, message: str, upstream_status: int | None = None) -> None:
        super().__init__(status_code=status_code, code=code, message=message)
        self.upstream_status = upstream_status


class NotionClient:
    """
    Thin async gateway over the Notion REST API.

    Used as ``async with NotionClient() as client`` to share one connection
    pool across several calls; outside a context each call opens and closes
    its own client.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "NotionClient":
        self._client = self._build_client()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    def authorize_url(self) -> str:
        query = urlencode(
            {
                "client_id": self._settings.notion_client_id,
                "response_type": "code",
                "owner": "user",
                "redirect_uri": self._settings.notion_redirect_uri,
            }
        )
        return f"{NOTION_AUTHORIZE_URL}?{query}"

    async def retrieve_database(self, *, token: str, database_id: str) -> dict[str, Any]:
        return await self._request(
            method="GET",
            path=f"/databases/{database_id}",
            token=token,
            context="database.retrieve",
        )

    async def retrieve_data_source(self, *, token: str, data_source_id: str) -> dict[str, Any]:
        return await self._request(
            method="GET",
            path=f"/data_sources/{data_source_id}",
            token=token,
            context="data_source.retrieve",
        )

    async def query_data_source(
        self,
        *,
        token: str,
        data_source_id: str,
        page_size: int,
        start_cursor: str | None = None,
    ) -> dict[str, Any]:
        collection = "databases" if self._settings.notion_query_endpoint == "databases" else "data_sources"
        body: dict[str, Any] = {"page_size": page_size}
        if start_cursor:
            body["start_cursor"] = start_cursor
        return await self._request(
            method="POST",
            path=f"/{collection}/{data_source_id}/query",
            token=token,
            json_payload=body,
            context="data_source.query",
        )

    async def search_data_sources(self, *, token: str) -> list[dict[str, Any]]:
        payload = await self._request(
            method="POST",
            path="/search",
            token=token,
            json_payload={
                "filter": {"value": "data_source", "property": "object"},
                "sort": {"direction": "descending", "timestamp": "last_edited_time"},
            },
            context="search",
        )
        results = payload.get("results")
        return [item for item in results if isinstance(item, dict)] if isinstance(results, list) else []

    async def exchange_code(self, *, code: str) -> dict[str, Any]:
        return await self._request(
            method="POST",
            path="/oauth/token",
            json_payload={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._settings.notion_redirect_uri,
            },
            basic_auth=(self._settings.notion_client_id, self._settings.notion_client_secret),
            context="oauth.token",
        )

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._settings.notion_api_base_url,
            timeout=self._settings.notion_timeout_seconds,
            transport=self._transport,
        )

    def _headers(self, token: str | None) -> dict[str, str]:
        headers = {
            "Notion-Version": self._settings.notion_version,
            "Content-Type": "application/json",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self,
        *,
        method: str,
        path: str,
        context: str,
        token: str | None = None,
        json_payload: dict[str, Any] | None = None,
        basic_auth: tuple[str, str] | None = None,
    ) -> dict[str, Any]:
        started = perf_counter()
        try:
            if self._client is not None:
                response = await self._client.request(
                    method, path, json=json_payload, headers=self._headers(token), auth=basic_auth
                )
            else:
                async with self._build_client() as client:
                    response = await client.request(
                        method, path, json=json_payload, headers=self._headers(token), auth=basic_auth
                    )
        except httpx.TimeoutException as exc:
            log_notion_request(
                method=method,
                path=path,
                status_code=None,
                duration_ms=int((perf_counter() - started) * 1000),
                context=context,
                error="timeout",
            )
            raise NotionRequestError(status_code=504, code="notion_timeout", message="Notion request timed out") from exc
        except httpx.RequestError as exc:
            log_notion_request(
                method=method,
                path=path,
                status_code=None,
                duration_ms=int((perf_counter() - started) * 1000),
                context=context,
                error=type(exc).__name__,
            )
            raise NotionRequestError(
                status_code=503,
                code="notion_unavailable",
                message=f"Notion service unavailable: {exc}",
            ) from exc

        log_notion_request(
            method=method,
            path=path,
            status_code=response.status_code,
            duration_ms=int((perf_counter() - started) * 1000),
            context=context,
        )

        if response.status_code >= 400:
            raise NotionRequestError(
                status_code=502,
                code="notion_unauthorized" if response.status_code in {401, 403} else "notion_error",
                message=_error_message(response),
                upstream_status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise NotionRequestError(
                status_code=502,
                code="notion_invalid_response",
                message="Notion response was not valid JSON",
                upstream_status=response.status_code,
            ) from exc
        if not isinstance(payload, dict):
            raise NotionRequestError(
                status_code=502,
                code="notion_invalid_response",
                message="Notion response was not a JSON object",
                upstream_status=response.status_code,
            )
        return payload


def _error_message(response: httpx.Response) -> str:
    try:
        detail = response.json()
    except ValueError:
        detail = None
    if isinstance(detail, dict) and detail.get("message"):
        return f"Notion request failed ({response.status_code}): {detail['message']}"
    return f"Notion request failed ({response.status_code})"
