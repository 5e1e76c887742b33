from __future__ import annotations

from typing import Any, Protocol


class SourceGatewayPort(Protocol):
    async def retrieve_database(self, *, token: str, database_id: str) -> dict[str, Any]:
        raise NotImplementedError

    async def query_data_source(
        self,
        *,
        token: str,
        data_source_id: str,
        page_size: int,
        start_cursor: str | None = None,
    ) -> dict[str, Any]:
        raise NotImplementedError
