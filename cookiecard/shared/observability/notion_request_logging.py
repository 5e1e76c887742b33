import logging
from typing import Any

from cookiecard.shared.infrastructure.settings import get_settings

logger = logging.getLogger("uvicorn.error")


def _redact_path(path: str) -> str:
    if len(path) > 200:
        return path[:200] + "...(truncated)"
    return path


def log_notion_request(
    *,
    method: str,
    path: str,
    status_code: int | None,
    duration_ms: int,
    context: str,
    error: str | None = None,
) -> None:
    """
    Emits observability logs for calls sent to the Notion API.
    Controlled via LOG_NOTION_REQUESTS. Tokens are never logged.
    """
    if not get_settings().log_notion_requests:
        return

    payload: dict[str, Any] = {
        "context": context,
        "method": method,
        "path": _redact_path(path),
        "status_code": status_code,
        "duration_ms": duration_ms,
    }
    if error is not None:
        payload["error"] = error

    logger.info("notion.request | %s", payload)
