from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from cookiecard.api.dependencies import get_notion_client, get_vault
from cookiecard.modules.auth.application.security import create_session_token
from cookiecard.modules.notion.client import NotionClient, NotionRequestError
from cookiecard.modules.security import SecretsVaultPort
from cookiecard.modules.widgets.application.repository import upsert_user
from cookiecard.rendering import render_login_page
from cookiecard.shared.infrastructure.database import get_db
from cookiecard.shared.infrastructure.settings import get_settings

router = APIRouter(tags=["auth"])
logger = logging.getLogger("uvicorn.error")


def _owner_user_id(payload: dict[str, Any]) -> str | None:
    owner = payload.get("owner")
    user = owner.get("user") if isinstance(owner, dict) else None
    user_id = user.get("id") if isinstance(user, dict) else None
    return user_id if isinstance(user_id, str) and user_id else None


@router.get("/login", response_class=HTMLResponse)
async def login_page() -> HTMLResponse:
    return HTMLResponse(render_login_page())


@router.get("/auth/notion")
async def start_oauth(client: NotionClient = Depends(get_notion_client)) -> RedirectResponse:
    return RedirectResponse(client.authorize_url())


@router.get("/auth/notion/callback")
async def oauth_callback(
    code: str | None = None,
    db: Session = Depends(get_db),
    client: NotionClient = Depends(get_notion_client),
    vault: SecretsVaultPort = Depends(get_vault),
):
    if not code:
        return HTMLResponse("Error: No code", status_code=400)

    try:
        payload = await client.exchange_code(code=code)
    except NotionRequestError as exc:
        logger.warning("auth.oauth_exchange_failed | %s", {"code": exc.code, "upstream_status": exc.upstream_status})
        return HTMLResponse("Error logging in.", status_code=400)

    access_token = payload.get("access_token")
    user_id = _owner_user_id(payload)
    if not isinstance(access_token, str) or not access_token or user_id is None:
        logger.warning("auth.oauth_payload_invalid | %s", {"has_token": bool(access_token), "has_owner": user_id is not None})
        return HTMLResponse("Error logging in.", status_code=400)

    upsert_user(
        db,
        user_id=user_id,
        encrypted_token=vault.encrypt(access_token),
        workspace_name=payload.get("workspace_name") or "My Workspace",
        bot_id=payload.get("bot_id"),
    )
    logger.info("auth.connected | %s", {"user_id": user_id})

    settings = get_settings()
    response = RedirectResponse("/", status_code=303)
    response.set_cookie(
        settings.session_cookie_name,
        create_session_token(user_id),
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    return response


@router.get("/logout")
async def logout() -> RedirectResponse:
    response = RedirectResponse("/login", status_code=303)
    response.delete_cookie(get_settings().session_cookie_name)
    return response
