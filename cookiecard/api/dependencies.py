from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from cookiecard.errors import CookieCardError
from cookiecard.models import User
from cookiecard.modules.aggregation.application.resolver import ValueResolver
from cookiecard.modules.auth.application.security import decode_session_token
from cookiecard.modules.notion.client import NotionClient
from cookiecard.modules.security import SecretsVaultPort, get_secrets_vault
from cookiecard.shared.infrastructure.database import get_db
from cookiecard.shared.infrastructure.settings import get_settings


class LoginRequired(Exception):
    """Raised by page routes when no valid session is present."""


def _session_user(request: Request, db: Session) -> User | None:
    token = request.cookies.get(get_settings().session_cookie_name)
    if not token:
        return None
    user_id = decode_session_token(token)
    if user_id is None:
        return None
    return db.query(User).filter(User.id == user_id).first()


async def require_page_user(request: Request, db: Session = Depends(get_db)) -> User:
    user = _session_user(request, db)
    if user is None:
        raise LoginRequired()
    return user


async def require_api_user(request: Request, db: Session = Depends(get_db)) -> User:
    user = _session_user(request, db)
    if user is None:
        raise CookieCardError(status_code=401, code="not_authenticated", message="Login required")
    return user


def get_notion_client() -> NotionClient:
    return NotionClient()


def get_value_resolver() -> ValueResolver:
    return ValueResolver()


def get_vault() -> SecretsVaultPort:
    return get_secrets_vault()
