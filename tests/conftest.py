import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from collections.abc import Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from cookiecard.api import dependencies
from cookiecard.models import User, Widget
from cookiecard.modules.auth.application.security import create_session_token
from cookiecard.modules.notion.client import NotionRequestError
from cookiecard.modules.security import FernetSecretsVaultAdapter
from cookiecard.shared.infrastructure.database import Base, get_db
from main import app


class FakeGateway:
    """In-memory stand-in for the Notion gateway used by the resolver."""

    def __init__(
        self,
        *,
        metadata: dict[str, Any] | Exception | None = None,
        queries: dict[str, Any] | None = None,
    ) -> None:
        self.metadata = metadata if metadata is not None else {}
        self.queries = queries or {}
        self.metadata_calls: list[str] = []
        self.query_calls: list[tuple[str, int, str | None]] = []

    async def retrieve_database(self, *, token: str, database_id: str) -> dict[str, Any]:
        _ = token
        self.metadata_calls.append(database_id)
        if isinstance(self.metadata, Exception):
            raise self.metadata
        return self.metadata

    async def query_data_source(
        self,
        *,
        token: str,
        data_source_id: str,
        page_size: int,
        start_cursor: str | None = None,
    ) -> dict[str, Any]:
        _ = token
        self.query_calls.append((data_source_id, page_size, start_cursor))
        response = self.queries.get(data_source_id, {"results": []})
        if isinstance(response, dict) and "pages" in response:
            response = response["pages"][start_cursor]
        if isinstance(response, Exception):
            raise response
        return response


def notion_error(status: int = 500) -> NotionRequestError:
    return NotionRequestError(status_code=502, code="notion_error", message="boom", upstream_status=status)


def number_page(name: str, value: Any) -> dict[str, Any]:
    return {"object": "page", "properties": {name: {"type": "number", "number": value}}}


@pytest.fixture
def vault() -> FernetSecretsVaultAdapter:
    return FernetSecretsVaultAdapter()


@pytest.fixture
def session_factory() -> Generator[sessionmaker, None, None]:
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory: sessionmaker) -> Generator[Session, None, None]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def owner(db: Session, vault: FernetSecretsVaultAdapter) -> User:
    user = User(id="user-1", access_token=vault.encrypt("secret-token"), workspace_name="Cookie HQ", bot_id="bot-1")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def make_widget(db: Session, owner: User):
    def _make(**overrides: Any) -> Widget:
        values: dict[str, Any] = {
            "id": "widget-1",
            "user_id": owner.id,
            "title": "Revenue",
            "icon": "dollar-sign",
            "prefix": "$",
            "subtext": "this month",
            "db_id": None,
            "property": None,
            "manual_value": "0",
            "calculation": "sum",
        }
        values.update(overrides)
        widget = Widget(**values)
        db.add(widget)
        db.commit()
        db.refresh(widget)
        return widget

    return _make


@pytest.fixture
def client(session_factory: sessionmaker, vault: FernetSecretsVaultAdapter) -> Generator[TestClient, None, None]:
    def _get_db() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[dependencies.get_vault] = lambda: vault
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def logged_in(client: TestClient, owner: User) -> TestClient:
    client.cookies.set("session", create_session_token(owner.id))
    return client
