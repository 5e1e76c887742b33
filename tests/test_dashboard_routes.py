from typing import Any

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from cookiecard.api import dependencies
from cookiecard.models import User, Widget
from cookiecard.modules.notion.client import NotionRequestError
from cookiecard.schemas import DatabaseSummary
from main import app


class _FakeNotionClient:
    def __init__(self, *, token_payload: dict[str, Any] | Exception | None = None) -> None:
        self.token_payload = token_payload or {}
        self.tokens: list[str] = []

    def authorize_url(self) -> str:
        return "https://api.notion.com/v1/oauth/authorize?client_id=test"

    async def exchange_code(self, *, code: str) -> dict[str, Any]:
        _ = code
        if isinstance(self.token_payload, Exception):
            raise self.token_payload
        return self.token_payload

    async def search_data_sources(self, *, token: str) -> list[dict[str, Any]]:
        self.tokens.append(token)
        return [{"id": "ds-1", "parent": {"database_id": "db-1"}, "title": [{"plain_text": "Sales"}]}]

    async def retrieve_database(self, *, token: str, database_id: str) -> dict[str, Any]:
        self.tokens.append(token)
        if database_id != "db-1":
            raise NotionRequestError(status_code=502, code="notion_error", message="missing", upstream_status=404)
        return {"properties": {"Revenue": {}, "Name": {}}}


def _form(**overrides: str) -> dict[str, str]:
    data = {
        "title": "Revenue",
        "icon": "dollar-sign",
        "prefix": "$",
        "subtext": "vs last month",
        "dbId": "db-1",
        "property": "Revenue",
        "manualValue": "",
        "calculation": "average",
    }
    data.update(overrides)
    return data


def test_dashboard_requires_login(client: TestClient) -> None:
    response = client.get("/", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"


def test_invalid_session_cookie_redirects_to_login(client: TestClient, owner: User) -> None:
    client.cookies.set("session", "not-a-jwt")

    response = client.get("/", follow_redirects=False)

    assert response.status_code == 303


def test_login_page_links_to_oauth(client: TestClient) -> None:
    response = client.get("/login")

    assert response.status_code == 200
    assert 'href="/auth/notion"' in response.text


def test_add_widget_persists_defaults(logged_in: TestClient, db: Session) -> None:
    response = logged_in.post("/add", data=_form(dbId="", property="", calculation=""), follow_redirects=False)

    assert response.status_code == 303
    widget = db.query(Widget).one()
    assert widget.user_id == "user-1"
    assert widget.db_id is None
    assert widget.property is None
    assert widget.manual_value == "0"
    assert widget.calculation == "sum"
    assert len(widget.id) == 36


def test_dashboard_lists_widgets_with_embed_url(logged_in: TestClient, make_widget) -> None:
    make_widget(db_id="db-1", calculation="max")

    response = logged_in.get("/")

    assert response.status_code == 200
    assert "http://testserver/embed/widget-1" in response.text
    assert "Live Data" in response.text
    assert "Max" in response.text


def test_dashboard_empty_state(logged_in: TestClient) -> None:
    response = logged_in.get("/")

    assert "No widgets yet" in response.text


def test_update_widget(logged_in: TestClient, make_widget, db: Session) -> None:
    make_widget()

    response = logged_in.post("/update", data={"id": "widget-1", **_form(manualValue="15")}, follow_redirects=False)

    assert response.status_code == 303
    widget = db.query(Widget).filter(Widget.id == "widget-1").one()
    db.refresh(widget)
    assert widget.db_id == "db-1"
    assert widget.property == "Revenue"
    assert widget.calculation == "average"
    assert widget.manual_value == "15"


def test_edit_page_preselects_calculation(logged_in: TestClient, make_widget) -> None:
    make_widget(calculation="min", db_id="db-9")

    response = logged_in.get("/edit/widget-1")

    assert '<option value="min" selected>Min</option>' in response.text
    assert 'data-selected="db-9"' in response.text


def test_cannot_touch_other_users_widgets(logged_in: TestClient, db: Session) -> None:
    db.add(User(id="user-2", access_token="x"))
    db.add(Widget(id="foreign", user_id="user-2", title="T", icon="i", subtext="s", manual_value="1", calculation="sum"))
    db.commit()

    assert logged_in.get("/edit/foreign").text == "Widget not found."
    logged_in.post("/update", data={"id": "foreign", **_form(title="Hijacked")}, follow_redirects=False)
    logged_in.post("/delete", data={"id": "foreign"}, follow_redirects=False)

    widget = db.query(Widget).filter(Widget.id == "foreign").one()
    db.refresh(widget)
    assert widget.title == "T"


def test_delete_widget(logged_in: TestClient, make_widget, db: Session) -> None:
    make_widget()

    response = logged_in.post("/delete", data={"id": "widget-1"}, follow_redirects=False)

    assert response.status_code == 303
    db.expire_all()
    assert db.query(Widget).count() == 0


def test_oauth_callback_stores_encrypted_token_and_sets_session(client: TestClient, db: Session, vault) -> None:
    fake = _FakeNotionClient(
        token_payload={
            "access_token": "ntn_secret",
            "bot_id": "bot-9",
            "workspace_name": None,
            "owner": {"type": "user", "user": {"id": "user-9"}},
        }
    )
    app.dependency_overrides[dependencies.get_notion_client] = lambda: fake

    response = client.get("/auth/notion/callback?code=abc", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/"
    assert "session" in response.cookies
    user = db.query(User).filter(User.id == "user-9").one()
    assert user.access_token != "ntn_secret"
    assert vault.decrypt(user.access_token) == "ntn_secret"
    assert user.workspace_name == "My Workspace"
    assert client.get("/", follow_redirects=False).status_code == 200


def test_oauth_callback_without_code(client: TestClient) -> None:
    response = client.get("/auth/notion/callback")

    assert response.text == "Error: No code"


def test_oauth_callback_exchange_failure(client: TestClient) -> None:
    fake = _FakeNotionClient(
        token_payload=NotionRequestError(status_code=502, code="notion_error", message="bad code", upstream_status=400)
    )
    app.dependency_overrides[dependencies.get_notion_client] = lambda: fake

    response = client.get("/auth/notion/callback?code=bad")

    assert response.text == "Error logging in."


def test_start_oauth_redirects_to_notion(client: TestClient) -> None:
    app.dependency_overrides[dependencies.get_notion_client] = lambda: _FakeNotionClient()

    response = client.get("/auth/notion", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"].startswith("https://api.notion.com/v1/oauth/authorize")


def test_logout_clears_session(logged_in: TestClient) -> None:
    response = logged_in.get("/logout", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"


def test_api_databases_requires_session(client: TestClient) -> None:
    response = client.get("/api/databases")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "not_authenticated"


def test_api_databases_uses_decrypted_token(logged_in: TestClient) -> None:
    fake = _FakeNotionClient()
    app.dependency_overrides[dependencies.get_notion_client] = lambda: fake

    response = logged_in.get("/api/databases")

    assert response.status_code == 200
    assert response.json() == [DatabaseSummary(id="db-1", title="Sales", icon="📄").model_dump()]
    assert fake.tokens == ["secret-token"]


def test_api_properties(logged_in: TestClient) -> None:
    app.dependency_overrides[dependencies.get_notion_client] = lambda: _FakeNotionClient()

    response = logged_in.get("/api/properties", params={"dbId": "db-1"})

    assert response.status_code == 200
    assert response.json() == ["Name", "Revenue"]


def test_api_properties_surfaces_notion_failure(logged_in: TestClient) -> None:
    app.dependency_overrides[dependencies.get_notion_client] = lambda: _FakeNotionClient()

    response = logged_in.get("/api/properties", params={"dbId": "unknown"})

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "notion_error"


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}
