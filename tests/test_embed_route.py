import pytest
from fastapi.testclient import TestClient

from conftest import FakeGateway, notion_error, number_page
from cookiecard.api import dependencies
from cookiecard.modules.aggregation import ValueResolver
from cookiecard.shared.infrastructure.settings import Settings
from main import app


@pytest.fixture
def gateway(client: TestClient) -> FakeGateway:
    fake = FakeGateway(metadata={}, queries={"db-1": {"results": [number_page("Revenue", 1200), number_page("Revenue", 300)]}})
    resolver = ValueResolver(gateway=fake, settings=Settings(environment="test"))
    app.dependency_overrides[dependencies.get_value_resolver] = lambda: resolver
    return fake


def test_embed_renders_live_aggregate(client: TestClient, gateway: FakeGateway, make_widget) -> None:
    make_widget(db_id="db-1", property="Revenue", calculation="sum", manual_value="7")

    response = client.get("/embed/widget-1")

    assert response.status_code == 200
    assert '<div class="value">$1,500</div>' in response.text
    assert 'http-equiv="refresh" content="300"' in response.text
    assert gateway.metadata_calls == ["db-1"]


def test_embed_uses_manual_value_without_source(client: TestClient, gateway: FakeGateway, make_widget) -> None:
    make_widget(manual_value="2500.5")

    response = client.get("/embed/widget-1")

    assert '<div class="value">$2,500.50</div>' in response.text
    assert gateway.metadata_calls == []


def test_embed_falls_back_to_manual_value_when_unavailable(
    client: TestClient, gateway: FakeGateway, make_widget
) -> None:
    gateway.metadata = notion_error(401)
    make_widget(db_id="db-1", property="Revenue", manual_value="99")

    response = client.get("/embed/widget-1")

    assert response.status_code == 200
    assert '<div class="value">$99</div>' in response.text


def test_embed_shows_zero_when_source_has_no_values(client: TestClient, gateway: FakeGateway, make_widget) -> None:
    gateway.queries = {"db-1": {"results": []}}
    make_widget(db_id="db-1", property="Revenue", manual_value="99")

    response = client.get("/embed/widget-1")

    assert '<div class="value">$0</div>' in response.text


def test_embed_escapes_widget_text(client: TestClient, gateway: FakeGateway, make_widget) -> None:
    make_widget(title="<script>alert(1)</script>", prefix=None, manual_value="<b>x</b>")

    response = client.get("/embed/widget-1")

    assert "<script>alert(1)</script>" not in response.text
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in response.text
    assert "&lt;b&gt;x&lt;/b&gt;" in response.text


def test_embed_unknown_widget(client: TestClient, gateway: FakeGateway) -> None:
    response = client.get("/embed/missing")

    assert response.status_code == 404
    assert response.text == "Widget not found"


def test_embed_is_public(client: TestClient, gateway: FakeGateway, make_widget) -> None:
    make_widget()
    client.cookies.clear()

    response = client.get("/embed/widget-1", follow_redirects=False)

    assert response.status_code == 200
