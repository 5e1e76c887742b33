from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from cookiecard.api.dependencies import get_value_resolver, get_vault
from cookiecard.models import User
from cookiecard.modules.aggregation.application.resolver import ValueResolver
from cookiecard.modules.security import SecretsVaultPort
from cookiecard.modules.widgets.application.display import full_display
from cookiecard.modules.widgets.application.embed import resolve_widget_value
from cookiecard.modules.widgets.application.repository import get_public_widget
from cookiecard.rendering import render_embed_page
from cookiecard.shared.infrastructure.database import get_db
from cookiecard.shared.infrastructure.settings import get_settings

router = APIRouter(tags=["embed"])


# Public endpoint: the widget id is the only key.
@router.get("/embed/{widget_id}", response_class=HTMLResponse)
async def embed_widget(
    widget_id: str,
    db: Session = Depends(get_db),
    resolver: ValueResolver = Depends(get_value_resolver),
    vault: SecretsVaultPort = Depends(get_vault),
) -> HTMLResponse:
    widget = get_public_widget(db, widget_id)
    if widget is None:
        return HTMLResponse("Widget not found", status_code=404)

    owner = db.query(User).filter(User.id == widget.user_id).first()
    if owner is None:
        return HTMLResponse("Owner not found", status_code=404)

    value = await resolve_widget_value(widget=widget, owner=owner, resolver=resolver, vault=vault)
    return HTMLResponse(
        render_embed_page(widget, full_display(widget.prefix, value), get_settings().embed_refresh_seconds)
    )
