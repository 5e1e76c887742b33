from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from cookiecard.api.dependencies import require_page_user
from cookiecard.models import User
from cookiecard.modules.widgets.application.repository import (
    create_widget,
    delete_widget,
    get_user_widget,
    list_user_widgets,
    update_widget,
)
from cookiecard.rendering import render_dashboard_page, render_edit_page
from cookiecard.schemas import WidgetForm
from cookiecard.shared.infrastructure.database import get_db

router = APIRouter(tags=["dashboard"])
logger = logging.getLogger("uvicorn.error")


def _base_url(request: Request) -> str:
    scheme = request.headers.get("x-forwarded-proto") or request.url.scheme
    host = request.headers.get("host") or request.url.netloc
    return f"{scheme}://{host}"


def _widget_form(
    title: str = Form(...),
    icon: str = Form(...),
    prefix: str = Form(default=""),
    subtext: str = Form(...),
    db_id: str = Form(default="", alias="dbId"),
    property_name: str = Form(default="", alias="property"),
    manual_value: str = Form(default="", alias="manualValue"),
    calculation: str = Form(default=""),
) -> WidgetForm:
    return WidgetForm(
        title=title,
        icon=icon,
        prefix=prefix,
        subtext=subtext,
        db_id=db_id,
        property_name=property_name,
        manual_value=manual_value,
        calculation=calculation,
    )


def _to_dashboard() -> RedirectResponse:
    return RedirectResponse("/", status_code=303)


@router.get("/", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_page_user),
) -> HTMLResponse:
    widgets = list_user_widgets(db, current_user.id)
    return HTMLResponse(render_dashboard_page(widgets, _base_url(request)))


@router.get("/edit/{widget_id}", response_class=HTMLResponse)
async def edit_widget_page(
    widget_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_page_user),
) -> HTMLResponse:
    widget = get_user_widget(db, widget_id, current_user.id)
    if widget is None:
        return HTMLResponse("Widget not found.", status_code=404)
    return HTMLResponse(render_edit_page(widget))


@router.post("/add")
async def add_widget(
    form: WidgetForm = Depends(_widget_form),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_page_user),
) -> RedirectResponse:
    widget = create_widget(db, current_user.id, form)
    logger.info("widgets.created | %s", {"widget_id": widget.id, "user_id": current_user.id, "live": bool(widget.db_id)})
    return _to_dashboard()


@router.post("/update")
async def update_widget_action(
    widget_id: str = Form(..., alias="id"),
    form: WidgetForm = Depends(_widget_form),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_page_user),
) -> RedirectResponse:
    widget = update_widget(db, widget_id, current_user.id, form)
    if widget is None:
        logger.info("widgets.update_missing | %s", {"widget_id": widget_id, "user_id": current_user.id})
    return _to_dashboard()


@router.post("/delete")
async def delete_widget_action(
    widget_id: str = Form(..., alias="id"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_page_user),
) -> RedirectResponse:
    delete_widget(db, widget_id, current_user.id)
    return _to_dashboard()
