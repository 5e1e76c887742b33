from __future__ import annotations

import uuid

from sqlalchemy.orm import Session

from cookiecard.models import User, Widget
from cookiecard.schemas import WidgetForm


def list_user_widgets(db: Session, user_id: str) -> list[Widget]:
    return db.query(Widget).filter(Widget.user_id == user_id).order_by(Widget.created_at).all()


def get_user_widget(db: Session, widget_id: str, user_id: str) -> Widget | None:
    return db.query(Widget).filter(Widget.id == widget_id, Widget.user_id == user_id).first()


def get_public_widget(db: Session, widget_id: str) -> Widget | None:
    return db.query(Widget).filter(Widget.id == widget_id).first()


def _apply_form(widget: Widget, form: WidgetForm) -> None:
    widget.title = form.title
    widget.icon = form.icon
    widget.prefix = form.prefix
    widget.subtext = form.subtext
    widget.db_id = form.db_id
    widget.property = form.property_name
    widget.manual_value = form.manual_value
    widget.calculation = form.calculation


def create_widget(db: Session, user_id: str, form: WidgetForm) -> Widget:
    widget = Widget(id=str(uuid.uuid4()), user_id=user_id)
    _apply_form(widget, form)
    db.add(widget)
    db.commit()
    db.refresh(widget)
    return widget


def update_widget(db: Session, widget_id: str, user_id: str, form: WidgetForm) -> Widget | None:
    widget = get_user_widget(db, widget_id, user_id)
    if widget is None:
        return None
    _apply_form(widget, form)
    db.commit()
    db.refresh(widget)
    return widget


def delete_widget(db: Session, widget_id: str, user_id: str) -> bool:
    widget = get_user_widget(db, widget_id, user_id)
    if widget is None:
        return False
    db.delete(widget)
    db.commit()
    return True


def upsert_user(
    db: Session,
    *,
    user_id: str,
    encrypted_token: str,
    workspace_name: str | None,
    bot_id: str | None,
) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        user = User(id=user_id, access_token=encrypted_token, workspace_name=workspace_name, bot_id=bot_id)
        db.add(user)
    else:
        # bot_id is kept from the first connection.
        user.access_token = encrypted_token
        user.workspace_name = workspace_name
    db.commit()
    db.refresh(user)
    return user
