from __future__ import annotations

import logging

from cookiecard.errors import CookieCardError
from cookiecard.models import User, Widget
from cookiecard.modules.aggregation.application.resolver import ValueResolver
from cookiecard.modules.aggregation.domain.models import UNAVAILABLE, Number
from cookiecard.modules.security.domain.ports import SecretsVaultPort

logger = logging.getLogger("uvicorn.error")


async def resolve_widget_value(
    *,
    widget: Widget,
    owner: User,
    resolver: ValueResolver,
    vault: SecretsVaultPort,
) -> Number | str:
    """
    Value shown on a widget card: the live aggregate when the widget has a
    source and it resolves, otherwise the stored manual value.
    """
    manual_value = widget.manual_value if widget.manual_value is not None else "0"
    if not widget.db_id:
        return manual_value

    credential: str | None
    try:
        credential = vault.decrypt(owner.access_token) if owner.access_token else None
    except CookieCardError as exc:
        logger.warning(
            "widgets.credential_unreadable | %s",
            {"widget_id": widget.id, "user_id": owner.id, "code": exc.code},
        )
        credential = None

    value = await resolver.resolve(credential, widget.db_id, widget.property, widget.calculation)
    if value is UNAVAILABLE:
        logger.info("widgets.embed_fallback | %s", {"widget_id": widget.id})
        return manual_value
    return value
