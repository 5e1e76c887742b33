from cookiecard.modules.widgets.application.display import format_display_value, full_display
from cookiecard.modules.widgets.application.embed import resolve_widget_value

__all__ = ["format_display_value", "full_display", "resolve_widget_value"]
