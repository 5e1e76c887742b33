import logging

from cookiecard.shared.infrastructure.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging() -> None:
    settings = get_settings()
    level = getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("cookiecard").setLevel(level)
    # httpx logs every request line at INFO, including the URL.
    logging.getLogger("httpx").setLevel(logging.WARNING)
