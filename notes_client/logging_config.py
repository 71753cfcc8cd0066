import logging

from pythonjsonlogger.json import JsonFormatter

from .config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
APP_LOGGER = "notes_client"
HTTP_LOGGERS = ("urllib3", "requests")


def configure_logging(settings: Settings) -> logging.Logger:
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    handler = logging.StreamHandler()
    if settings.LOG_JSON:
        handler.setFormatter(JsonFormatter(fmt=LOG_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))

    # Streamlit owns the root logger, so only the client's own tree is configured.
    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(level)
    app_logger.handlers = [handler]
    app_logger.propagate = False

    # Connection chatter only when debugging the client itself.
    http_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    return app_logger
