import json
import logging
import datetime

from app.config.settings import settings


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, event and its context."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            'timestamp': datetime.datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            **getattr(record, 'context', {}),
        }
        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            payload.setdefault('exc_type', type(exc).__name__)
            payload.setdefault('error', str(exc))
        return json.dumps(payload, default=str)


class StructuredLogger:
    """Event-style logger: ``app_logger.info("stories.page", returned=20)``."""

    def __init__(self, logger_name: str, level=logging.DEBUG, handler: logging.Handler = None):
        self.logger = logging.getLogger(logger_name)
        self.logger.setLevel(level)
        self.logger.propagate = False

        # uvicorn reloads import this module more than once
        if handler is not None or not self.logger.handlers:
            handler = handler or logging.StreamHandler()
            handler.setFormatter(JsonFormatter())
            self.logger.addHandler(handler)

    def _log(self, level: int, event: str, **context) -> None:
        exc = context.pop('exc_info', None)
        self.logger.log(
            level,
            event,
            exc_info=exc if isinstance(exc, BaseException) else None,
            extra={'context': context},
        )

    def info(self, event, **context):
        self._log(logging.INFO, event, **context)

    def warning(self, event, **context):
        self._log(logging.WARNING, event, **context)

    def error(self, event, **context):
        self._log(logging.ERROR, event, **context)

    def debug(self, event, **context):
        self._log(logging.DEBUG, event, **context)


app_logger = StructuredLogger('HackerFeedLogger', level=settings.LOG_LEVEL.upper())
