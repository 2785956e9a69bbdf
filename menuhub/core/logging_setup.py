"""One JSON object per log line, tagged with the current request's context."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import asdict
from datetime import datetime, timezone

from menuhub.core.request_context import current_log_context

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# chave=valor cujo valor nunca vai para o log
_MASKED_KEYS = ("password", "secret", "session", "token")
_MASKS = (
    re.compile(r"\b((?:%s)\s*[:=]\s*)([^\s\",}]+)" % "|".join(_MASKED_KEYS), re.IGNORECASE),
    re.compile(r"(bearer\s+)([A-Za-z0-9._~+/=-]+)", re.IGNORECASE),
    re.compile(r"(data:image/[a-z+.-]+;base64,)([A-Za-z0-9+/=]{16,})", re.IGNORECASE),
)

# Atributos passados via ``extra=`` pelos middlewares.
_RECORD_EXTRAS = ("endpoint", "method", "status_code", "duration_ms", "hostname")
_LIBRARY_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def mask_secrets(text: str) -> str:
    for pattern in _MASKS:
        text = pattern.sub(r"\1***", text)
    return text


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
        }
        # Atributo explícito no record tem prioridade sobre o contexto da requisição.
        for key, bound in asdict(current_log_context()).items():
            payload[key] = getattr(record, key, None) or bound
        payload["message"] = mask_secrets(record.getMessage())
        payload.update(
            (key, getattr(record, key)) for key in _RECORD_EXTRAS if getattr(record, key, None) is not None
        )
        if record.exc_info:
            payload["exc_info"] = mask_secrets(self.formatException(record.exc_info))
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str | None = None) -> None:
    level = level or LOG_LEVEL
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(level)
    for name in _LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(level)
