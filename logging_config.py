"""structlog setup for the API process.

Request handlers log dotted event names (``mood.saved``, ``songs.provider_error``)
with keyword context. Owner emails and the YouTube key appear in that context
and in provider error payloads, so they are masked before rendering.
"""

import logging
import re
import sys
from typing import Any

import structlog

_API_KEY = re.compile(r"([?&]key=)[^&\s\"']+")
_EMAIL = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")


def _mask(value: Any) -> Any:
    if isinstance(value, str):
        return _EMAIL.sub("REDACTED@email", _API_KEY.sub(r"\1REDACTED", value))
    if isinstance(value, dict):
        return {k: _mask(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_mask(v) for v in value]
    return value


def redact(_, __, event_dict: dict) -> dict:
    return {k: _mask(v) for k, v in event_dict.items()}


def setup_logging(json_mode: bool = False, level: str = "INFO") -> None:
    """Route structlog and stdlib loggers (uvicorn, pymongo) to one stderr handler."""
    pre_chain = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        redact,
    ]

    if json_mode:
        render = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        render = [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *render],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
