"""Logging setup for the CartGuard API.

Records are emitted one JSON object per line. Context passed through
``extra=`` (listing, rule, evidence document, error code, request path)
is lifted to top-level keys so log queries can filter by listing or
document without parsing messages.

Setting ``log_format`` to ``text`` switches to a plain line format for
local runs.
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_KEYS = ("listing_id", "rule_id", "document_key", "error_code", "path")

_TEXT_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_context_of(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _context_of(record: logging.LogRecord) -> dict:
    return {
        key: getattr(record, key)
        for key in CONTEXT_KEYS
        if getattr(record, key, None) is not None
    }


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install a single stream handler on the root logger.

    Safe to call more than once: a handler installed by an earlier call is
    replaced rather than stacked, so repeated app startups in one process
    (tests, reloads) do not duplicate lines.
    """
    root = logging.getLogger()
    for existing in [h for h in root.handlers if getattr(h, "_cartguard", False)]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler._cartguard = True
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT)
    )
    root.addHandler(handler)
    level = level.upper()
    root.setLevel(level if level in _LEVELS else logging.INFO)
