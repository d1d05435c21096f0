"""Logging helpers shared by the service, router and CLI."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional


def _serialize(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return obj.isoformat()
    return str(obj)


def structured_log(logger: logging.Logger, event: str, level: int = logging.INFO, **fields: Any) -> None:
    payload = {"timestamp": datetime.now(timezone.utc).isoformat(), "event": event}
    payload.update(fields)
    logger.log(level, json.dumps(payload, default=_serialize))


def key_preview(value: Optional[str]) -> str:
    """Return a truncated form of an API key that is safe to log."""
    if not value:
        return "None"
    return f"{value[:4]}...{value[-4:]}" if len(value) > 8 else "***"
