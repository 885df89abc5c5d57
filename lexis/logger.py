"""Structured JSON logger for detection outcomes.

Writes one JSON object per line, to ``DETECTION_LOG_PATH`` when configured
or to the console otherwise.  Raw request text is *never* logged (privacy
requirement); only its size and the detection result are.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

_logger: logging.Logger | None = None
_lock = threading.Lock()


def configure(log_path: str = "") -> logging.Logger:
    """Attach the JSON handler to the ``lexis.detections`` logger."""
    global _logger

    with _lock:
        _logger = _attach_handler(log_path)
        return _logger


def _attach_handler(log_path: str) -> logging.Logger:
    logger = logging.getLogger("lexis.detections")
    logger.setLevel(logging.INFO)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_path:
        path = Path(log_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(str(path), encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def _get_logger() -> logging.Logger:
    """Lazily fall back to a console logger when ``configure`` was not called."""
    global _logger

    if _logger is None:
        with _lock:
            # Requests run on a thread pool; only the first one attaches
            if _logger is None:
                _logger = _attach_handler("")
    return _logger


def log_detection(
    outcome: str,
    char_count: int,
    processed_chars: int,
    iso_code: str | None = None,
    language: str | None = None,
    confidence: float | None = None,
) -> None:
    """Append a structured JSON entry for one ``/detect`` call."""
    entry: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "outcome": outcome,
        "char_count": char_count,
        "processed_chars": processed_chars,
        "truncated": processed_chars < char_count,
        "iso_code": iso_code,
        "language": language,
        "confidence": round(confidence, 4) if confidence is not None else None,
    }
    _get_logger().info(json.dumps(entry, ensure_ascii=False))
