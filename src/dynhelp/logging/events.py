"""Help event emission and run log setup."""

from __future__ import annotations

import itertools
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from ..constants import APP_NAME, DATETIME_FORMAT_FILENAME, LOG_FILE_EXTENSION
from ..path_utils import map_path
from .formatter import StructuredTextFormatter
from .schema import LOG_PATH_FIELDS

_JSON_SCALARS = (str, int, float, bool)


def _field_value(key: str, value: Any) -> Any:
    """JSON-ready value for one event field.

    Path fields are shown absolute when they map cleanly (``~``, ``@``);
    anything that is not a JSON scalar (paths, enums) is logged as text.
    """
    if value is None:
        return None
    if key in LOG_PATH_FIELDS and isinstance(value, str) and value.strip():
        try:
            return map_path(value.strip())
        except ValueError:
            return value
    if isinstance(value, _JSON_SCALARS):
        return value
    return str(value)


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Log *event* as one compact JSON object.

    Keyword fields become payload keys; the formatter renders them later.
    """
    payload: dict[str, Any] = {
        "ts": datetime.now().astimezone().isoformat(),
        "event": event,
    }
    payload.update((key, _field_value(key, value)) for key, value in fields.items())
    logging.log(level, json.dumps(payload, ensure_ascii=False, separators=(",", ":")))


def build_run_log_path(logs_dir: str) -> str:
    """Return a new log file path for this run, ``dynhelp_<time>[_N].log``."""
    directory = Path(logs_dir)
    directory.mkdir(parents=True, exist_ok=True)

    stem = f"{APP_NAME}_{datetime.now().strftime(DATETIME_FORMAT_FILENAME)}"
    names = itertools.chain([stem], (f"{stem}_{n}" for n in itertools.count(1)))
    candidates = (directory / f"{name}{LOG_FILE_EXTENSION}" for name in names)
    return str(next(path for path in candidates if not path.exists()))


def setup_logging(log_file: Optional[str] = None) -> None:
    """Send help events to *log_file*, or silence logging altogether.

    The terminal belongs to the line editor while the shell runs, so there is
    never a console handler.
    """
    if not log_file:
        logging.disable(logging.CRITICAL)
        return

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(StructuredTextFormatter())
    logging.disable(logging.NOTSET)
    logging.basicConfig(level=logging.INFO, handlers=[handler], force=True)
