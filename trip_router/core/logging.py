from __future__ import annotations

import logging
import sys
from typing import Union

from .tracing import get_run_id

RUN_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | run_id=%(run_id)s | %(message)s"


class RunIdFilter(logging.Filter):
    """Stamp records with the aggregation run they were emitted from.

    A ``run_id`` passed explicitly through ``extra`` is left untouched.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "run_id"):
            record.run_id = get_run_id()
        return True


class RunLogHandler(logging.StreamHandler):
    def __init__(self, stream=None) -> None:
        super().__init__(stream or sys.stdout)
        self.setFormatter(logging.Formatter(RUN_LOG_FORMAT))
        self.addFilter(RunIdFilter())


def _resolve_level(level: Union[int, str, None]) -> Union[int, str]:
    if level is None:
        from .config import settings

        level = settings.LOG_LEVEL
    if isinstance(level, str):
        return level.strip().upper()
    return level


def configure_logging(service_name: str, level: Union[int, str, None] = None) -> logging.Logger:
    """Route the root logger through a single run-correlated stdout handler.

    ``level`` falls back to ``LOG_LEVEL`` and accepts names in any case.
    Calling it again replaces the previous run handler; handlers installed
    by other code are kept.
    """

    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, RunLogHandler)]:
        root.removeHandler(existing)
    root.addHandler(RunLogHandler())
    root.setLevel(_resolve_level(level))
    return logging.getLogger(service_name)
