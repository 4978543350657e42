from __future__ import annotations

from contextvars import ContextVar, Token
from typing import Optional

_RUN_ID: ContextVar[str] = ContextVar("run_id", default="-")


def set_run_id(run_id: int | str) -> Token:
    """Bind an aggregation run identifier to the current context.

    Tasks spawned afterwards inherit the value, so every backend call of one
    run logs under the same identifier.
    """

    return _RUN_ID.set(str(run_id))


def reset_run_id(token: Optional[Token]) -> None:
    if token is not None:
        _RUN_ID.reset(token)


def get_run_id() -> str:
    return _RUN_ID.get()
