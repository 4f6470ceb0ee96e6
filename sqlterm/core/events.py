"""Application events handled by the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from sqlterm.domains.query.app.query_task import QueryOutcome

from .keys import Key


@dataclass(frozen=True)
class KeyPressed:
    key: Key


@dataclass(frozen=True)
class QueryCompleted:
    outcome: QueryOutcome


@dataclass(frozen=True)
class ExecuteDDL:
    """Run setup statements in the background (startup DDL file)."""

    sql: str


@dataclass(frozen=True)
class Tick:
    pass


AppEvent = Union[KeyPressed, QueryCompleted, ExecuteDDL, Tick]
