"""Database engine access for sqlterm."""

from .engine import EngineHandle, QueryResult
from .exceptions import EngineClosedError, QueryExecutionError

__all__ = [
    "EngineClosedError",
    "EngineHandle",
    "QueryExecutionError",
    "QueryResult",
]
