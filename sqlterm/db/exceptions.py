"""Custom exceptions for the database layer."""


class QueryExecutionError(RuntimeError):
    """Exception raised when the engine rejects or fails to run a statement."""

    def __init__(self, message: str, sql: str = ""):
        self.sql = sql
        super().__init__(message)


class EngineClosedError(ConnectionError):
    """Exception raised when a query is attempted on a closed engine handle."""

    def __init__(self, database: str):
        self.database = database
        super().__init__(f"Engine for {database!r} is closed")
