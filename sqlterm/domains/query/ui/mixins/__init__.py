"""Query domain mixins for the app."""

from .query import QueryMixin, QueryResultMessage
from .query_results import QueryResultsMixin

__all__ = ["QueryMixin", "QueryResultMessage", "QueryResultsMixin"]
