"""Query execution services."""
