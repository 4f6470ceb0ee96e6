"""Query editing, execution and results."""
