"""Textual UI pieces for the query domain."""
