"""Textual UI pieces shared by the app."""
