"""Textual front-end for Scoundrel."""

from .app import ScoundrelTextualApp, run_textual_app

__all__ = ["ScoundrelTextualApp", "run_textual_app"]
