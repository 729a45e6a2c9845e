"""Command modules for the blogskin CLI.

This module exports the top-level commands and the command groups (Typer
apps) that are registered with the main application.
"""

from .render import render_command
from .resolve import resolve_command
from .sanitize import app as sanitize_app
from .theme import app as theme_app
from .templates import app as templates_app
from .config import app as config_app

__all__ = [
    "render_command",
    "resolve_command",
    "sanitize_app",
    "theme_app",
    "templates_app",
    "config_app",
]
