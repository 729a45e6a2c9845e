"""Main Typer application for the blogskin CLI.

This module contains the main Typer app instance and registers all command
groups. It handles global options like profile, debug mode and output
format, and sets up logging for the library code underneath.
"""

import logging
import os
import sys
from functools import wraps
from pathlib import Path
from typing import Optional

import click
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.traceback import install

from . import __version__
from .config import ConfigManager, ENV_API_URL, ENV_ACCESS_TOKEN, ENV_OUTPUT_FORMAT
from .render import OutputFormatter
from .exceptions import BlogSkinError, ConfigError
from .utils.exceptions import format_error_for_user

ENV_CONFIG_DIR = "BLOGSKIN_CONFIG_DIR"

install(show_locals=False)

app = typer.Typer(
    name="blogskin",
    help="Render, sanitize and resolve custom blog skins",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)
output_formatter = OutputFormatter(console)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"blogskin {__version__}")
        raise typer.Exit()


def configure_logging(debug: bool) -> None:
    """Route library log records through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=debug)],
        force=True,
    )


def show_environment_info() -> None:
    console.print("[dim]Environment variables:[/dim]")
    env_vars = {
        ENV_API_URL: os.getenv(ENV_API_URL, "[not set]"),
        ENV_ACCESS_TOKEN: "[set]" if os.getenv(ENV_ACCESS_TOKEN) else "[not set]",
        ENV_OUTPUT_FORMAT: os.getenv(ENV_OUTPUT_FORMAT, "[not set]"),
        ENV_CONFIG_DIR: os.getenv(ENV_CONFIG_DIR, "[not set]"),
    }
    for var, value in env_vars.items():
        console.print(f"  {var}: {value}", markup=False)


@app.callback()
def main(
    ctx: typer.Context,
    profile: Optional[str] = typer.Option(
        None,
        "--profile",
        "-p",
        help="Configuration profile to use",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output",
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format (table, json, yaml)",
    ),
    timeout: Optional[int] = typer.Option(
        None,
        "--timeout",
        help="Request timeout in seconds (overrides the profile)",
    ),
    max_retries: Optional[int] = typer.Option(
        None,
        "--max-retries",
        help="Maximum number of retry attempts (overrides the profile)",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """blogskin - work with custom blog skins from the command line.

    Examples:
        # Render a template against a context file
        blogskin render header.html --context context.json

        # Resolve the effective skin of a blog on the backend
        blogskin resolve --blog-id 42

        # Sanitize a rendered fragment
        blogskin sanitize html fragment.html

        # Check whether a background is dark
        blogskin theme check "#1a1a1a"
    """
    configure_logging(debug)

    config_dir = os.getenv(ENV_CONFIG_DIR)
    try:
        config_manager = ConfigManager(Path(config_dir) if config_dir else None)
    except ConfigError as e:
        err_console.print(f"[red]{escape(format_error_for_user(e, debug))}[/red]")
        raise typer.Exit(1)

    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["output_format"] = output_format
    ctx.obj["timeout"] = timeout
    ctx.obj["max_retries"] = max_retries
    ctx.obj["console"] = console
    ctx.obj["config_manager"] = config_manager
    ctx.obj["output_formatter"] = output_formatter
    ctx.obj["profile_name"] = profile

    if debug:
        console.print("[dim]Debug mode enabled[/dim]")
        show_environment_info()


def handle_exceptions(func):
    """Decorator to handle common exceptions in commands."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except BlogSkinError as e:
            ctx = click.get_current_context(silent=True)
            debug = ctx.obj.get("debug", False) if ctx and ctx.obj else False
            err_console.print(f"[red]{escape(format_error_for_user(e, debug))}[/red]", highlight=False)
            if not debug and not isinstance(e, ConfigError):
                err_console.print("[dim]Use --debug for more details[/dim]")
            raise typer.Exit(1)
        except KeyboardInterrupt:
            err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(130)
        except (typer.Exit, typer.Abort):
            raise
        except Exception as e:
            ctx = click.get_current_context(silent=True)
            debug = ctx.obj.get("debug", False) if ctx and ctx.obj else False

            if debug:
                err_console.print_exception(show_locals=True)
            else:
                err_console.print(f"[red]Unexpected error: {escape(str(e))}[/red]", highlight=False)
                err_console.print("[dim]Use --debug for more details[/dim]")
            raise typer.Exit(1)
    return wrapper


_registered = False


def register_commands() -> None:
    """Register all commands and command groups with the main app."""
    global _registered
    if _registered:
        return

    from .cmds import (
        render_command,
        resolve_command,
        sanitize_app,
        theme_app,
        templates_app,
        config_app,
    )

    app.command(name="render")(render_command)
    app.command(name="resolve")(resolve_command)
    app.add_typer(sanitize_app, name="sanitize", help="Sanitize rendered HTML or CSS")
    app.add_typer(theme_app, name="theme", help="Inspect background colors and code palettes")
    app.add_typer(templates_app, name="templates", help="Starter templates and template variables")
    app.add_typer(config_app, name="config", help="Manage configuration profiles")

    _registered = True


def cli():
    """Entry point for the CLI."""
    register_commands()

    try:
        app()
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    cli()
