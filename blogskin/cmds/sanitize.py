"""Sanitization commands for the blogskin CLI."""

import typer

from ..app import handle_exceptions
from ..sanitizer import sanitize_css, sanitize_html
from ..utils.files import read_text

app = typer.Typer(no_args_is_help=True)


@app.command()
@handle_exceptions
def html(
    ctx: typer.Context,
    source: str = typer.Argument("-", help="HTML file to sanitize ('-' for stdin)"),
    allow_forms: bool = typer.Option(False, "--allow-forms", help="Keep form controls"),
    filter_inline_styles: bool = typer.Option(
        False, "--filter-inline-styles", help="Apply the CSS denylist to style attributes",
    ),
) -> None:
    """Reduce HTML to the allowed tags and attributes.

    Examples:
        # Sanitize a rendered fragment
        blogskin sanitize html fragment.html

        # Sanitize from a pipe
        blogskin render header.html -c ctx.json | blogskin sanitize html
    """
    typer.echo(sanitize_html(read_text(source), allow_forms=allow_forms, filter_inline_styles=filter_inline_styles))


@app.command()
@handle_exceptions
def css(
    ctx: typer.Context,
    source: str = typer.Argument("-", help="CSS file to sanitize ('-' for stdin)"),
) -> None:
    """Neutralize script vectors in a CSS block.

    Examples:
        blogskin sanitize css skin.css
    """
    typer.echo(sanitize_css(read_text(source)))
