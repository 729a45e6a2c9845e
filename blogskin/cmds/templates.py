"""Starter template commands for the blogskin CLI."""

from pathlib import Path

import typer

from ..app import handle_exceptions
from ..defaults import TEMPLATE_VARIABLES, default_templates
from ..utils.files import write_text

app = typer.Typer(no_args_is_help=True)


def slot_filename(slot: str) -> str:
    """File a template slot is written to: ``html_header`` -> ``header.html``."""
    if slot == "custom_css":
        return "skin.css"
    return f"{slot[len('html_'):]}.html"


@app.command()
@handle_exceptions
def init(
    ctx: typer.Context,
    directory: Path = typer.Argument(Path("."), help="Directory to write the templates to"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing files"),
) -> None:
    """Write the starter custom skin templates to a directory.

    Examples:
        blogskin templates init my-skin
    """
    console = ctx.obj["console"]
    for slot, source in default_templates().items():
        path = write_text(directory / slot_filename(slot), source, overwrite=force)
        console.print(f"[green]Created {path}[/green]")


@app.command()
@handle_exceptions
def variables(
    ctx: typer.Context,
    group: str = typer.Option(None, "--group", "-g", help="Only show one group (blog, post, loop)"),
) -> None:
    """List the variables and directives templates can use.

    Examples:
        blogskin templates variables
        blogskin templates variables --group post
    """
    rows = [
        {"group": name, "name": item["name"], "description": item["description"]}
        for name, items in TEMPLATE_VARIABLES.items()
        if group is None or name == group
        for item in items
    ]
    ctx.obj["output_formatter"].render(rows, format=ctx.obj["output_format"], columns=["group", "name", "description"])
