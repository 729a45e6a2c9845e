"""Background color commands for the blogskin CLI."""

import typer

from ..app import handle_exceptions
from ..theme import brightness, code_palette, is_dark_background, parse_color

app = typer.Typer(no_args_is_help=True)


@app.command()
@handle_exceptions
def check(
    ctx: typer.Context,
    color: str = typer.Argument(..., help="CSS color (#abc, #aabbcc, rgb(...), rgba(...))"),
) -> None:
    """Classify a background color as light or dark.

    Unparseable colors are treated as black.

    Examples:
        blogskin theme check "#1a1a1a"
        blogskin -o json theme check "rgb(250, 250, 250)"
    """
    r, g, b = parse_color(color)
    ctx.obj["output_formatter"].render(
        {
            "color": color,
            "rgb": f"{r}, {g}, {b}",
            "brightness": round(brightness(color), 2),
            "dark": is_dark_background(color),
        },
        format=ctx.obj["output_format"],
    )


@app.command()
@handle_exceptions
def palette(
    ctx: typer.Context,
    color: str = typer.Argument(..., help="Background color"),
) -> None:
    """Show the code-highlight variables for a background color.

    Examples:
        blogskin theme palette "#0d1117"
    """
    ctx.obj["output_formatter"].render(code_palette(color), format=ctx.obj["output_format"])
