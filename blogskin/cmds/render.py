"""Template rendering command for the blogskin CLI.

Renders one template file against a context file, the way a blog page would,
optionally passing the result through the sanitizer.
"""

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import typer
from pydantic import ValidationError as PydanticValidationError

from ..app import handle_exceptions
from ..config import Settings
from ..exceptions import ValidationError
from ..models import Blog, TemplateContext
from ..sanitizer import sanitize_html
from ..template import TemplateRenderer
from ..utils.files import load_data_file, read_text, write_text

# Keys of a raw-records context file; anything else is read as template fields
RAW_CONTEXT_KEYS = ("blog", "posts", "post", "categories", "post_count", "subscriber_count", "visitor_count")


def build_context(data: Optional[Mapping[str, Any]]) -> Optional[TemplateContext]:
    """Build a TemplateContext from a loaded context file.

    Two shapes are accepted: raw records (``blog`` plus optional ``posts``,
    ``post``, ``categories`` and counts), or the template fields themselves.

    Raises:
        ValidationError: If the data does not describe a valid context
    """
    if data is None:
        return None
    if not isinstance(data, Mapping):
        raise ValidationError("Context file must contain a mapping")

    try:
        if "blog" in data:
            unknown = sorted(set(data) - set(RAW_CONTEXT_KEYS))
            if unknown:
                raise ValidationError(f"Unknown context keys: {', '.join(unknown)}")
            return TemplateContext.build(
                Blog(**data["blog"]),
                post_count=data.get("post_count", len(data.get("posts") or [])),
                subscriber_count=data.get("subscriber_count", 0),
                visitor_count=data.get("visitor_count", 0),
                posts=data.get("posts"),
                post=data.get("post"),
                categories=data.get("categories"),
            )
        return TemplateContext(**data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid context: {e}")
    except (KeyError, TypeError) as e:
        raise ValidationError(f"Invalid context: missing or malformed field {e}")


def parse_partials(entries: List[str]) -> Dict[str, str]:
    """Load ``name=path`` partial specifications."""
    partials: Dict[str, str] = {}
    for entry in entries:
        name, sep, path = entry.partition("=")
        if not sep or not name.strip() or not path.strip():
            raise ValidationError(f"Invalid partial '{entry}'. Expected format: name=path")
        partials[name.strip()] = read_text(path.strip())
    return partials


@handle_exceptions
def render_command(
    ctx: typer.Context,
    template_file: str = typer.Argument(..., help="Template file to render ('-' for stdin)"),
    context_file: Optional[Path] = typer.Option(None, "--context", "-c", help="Context file (JSON or YAML)"),
    partial: List[str] = typer.Option([], "--partial", help="Partial as name=path (repeatable)"),
    sanitize: bool = typer.Option(False, "--sanitize", help="Sanitize the rendered HTML"),
    allow_forms: bool = typer.Option(False, "--allow-forms", help="Keep form controls when sanitizing"),
    filter_inline_styles: bool = typer.Option(
        False, "--filter-inline-styles", help="Apply the CSS denylist to style attributes when sanitizing",
    ),
    max_depth: int = typer.Option(Settings().max_depth, "--max-depth", help="Deepest nesting evaluated"),
    out: Optional[Path] = typer.Option(None, "--out", help="Write the result to a file"),
    force: bool = typer.Option(False, "--force", help="Overwrite the output file"),
) -> None:
    """Render a template against a context.

    Examples:
        # Render a header template
        blogskin render header.html --context context.json

        # Render a post list with the post item partial, sanitized
        blogskin render list.html -c context.yaml --partial post_item=item.html --sanitize
    """
    try:
        settings = Settings(
            max_depth=max_depth,
            allow_forms=allow_forms,
            filter_inline_styles=filter_inline_styles,
        )
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid option: {e}")

    template = read_text(template_file)
    context = build_context(load_data_file(context_file)) if context_file else None
    partials = parse_partials(partial)

    renderer = TemplateRenderer(settings.max_depth, settings.max_partial_depth)
    result = renderer.render(template, context, partials)

    if sanitize:
        result = sanitize_html(
            result,
            allow_forms=settings.allow_forms,
            filter_inline_styles=settings.filter_inline_styles,
        )

    if out:
        write_text(out, result, overwrite=force)
        ctx.obj["console"].print(f"[green]Wrote {out}[/green]")
    else:
        typer.echo(result)
