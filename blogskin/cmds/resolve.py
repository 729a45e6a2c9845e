"""Effective skin resolution command for the blogskin CLI.

Resolves which skin a blog renders with, from the backend (``--blog-id``) or
from a local records file (``--records``), and shows the result.
"""

from pathlib import Path
from typing import Any, Mapping, Optional

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.table import Table

from ..app import handle_exceptions
from ..client import SkinRecords
from ..config import Settings
from ..exceptions import ValidationError
from ..models import Blog, BlogSkinApplication, CustomSkin, Skin, TemplatedSkin
from ..resolver import PAGE_TYPES, SkinResolver
from ..utils.client_factory import create_client_from_context
from ..utils.files import load_data_file
from .render import build_context


def records_from_data(data: Any) -> SkinRecords:
    """Build skin records from a loaded records file.

    Expected keys: ``blog`` (required), ``base_skin``, ``application`` and
    ``custom_skin`` (each optional or null).

    Raises:
        ValidationError: If a record is malformed
    """
    if not isinstance(data, Mapping) or not data.get("blog"):
        raise ValidationError("Records file must contain a 'blog' record")

    def optional(key: str, model: Any) -> Any:
        value = data.get(key)
        return model(**value) if value else None

    try:
        return SkinRecords(
            blog=Blog(**data["blog"]),
            base_skin=optional("base_skin", Skin),
            application=optional("application", BlogSkinApplication),
            custom_skin=optional("custom_skin", CustomSkin),
        )
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid records: {e}")


def show_effective_skin(ctx: typer.Context, result: Any) -> None:
    """Print an effective skin as tables."""
    console = ctx.obj["console"]

    if isinstance(result, TemplatedSkin):
        table = Table(title="Templated skin")
        table.add_column("Region", style="cyan")
        table.add_column("Source")
        table.add_column("Size", justify="right")
        for region in ("header", "content", "sidebar", "footer"):
            use_default = getattr(result, f"use_default_{region}", False)
            fragment = getattr(result, region)
            table.add_row(region, "default component" if use_default else "custom", f"{len(fragment):,} chars")
        table.add_row("css", "custom", f"{len(result.css):,} chars")
        console.print(table)
    else:
        layout = result.layout_config.model_dump(by_alias=True)
        formatter = ctx.obj["output_formatter"]
        formatter.render_table(layout, title="Layout")

    ctx.obj["output_formatter"].render_table(result.css_variables, title="CSS variables")


@handle_exceptions
def resolve_command(
    ctx: typer.Context,
    blog_id: Optional[str] = typer.Option(None, "--blog-id", "-b", help="Fetch records for this blog from the backend"),
    records_file: Optional[Path] = typer.Option(None, "--records", "-r", help="Records file (JSON or YAML)"),
    context_file: Optional[Path] = typer.Option(None, "--context", "-c", help="Context file for custom skins"),
    preview: bool = typer.Option(False, "--preview", help="Show the custom skin even if it is not active"),
    page_type: str = typer.Option("list", "--page-type", help="Page type (list, detail)"),
    allow_forms: bool = typer.Option(False, "--allow-forms", help="Keep form controls in fragments"),
    filter_inline_styles: bool = typer.Option(
        False, "--filter-inline-styles", help="Apply the CSS denylist to style attributes",
    ),
) -> None:
    """Resolve a blog's effective skin.

    Examples:
        # Resolve from the backend
        blogskin resolve --blog-id 42

        # Preview an inactive custom skin on a post page
        blogskin resolve --blog-id 42 --preview --page-type detail -c post.json

        # Resolve from local records as JSON
        blogskin -o json resolve --records records.yaml
    """
    if bool(blog_id) == bool(records_file):
        raise ValidationError("Provide exactly one of --blog-id or --records")

    if page_type not in PAGE_TYPES:
        raise ValidationError(f"Invalid page type '{page_type}'. Choose from: {', '.join(PAGE_TYPES)}")

    if records_file:
        records = records_from_data(load_data_file(records_file))
    else:
        client = create_client_from_context(ctx)
        records = client.fetch_skin_records(blog_id)

    context = build_context(load_data_file(context_file)) if context_file else None

    resolver = SkinResolver.from_settings(
        Settings(allow_forms=allow_forms, filter_inline_styles=filter_inline_styles)
    )
    result = resolver.resolve(
        records.blog,
        base_skin=records.base_skin,
        application=records.application,
        custom_skin=records.custom_skin,
        preview_mode=preview,
        page_type=page_type,
        context=context,
    )

    formatter = ctx.obj["output_formatter"]
    output_format = formatter.determine_format(ctx.obj.get("output_format"))
    if output_format == "table":
        show_effective_skin(ctx, result)
    else:
        formatter.render(result.model_dump(by_alias=True), format=output_format)
