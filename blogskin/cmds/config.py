"""Configuration management commands for the blogskin CLI.

This module provides commands for managing backend profiles: creating,
listing, switching, inspecting and deleting them.
"""

from typing import Optional

import typer
from rich.prompt import Prompt, Confirm
from rich.table import Table

from ..app import handle_exceptions
from ..client import SkinClient
from ..exceptions import ConfigError

app = typer.Typer(no_args_is_help=True)


@app.command()
@handle_exceptions
def init(
    ctx: typer.Context,
    profile_name: str = typer.Option("default", "--name", help="Profile name"),
    url: Optional[str] = typer.Option(None, "--url", help="Backend base URL"),
    access_token: Optional[str] = typer.Option(None, "--token", help="Bearer access token"),
    timeout: int = typer.Option(30, "--request-timeout", help="Request timeout in seconds"),
    retry_attempts: int = typer.Option(3, "--retries", help="Number of retry attempts"),
    interactive: bool = typer.Option(True, "--interactive/--no-interactive", help="Prompt for missing values"),
    test: bool = typer.Option(False, "--test", help="Test the connection after saving"),
) -> None:
    """Create a configuration profile.

    The first profile created becomes the active one.

    Examples:
        # Interactive setup
        blogskin config init

        # Non-interactive setup
        blogskin config init --no-interactive --url https://blog.example.com --token "$TOKEN"

        # A named profile, checked against the backend
        blogskin config init --name staging --url https://staging.example.com --test
    """
    config_manager = ctx.obj["config_manager"]
    console = ctx.obj["console"]

    if interactive:
        console.print(f"[bold blue]Setting up profile: {profile_name}[/bold blue]")
        if not url:
            url = Prompt.ask("Backend URL", default="http://localhost:4000")
        if not access_token and Confirm.ask("Do you have an access token?", default=False):
            access_token = Prompt.ask("Access token", password=True, show_default=False)

    if not url:
        raise ConfigError("URL is required (use --url)")

    profile = config_manager.create_profile(
        name=profile_name,
        api_url=url,
        access_token=access_token,
        timeout=timeout,
        retry_attempts=retry_attempts,
    )

    if config_manager.get_active_profile() == profile.name:
        console.print(f"[green]Profile '{profile.name}' saved and set as active![/green]")
    else:
        console.print(f"[green]Profile '{profile.name}' saved![/green]")

    if test:
        client = SkinClient(profile=profile)
        if client.test_connection():
            console.print("[green]✓ Connection successful![/green]")
        else:
            console.print("[yellow]⚠ Connection test failed[/yellow]")
            raise typer.Exit(1)


@app.command("list")
@handle_exceptions
def list_profiles(ctx: typer.Context) -> None:
    """List all configuration profiles.

    Examples:
        blogskin config list
        blogskin -o json config list
    """
    config_manager = ctx.obj["config_manager"]
    formatter = ctx.obj["output_formatter"]
    console = ctx.obj["console"]

    profiles = config_manager.list_profiles()

    output_format = formatter.determine_format(ctx.obj["output_format"])
    if output_format != "table":
        formatter.render(
            {"profiles": profiles, "active_profile": config_manager.get_active_profile()},
            format=output_format,
        )
        return

    if not profiles:
        console.print("[yellow]No profiles configured. Run 'blogskin config init' to create one.[/yellow]")
        return

    table = Table(title="Configuration Profiles")
    table.add_column("Name", style="bold")
    table.add_column("URL", style="cyan")
    table.add_column("Token", style="green")
    table.add_column("Timeout", justify="right")
    table.add_column("Retries", justify="right")
    table.add_column("Active", style="yellow")

    for profile in profiles:
        table.add_row(
            profile["name"],
            profile["api_url"],
            "✓" if profile["has_token"] else "✗",
            str(profile["timeout"]),
            str(profile["retry_attempts"]),
            "✓" if profile["active"] else "✗",
        )

    console.print(table)


@app.command()
@handle_exceptions
def use(
    ctx: typer.Context,
    profile_name: str = typer.Argument(..., help="Profile to make active"),
) -> None:
    """Switch the active profile.

    Examples:
        blogskin config use production
    """
    ctx.obj["config_manager"].set_active_profile(profile_name)
    ctx.obj["console"].print(f"[green]Active profile set to '{profile_name}'[/green]")


@app.command()
@handle_exceptions
def show(
    ctx: typer.Context,
    profile_name: Optional[str] = typer.Argument(None, help="Profile to show (default: active)"),
) -> None:
    """Show a profile's settings. The access token is never printed.

    Examples:
        blogskin config show
        blogskin config show staging
    """
    config_manager = ctx.obj["config_manager"]
    if profile_name:
        profile = config_manager.get_profile(profile_name)
    else:
        profile = config_manager.get_default_profile()

    data = profile.model_dump(exclude={"access_token"})
    data["active"] = profile.name == config_manager.get_active_profile()
    data["has_token"] = profile.access_token is not None
    ctx.obj["output_formatter"].render(data, format=ctx.obj["output_format"], title=f"Profile: {profile.name}")


@app.command()
@handle_exceptions
def delete(
    ctx: typer.Context,
    profile_name: str = typer.Argument(..., help="Profile to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a configuration profile.

    Examples:
        blogskin config delete staging --yes
    """
    config_manager = ctx.obj["config_manager"]
    console = ctx.obj["console"]

    config_manager.get_profile(profile_name)

    if not yes and not Confirm.ask(f"Delete profile '{profile_name}'?", default=False):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(1)

    config_manager.delete_profile(profile_name)
    console.print(f"[green]Profile '{profile_name}' deleted[/green]")
