"""Client and formatter construction for commands.

Commands get a configured SkinClient from the Typer context: an explicit
``--profile`` wins, then the environment, then the active profile, with the
global ``--timeout`` and ``--max-retries`` options applied on top.
"""

from typing import Tuple

import typer

from ..client import SkinClient
from ..config import ConfigManager, Profile, ENV_API_URL
from ..exceptions import ConfigError
from ..render import OutputFormatter


def create_client_from_context(ctx: typer.Context) -> SkinClient:
    """Create a SkinClient from Typer context.

    Raises:
        ConfigError: If no backend is configured
    """
    config_manager: ConfigManager = ctx.obj["config_manager"]

    try:
        profile = config_manager.resolve_profile(ctx.obj.get("profile_name"))
    except ConfigError as e:
        raise ConfigError(
            "No backend configuration found. Please either:\n"
            "  1. Run 'blogskin config init' to set up a profile, or\n"
            f"  2. Set the {ENV_API_URL} environment variable",
            details={"cause": e.message},
        )

    overrides = {}
    if ctx.obj.get("timeout") is not None:
        overrides["timeout"] = ctx.obj["timeout"]
    if ctx.obj.get("max_retries") is not None:
        overrides["retry_attempts"] = ctx.obj["max_retries"]
    if overrides:
        # Run the profile validators on the overridden values
        try:
            profile = Profile(**{**profile.model_dump(), **overrides})
        except ValueError as e:
            raise ConfigError(f"Invalid option: {e}")

    return SkinClient(profile=profile)


def get_client_and_formatter(ctx: typer.Context) -> Tuple[SkinClient, OutputFormatter]:
    """Get client and formatter from context."""
    return create_client_from_context(ctx), ctx.obj["output_formatter"]
