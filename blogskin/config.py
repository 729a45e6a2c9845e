"""Configuration for blogskin.

Two layers live here: ``Settings``, the tunables of the rendering core, and
profile management for the skin backend the CLI talks to (creating, deleting
and switching between backend instances).
"""

import os
import tomllib
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Any
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator, HttpUrl

from .exceptions import ConfigError
from .template import MAX_DEPTH, MAX_PARTIAL_DEPTH

logger = logging.getLogger(__name__)

ENV_API_URL = "BLOGSKIN_API_URL"
ENV_ACCESS_TOKEN = "BLOGSKIN_ACCESS_TOKEN"
ENV_OUTPUT_FORMAT = "BLOGSKIN_OUTPUT_FORMAT"


class Settings(BaseModel):
    """Tunables for rendering and sanitization."""

    max_depth: int = Field(default=MAX_DEPTH, description="Deepest block nesting evaluated")
    max_partial_depth: int = Field(default=MAX_PARTIAL_DEPTH, description="Deepest partial chain")
    filter_inline_styles: bool = Field(default=False, description="Apply the CSS denylist to style attributes")
    allow_forms: bool = Field(default=False, description="Keep form controls in sanitized markup")

    @field_validator("max_depth", "max_partial_depth")
    @classmethod
    def validate_depth(cls, v: int) -> int:
        """Validate nesting limits."""
        if v < 1:
            raise ValueError("Nesting limits must be at least 1")
        return v


class Profile(BaseModel):
    """Configuration profile for a skin backend instance."""

    name: str = Field(..., description="Profile name")
    api_url: HttpUrl = Field(..., description="Backend base URL")
    access_token: Optional[str] = Field(None, description="Bearer access token")
    timeout: int = Field(default=30, description="Request timeout in seconds")
    retry_attempts: int = Field(default=3, description="Number of retry attempts")
    active: bool = Field(default=False, description="Whether this is the active profile")

    @field_validator("access_token")
    @classmethod
    def validate_access_token(cls, v: Optional[str]) -> Optional[str]:
        """Validate access token format."""
        if v is None:
            return v

        v = v.strip()
        if not v:
            raise ValueError("Access token cannot be empty")
        if any(ch.isspace() for ch in v):
            raise ValueError("Access token cannot contain whitespace")

        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeout value."""
        if v <= 0:
            raise ValueError("Timeout must be greater than 0")
        if v > 300:  # 5 minutes max
            raise ValueError("Timeout cannot exceed 300 seconds")
        return v

    @field_validator("retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        """Validate retry attempts value."""
        if v < 0:
            raise ValueError("Retry attempts cannot be negative")
        if v > 10:
            raise ValueError("Retry attempts cannot exceed 10")
        return v

    def model_dump(self, **kwargs: Any) -> Dict[str, Any]:
        """Convert profile to dictionary with the URL as a plain string."""
        data = super().model_dump(**kwargs)
        if "api_url" in data:
            data["api_url"] = str(data["api_url"]).rstrip("/")
        return data


class ConfigManager:
    """Manages configuration profiles for skin backends."""

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        """Initialize configuration manager.

        Args:
            config_dir: Configuration directory path. If None, uses ~/.blogskin
        """
        self.config_dir = config_dir or Path.home() / ".blogskin"
        self.config_file = self.config_dir / "config.toml"
        self.profiles_dir = self.config_dir / "profiles"

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.profiles_dir.mkdir(exist_ok=True)

        self._profiles: Dict[str, Profile] = {}
        self._active_profile: Optional[str] = None
        self._load_config()

    def create_profile(
        self,
        name: str,
        api_url: str,
        access_token: Optional[str] = None,
        timeout: int = 30,
        retry_attempts: int = 3,
    ) -> Profile:
        """Create a new configuration profile.

        The first profile created becomes the active one.

        Args:
            name: Profile name
            api_url: Backend base URL
            access_token: Bearer access token
            timeout: Request timeout in seconds
            retry_attempts: Number of retry attempts

        Returns:
            Created profile

        Raises:
            ConfigError: If profile creation fails
        """
        if name in self._profiles:
            raise ConfigError(f"Profile '{name}' already exists")

        parsed_url = urlparse(api_url)
        if not parsed_url.scheme or not parsed_url.netloc:
            raise ConfigError("Invalid URL format", details={"api_url": api_url})

        try:
            profile = Profile(
                name=name,
                api_url=api_url,
                access_token=access_token,
                timeout=timeout,
                retry_attempts=retry_attempts,
            )
        except ValueError as e:
            raise ConfigError(f"Failed to create profile: {e}")

        self._profiles[name] = profile
        if self._active_profile is None:
            self._active_profile = name
            profile.active = True

        self._save_profile(profile)
        self._save_config()

        return profile

    def list_profiles(self) -> List[Dict[str, Any]]:
        """List all available profiles.

        Returns:
            List of profile configurations, tokens excluded
        """
        profiles = []
        for profile in sorted(self._profiles.values(), key=lambda p: p.name):
            profile_dict = profile.model_dump(exclude={"access_token"})
            profile_dict["active"] = profile.name == self._active_profile
            profile_dict["has_token"] = profile.access_token is not None
            profiles.append(profile_dict)

        return profiles

    def set_active_profile(self, name: str) -> None:
        """Set the active profile.

        Raises:
            ConfigError: If profile doesn't exist
        """
        if name not in self._profiles:
            raise ConfigError(f"Profile '{name}' not found")

        for profile in self._profiles.values():
            profile.active = profile.name == name

        self._active_profile = name
        self._save_config()

    def get_active_profile(self) -> Optional[str]:
        """Name of the active profile, or None."""
        return self._active_profile

    def get_default_profile(self) -> Profile:
        """Get the default (active) profile.

        Raises:
            ConfigError: If no default profile is set
        """
        if not self._active_profile:
            raise ConfigError("No default profile set")

        return self._profiles[self._active_profile]

    def get_profile(self, name: str) -> Profile:
        """Get a specific profile by name.

        Raises:
            ConfigError: If profile doesn't exist
        """
        if name not in self._profiles:
            raise ConfigError(f"Profile '{name}' not found")

        return self._profiles[name]

    def delete_profile(self, name: str) -> None:
        """Delete a configuration profile.

        Raises:
            ConfigError: If profile doesn't exist
        """
        if name not in self._profiles:
            raise ConfigError(f"Profile '{name}' not found")

        if self._active_profile == name:
            self._active_profile = None

        del self._profiles[name]

        profile_file = self.profiles_dir / f"{name}.json"
        if profile_file.exists():
            profile_file.unlink()

        self._save_config()

    def has_environment_config(self) -> bool:
        """Whether environment variables provide a usable configuration."""
        return bool(os.getenv(ENV_API_URL))

    def get_environment_config(self) -> Profile:
        """Build a profile from environment variables.

        Raises:
            ConfigError: If the environment does not name a backend URL
        """
        env_url = os.getenv(ENV_API_URL)
        if not env_url:
            raise ConfigError(f"{ENV_API_URL} environment variable is required")

        try:
            return Profile(
                name="environment",
                api_url=env_url,
                access_token=os.getenv(ENV_ACCESS_TOKEN) or None,
                active=True,
            )
        except ValueError as e:
            raise ConfigError(f"Invalid environment configuration: {e}")

    def resolve_profile(self, name: Optional[str] = None) -> Profile:
        """Pick the profile a command should use.

        An explicit name wins, then the environment, then the active profile.

        Raises:
            ConfigError: If no profile can be found
        """
        if name:
            return self.get_profile(name)
        if self.has_environment_config():
            return self.get_environment_config()
        return self.get_default_profile()

    def _load_config(self) -> None:
        """Load configuration from file."""
        if not self.config_file.exists():
            return

        try:
            with open(self.config_file, "rb") as f:
                config_data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to load configuration: {e}")

        self._active_profile = config_data.get("active_profile") or None

        for profile_file in self.profiles_dir.glob("*.json"):
            try:
                with open(profile_file, "r") as f:
                    profile_data = json.load(f)

                profile = Profile(**profile_data)
                self._profiles[profile.name] = profile
            except (OSError, ValueError) as e:
                # Keep loading the remaining profiles
                logger.warning("Failed to load profile %s: %s", profile_file, e)

        if self._active_profile not in self._profiles:
            self._active_profile = None

    def _save_config(self) -> None:
        """Save configuration to file."""
        # tomllib is read-only, so the file is written by hand
        lines = ["# blogskin configuration", 'version = "1.0"']
        if self._active_profile:
            lines.append(f"active_profile = {json.dumps(self._active_profile)}")

        try:
            with open(self.config_file, "w") as f:
                f.write("\n".join(lines) + "\n")
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}")

    def _save_profile(self, profile: Profile) -> None:
        """Save individual profile to file."""
        profile_file = self.profiles_dir / f"{profile.name}.json"
        try:
            with open(profile_file, "w") as f:
                json.dump(profile.model_dump(), f, indent=2, default=str)
        except OSError as e:
            raise ConfigError(f"Failed to save profile: {e}")
