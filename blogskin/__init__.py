"""blogskin package.

Custom skins for a multi-tenant blogging platform: a small template language
for author-written page fragments, HTML/CSS sanitization, effective-skin
resolution across base skins, per-blog overrides and custom skins, and a
command-line tool for working with all of it.
"""

__version__ = "0.1.0"
__description__ = "Custom blog skin rendering, sanitization and resolution"

# Re-export main entry points for convenience
from .template import TemplateRenderer, render, render_custom_skin_page
from .sanitizer import sanitize_html, sanitize_css
from .resolver import SkinResolver, resolve_effective_skin, merge_css_variables, merge_layout_config
from .theme import is_dark_background, palette_for, code_palette
from .client import SkinClient, SkinRecords
from .config import ConfigManager, Profile, Settings
from .render import OutputFormatter
from .utils.auth import TokenAuth
from .utils.retry import RetryManager, CircuitBreaker
from .exceptions import (
    BlogSkinError,
    ConfigError,
    AuthenticationError,
    TokenExpiredError,
    MaxRetriesExceededError,
    CircuitBreakerOpenError,
    ValidationError,
    APIError,
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    RateLimitError,
)

__all__ = [
    "__version__",
    "__description__",
    "TemplateRenderer",
    "render",
    "render_custom_skin_page",
    "sanitize_html",
    "sanitize_css",
    "SkinResolver",
    "resolve_effective_skin",
    "merge_css_variables",
    "merge_layout_config",
    "is_dark_background",
    "palette_for",
    "code_palette",
    "SkinClient",
    "SkinRecords",
    "ConfigManager",
    "Profile",
    "Settings",
    "OutputFormatter",
    "TokenAuth",
    "RetryManager",
    "CircuitBreaker",
    "BlogSkinError",
    "ConfigError",
    "AuthenticationError",
    "TokenExpiredError",
    "MaxRetriesExceededError",
    "CircuitBreakerOpenError",
    "ValidationError",
    "APIError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ServerError",
    "RateLimitError",
]
