"""Skin backend API client.

Fetches the raw records the resolver consumes: the blog, its skin
application (with the base skin embedded), the base skin itself and the
blog's custom skin. Requests go through a retry manager and a circuit
breaker; ``fetch_skin_records`` issues the fetches in parallel and degrades
each failed record to ``None`` so a page can still render with defaults.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, NamedTuple, Optional, TypeVar

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import ENV_ACCESS_TOKEN, ENV_API_URL, Profile
from .exceptions import (
    APIError,
    BlogSkinError,
    MaxRetriesExceededError,
    NotFoundError,
    RateLimitError,
    ServerError,
)
from .models import Blog, BlogSkinApplication, CustomSkin, Skin
from .utils.auth import TokenAuth
from .utils.retry import CircuitBreaker, RetryManager

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SkinRecords(NamedTuple):
    """Everything needed to resolve a blog's effective skin."""

    blog: Blog
    base_skin: Optional[Skin]
    application: Optional[BlogSkinApplication]
    custom_skin: Optional[CustomSkin]


class SkinClient:
    """Client for the skin backend REST API."""

    def __init__(
        self,
        profile: Optional[Profile] = None,
        api_url: Optional[str] = None,
        access_token: Optional[str] = None,
        timeout: int = 30,
        retry_attempts: int = 3,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the client.

        Environment variables override both the profile and the arguments.

        Args:
            profile: Configuration profile
            api_url: Backend base URL (if profile not provided)
            access_token: Bearer token (if profile not provided)
            timeout: Request timeout in seconds
            retry_attempts: Number of retry attempts
            session: Preconfigured requests session

        Raises:
            ValueError: If no backend URL is available
        """
        env_url = os.getenv(ENV_API_URL)
        env_token = os.getenv(ENV_ACCESS_TOKEN)

        if profile:
            self.url = str(env_url or profile.api_url).rstrip("/")
            token = env_token or profile.access_token
            self.timeout = profile.timeout
            self.retry_attempts = profile.retry_attempts
        else:
            if not (env_url or api_url):
                raise ValueError(f"Either profile, api_url or {ENV_API_URL} must be provided")
            self.url = str(env_url or api_url).rstrip("/")
            token = env_token or access_token
            self.timeout = timeout
            self.retry_attempts = retry_attempts

        self.auth = TokenAuth(token)

        self.retry_manager = RetryManager(max_retries=self.retry_attempts)
        self.circuit_breaker = CircuitBreaker(
            failure_threshold=5,
            recovery_timeout=60.0,
            expected_exceptions=(requests.exceptions.RequestException, ServerError, MaxRetriesExceededError),
        )

        self.session = session or requests.Session()
        if session is None:
            self._configure_session()

    def _configure_session(self) -> None:
        """Mount connection-level retries; status retries are handled by RetryManager."""
        retry_strategy = Retry(total=0, connect=2, read=2, backoff_factor=0.5)
        adapter = HTTPAdapter(max_retries=retry_strategy, pool_connections=10, pool_maxsize=20)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _handle_response(self, response: requests.Response, endpoint: str) -> Any:
        """Convert HTTP errors to exceptions and decode the JSON body.

        Raises:
            APIError: For error status codes, tagged with the failing endpoint
        """
        status = response.status_code

        if status >= 400:
            error_data: Dict[str, Any] = {}
            try:
                body = response.json()
                if isinstance(body, dict):
                    error_data = body
            except ValueError:
                pass

            message = error_data.get("error") or error_data.get("message")
            error_class = APIError.for_status(status)
            kwargs: Dict[str, Any] = {"status_code": status, "response_data": error_data, "endpoint": endpoint}

            if error_class is RateLimitError:
                retry_after = response.headers.get("Retry-After")
                raise RateLimitError(
                    "Rate limit exceeded" + (f", retry after: {retry_after} seconds" if retry_after else ""),
                    retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                    **kwargs,
                )
            if error_class is ServerError:
                raise ServerError(f"Server error: {status}", **kwargs)
            if error_class is APIError:
                message = message or f"HTTP {status}"
            raise error_class(message, **kwargs)

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise APIError(f"Invalid JSON response: {e}", status_code=status, endpoint=endpoint)

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """Make an API request with retries, circuit breaking and error mapping."""
        headers = {"Accept": "application/json", **self.auth.get_headers()}

        def send() -> Any:
            logger.debug("%s %s%s", method, self.url, endpoint)
            response = self.session.request(
                method=method,
                url=f"{self.url}{endpoint}",
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
            logger.debug("Response status: %s", response.status_code)
            return self._handle_response(response, endpoint)

        return self.circuit_breaker.call(lambda: self.retry_manager.execute_with_retry(send))

    def get_blog(self, blog_id: str) -> Blog:
        """Get a blog by ID."""
        return Blog(**self._request("GET", f"/api/blogs/{blog_id}"))

    def get_skin_application(self, blog_id: str) -> Optional[BlogSkinApplication]:
        """Get a blog's skin application, with its base skin embedded when the backend joins it.

        Returns:
            The application, or None if the blog has not applied a skin
        """
        data = self._request("GET", f"/api/skins/blog/{blog_id}")
        if not data:
            return None
        return BlogSkinApplication(**data)

    def get_skin(self, skin_id: str) -> Skin:
        """Get a skin by ID."""
        return Skin(**self._request("GET", f"/api/skins/{skin_id}"))

    def get_custom_skin(self, blog_id: str) -> Optional[CustomSkin]:
        """Get a blog's custom skin.

        Returns:
            The custom skin, or None if the blog has none
        """
        try:
            data = self._request("GET", f"/api/skins/custom/{blog_id}")
        except NotFoundError:
            return None
        if not data:
            return None
        return CustomSkin(**data)

    def fetch_skin_records(self, blog_id: str) -> SkinRecords:
        """Fetch the blog and its skin records in parallel.

        A failing skin record is logged and replaced by None so resolution
        can fall back to defaults. The blog itself is required.

        Raises:
            BlogSkinError: If the blog cannot be fetched
        """
        with ThreadPoolExecutor(max_workers=3) as pool:
            blog_future = pool.submit(self.get_blog, blog_id)
            application_future = pool.submit(
                self._fetch_optional, "skin application", self.get_skin_application, blog_id,
            )
            custom_future = pool.submit(
                self._fetch_optional, "custom skin", self.get_custom_skin, blog_id,
            )

            blog = blog_future.result()
            application = application_future.result()
            custom_skin = custom_future.result()

        base_skin = None
        if application is not None:
            base_skin = application.skin
            if base_skin is None and application.skin_id:
                base_skin = self._fetch_optional("skin", self.get_skin, application.skin_id)

        return SkinRecords(blog=blog, base_skin=base_skin, application=application, custom_skin=custom_skin)

    def _fetch_optional(self, label: str, fetch: Callable[[str], Optional[T]], key: str) -> Optional[T]:
        try:
            return fetch(key)
        except (BlogSkinError, requests.exceptions.RequestException, ValueError) as e:
            logger.warning("Failed to fetch %s for %s, using defaults: %s", label, key, e)
            return None

    def test_connection(self) -> bool:
        """Check that the backend answers.

        Returns:
            True if the health endpoint responds successfully
        """
        try:
            self._request("GET", "/health")
            return True
        except (BlogSkinError, requests.exceptions.RequestException) as e:
            logger.debug("Connection test failed: %s", e)
            return False

    def get_stats(self) -> Dict[str, Any]:
        """Retry and circuit breaker statistics."""
        return {
            "retry_stats": self.retry_manager.get_metrics(),
            "circuit_breaker_stats": self.circuit_breaker.get_state_info(),
        }
