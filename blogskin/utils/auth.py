"""Bearer-token authentication for the skin backend.

The backend issues JWT access tokens. The signature is the backend's business;
here the token is only decoded to read its ``exp`` claim so an expired token
fails fast instead of turning every fetch into a 401.
"""

import time
from typing import Dict, Optional

import jwt

from ..exceptions import AuthenticationError, TokenExpiredError


class TokenAuth:
    """Attaches a bearer token to backend requests."""

    def __init__(self, access_token: Optional[str] = None, leeway: int = 30) -> None:
        """Initialize token authentication.

        Args:
            access_token: Bearer token, or None for anonymous access
            leeway: Seconds of clock skew tolerated when checking expiry
        """
        if access_token is not None and not access_token.strip():
            raise AuthenticationError("Access token cannot be empty")

        self.access_token = access_token.strip() if access_token else None
        self.leeway = leeway

    @property
    def is_anonymous(self) -> bool:
        return self.access_token is None

    def expires_at(self) -> Optional[float]:
        """Expiry of the token as a Unix timestamp.

        Returns:
            The ``exp`` claim, or None for opaque tokens and tokens without one
        """
        if not self.access_token:
            return None

        try:
            payload = jwt.decode(self.access_token, options={"verify_signature": False})
        except jwt.InvalidTokenError:
            # Not a JWT; let the backend judge it
            return None

        exp = payload.get("exp")
        if isinstance(exp, (int, float)):
            return float(exp)
        return None

    def is_expired(self, now: Optional[float] = None) -> bool:
        exp = self.expires_at()
        if exp is None:
            return False
        now = time.time() if now is None else now
        return exp + self.leeway < now

    def get_headers(self) -> Dict[str, str]:
        """Get authorization headers.

        Raises:
            TokenExpiredError: If the token's ``exp`` claim has passed
        """
        if self.access_token is None:
            return {}

        if self.is_expired():
            raise TokenExpiredError(
                "Access token has expired",
                details={"expired_at": self.expires_at()},
            )

        return {"Authorization": f"Bearer {self.access_token}"}
