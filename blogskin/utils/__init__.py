"""Utility modules for blogskin.

This package contains authentication, retry logic and error formatting used
at the boundary with the skin backend.
"""

from .auth import TokenAuth
from .retry import RetryManager, CircuitBreaker

__all__ = [
    "TokenAuth",
    "RetryManager",
    "CircuitBreaker",
]
