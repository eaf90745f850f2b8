"""Browser session state: the context object and its token cache."""

from .context import SessionContext
from .token_cache import SecretTokenCache

__all__ = [
    "SessionContext",
    "SecretTokenCache",
]
