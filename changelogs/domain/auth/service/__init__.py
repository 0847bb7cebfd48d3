"""Auth domain services."""

from .account import AccountResolver
from .session import CookieDirective, SessionService, generate_random_string
from .token_parser import parse_id_token

__all__ = [
    "AccountResolver",
    "CookieDirective",
    "SessionService",
    "generate_random_string",
    "parse_id_token",
]
