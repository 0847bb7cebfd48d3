"""Auth domain commands."""

from .login import (
    CompleteLogin,
    CompleteLoginHandler,
    CompleteLoginResult,
    InitiateLogin,
    InitiateLoginHandler,
    InitiateLoginResult,
)
from .logout import Logout, LogoutHandler, LogoutResult

__all__ = [
    "CompleteLogin",
    "CompleteLoginHandler",
    "CompleteLoginResult",
    "InitiateLogin",
    "InitiateLoginHandler",
    "InitiateLoginResult",
    "Logout",
    "LogoutHandler",
    "LogoutResult",
]
