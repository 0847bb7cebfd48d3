"""Dependency injection helpers."""

from .base import Provider
from .scope import Scope

__all__ = ["Provider", "Scope"]
