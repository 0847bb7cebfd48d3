"""Project domain ports."""

from .repository import ProjectRepository

__all__ = ["ProjectRepository"]
