"""Repository port for Project persistence."""

from abc import abstractmethod
from typing import Protocol

from changelogs.domain.project.model.project import Project
from changelogs.domain.shared.port import Port


class ProjectRepository(Port, Protocol):
    """Repository for Project aggregate lookups."""

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Project | None:
        """Get a project by its URL slug."""
        ...

    @abstractmethod
    async def save(self, project: Project) -> None:
        """Save a project."""
        ...
