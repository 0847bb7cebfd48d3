"""Owner-only access to a project's collaborator records."""

from changelogs.domain.auth.model.value import UserId
from changelogs.domain.project.model.project import Project
from changelogs.domain.project.port.repository import ProjectRepository
from changelogs.domain.shared.error import AuthorizationError, NotFoundError


async def require_owned_project(
    project_repo: ProjectRepository, slug: str, user_id: UserId
) -> Project:
    """Load a project the caller owns.

    Raises:
        NotFoundError: If no project has this slug
        AuthorizationError: If the caller is not the owner
    """
    project = await project_repo.get_by_slug(slug)
    if project is None:
        raise NotFoundError("Project not found", code="project_not_found")

    if not project.is_owned_by(user_id):
        raise AuthorizationError(
            "Only the owner can manage collaborators", code="not_project_owner"
        )

    return project
