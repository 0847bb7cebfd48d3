"""SQL repository implementation for projects."""

from uuid import UUID

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from changelogs.domain.auth.model.value import ProjectId, UserId
from changelogs.domain.project.model.project import Project
from changelogs.domain.project.port.repository import ProjectRepository
from changelogs.domain.shared.error import ConflictError
from changelogs.infrastructure.persistence.repository.base import as_utc, execute, flush
from changelogs.infrastructure.persistence.tables import projects_table


def _row_to_project(row: dict) -> Project:
    return Project(
        id=ProjectId(UUID(row["id"])),
        slug=row["slug"],
        name=row["name"],
        owner_id=UserId(UUID(row["owner_id"])),
        created_at=as_utc(row["created_at"]),
    )


def _project_to_dict(project: Project) -> dict:
    return {
        "id": str(project.id),
        "slug": project.slug,
        "name": project.name,
        "owner_id": str(project.owner_id),
        "created_at": project.created_at,
    }


class SqlProjectRepository(ProjectRepository):
    """SQL implementation of ProjectRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_slug(self, slug: str) -> Project | None:
        stmt = select(projects_table).where(projects_table.c.slug == slug)
        result = await execute(self.session, stmt)
        row = result.mappings().first()
        return _row_to_project(dict(row)) if row else None

    async def save(self, project: Project) -> None:
        project_dict = _project_to_dict(project)
        stmt = select(projects_table.c.id).where(projects_table.c.id == str(project.id))
        existing = (await execute(self.session, stmt)).first()

        if existing:
            stmt = (
                update(projects_table)
                .where(projects_table.c.id == str(project.id))
                .values(**project_dict)
            )
        else:
            stmt = insert(projects_table).values(**project_dict)

        try:
            await execute(self.session, stmt)
            await flush(self.session)
        except IntegrityError as e:
            raise ConflictError("A project with this slug already exists", code="slug_taken") from e
