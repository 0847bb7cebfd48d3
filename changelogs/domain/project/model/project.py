"""Project aggregate (the slice of it collaborator management needs)."""

from datetime import datetime

from changelogs.domain.auth.model.value import ProjectId, UserId
from changelogs.domain.shared.model.aggregate import Aggregate


class Project(Aggregate):
    """A changelog project, owned by exactly one user.

    Invariants:
    - `slug` is unique
    - `owner_id` never appears as a collaborator on the same project
    """

    id: ProjectId
    slug: str
    name: str
    owner_id: UserId
    created_at: datetime

    def is_owned_by(self, user_id: UserId) -> bool:
        return self.owner_id == user_id
