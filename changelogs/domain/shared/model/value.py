from uuid import UUID, uuid4

from pydantic import RootModel
from typing_extensions import Self


class EntityId(RootModel[UUID]):
    """Base for UUID identifiers; subclasses give each entity its own id type."""

    @classmethod
    def generate(cls) -> Self:
        return cls(uuid4())

    def __str__(self) -> str:
        return str(self.root)

    def __hash__(self) -> int:
        return hash(self.root)
