from abc import abstractmethod
from types import TracebackType
from typing import Protocol

from changelogs.domain.shared.port import Port


class UnitOfWork(Port, Protocol):
    """Transaction boundary over the persistent store.

    Used as an async context manager: commits when the block exits cleanly,
    rolls back when it raises. Reusable; each `async with` is one transaction.
    """

    @abstractmethod
    async def commit(self) -> None: ...

    @abstractmethod
    async def rollback(self) -> None: ...

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None = None,
        exc: BaseException | None = None,
        tb: TracebackType | None = None,
    ) -> None:
        if exc is not None:
            await self.rollback()
        else:
            await self.commit()
