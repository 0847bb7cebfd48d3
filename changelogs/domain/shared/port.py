"""Base marker for domain ports."""

from typing import Protocol


class Port(Protocol):
    """Marker base for interfaces the domain depends on.

    Concrete adapters live in `changelogs.infrastructure`.
    """
