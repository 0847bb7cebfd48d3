from changelogs.domain.shared.model.entity import Entity


class Aggregate(Entity):
    """Consistency boundary root. Repositories load and save whole aggregates."""
