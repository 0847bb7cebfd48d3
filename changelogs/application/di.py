import httpx
from dishka import AsyncContainer, from_context, make_async_container

from changelogs.config import Config
from changelogs.domain.auth.util.di import AuthProvider
from changelogs.domain.project.util.di import ProjectProvider
from changelogs.infrastructure.auth import AuthInfraProvider
from changelogs.infrastructure.persistence import PersistenceProvider
from changelogs.util.di.base import Provider
from changelogs.util.di.scope import Scope


class ConfigProvider(Provider):
    """Exposes the Config passed as container context."""

    config = from_context(provides=Config, scope=Scope.APP)


def create_container(
    config: Config | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    if config is None:
        config = Config()  # type: ignore[call-arg]

    return make_async_container(
        ConfigProvider(),
        PersistenceProvider(),
        AuthProvider(),
        AuthInfraProvider(transport=transport),
        ProjectProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
