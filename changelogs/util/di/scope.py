"""Dependency lifetimes for the changelogs container."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """Two lifetimes, nested APP -> UOW.

    APP holds what is built once per process: config, the database engine,
    the httpx client and the OIDC adapter with its cached discovery document.
    UOW is entered once per HTTP request by ContainerMiddleware and holds the
    request, its database session and everything that reads the session cookie.
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
