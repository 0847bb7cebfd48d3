from dishka import Provider as DishkaProvider

from changelogs.util.di.scope import Scope


class Provider(DishkaProvider):
    """Base for all DI providers.

    Defaults unscoped `provide()` declarations to Scope.UOW so request-bound
    services never leak into the application scope by accident.
    """

    scope = Scope.UOW
