"""DI provider for project domain."""

from dishka import provide

from changelogs.domain.project.command.invite import InviteCollaboratorHandler
from changelogs.domain.project.command.manage import (
    CancelInvitationHandler,
    RemoveCollaboratorHandler,
    UpdateCollaboratorRoleHandler,
)
from changelogs.domain.project.query.list_collaborators import ListCollaboratorsHandler
from changelogs.util.di.base import Provider
from changelogs.util.di.scope import Scope


class ProjectProvider(Provider):
    """DI provider for project domain handlers."""

    # Commands
    invite_collaborator_handler = provide(InviteCollaboratorHandler, scope=Scope.UOW)
    cancel_invitation_handler = provide(CancelInvitationHandler, scope=Scope.UOW)
    remove_collaborator_handler = provide(RemoveCollaboratorHandler, scope=Scope.UOW)
    update_collaborator_role_handler = provide(UpdateCollaboratorRoleHandler, scope=Scope.UOW)

    # Queries
    list_collaborators_handler = provide(ListCollaboratorsHandler, scope=Scope.UOW)
