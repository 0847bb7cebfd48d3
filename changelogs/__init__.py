"""Changelogs server: OIDC login, account linking and collaborator invitations."""
