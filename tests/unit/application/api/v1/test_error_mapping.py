"""Unit tests for changelogs error to HTTP status mapping."""

import pytest

from changelogs.application.api.v1.errors import map_changelogs_error
from changelogs.domain.shared.error import (
    AuthExchangeError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    DuplicateAccountError,
    InvalidStateError,
    MalformedIdentityError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)


@pytest.mark.parametrize(
    ("error", "status"),
    [
        (NotFoundError("missing", code="project_not_found"), 404),
        (ValidationError("bad email", field="email"), 422),
        (InvalidStateError("bad state"), 409),
        (ConflictError("taken"), 409),
        (DuplicateAccountError("taken"), 409),
        (AuthorizationError("owner only"), 403),
        (MalformedIdentityError("no email"), 400),
        (PersistenceError("db down"), 503),
        (AuthExchangeError("idp down"), 503),
        (ConfigurationError("no issuer"), 503),
    ],
)
def test_status_codes(error, status: int):
    assert map_changelogs_error(error).status_code == status


def test_detail_carries_code_and_message():
    detail = map_changelogs_error(NotFoundError("Project not found", code="project_not_found")).detail

    assert detail == {"code": "project_not_found", "message": "Project not found"}


def test_validation_field_is_exposed():
    detail = map_changelogs_error(ValidationError("bad", field="email")).detail

    assert detail["field"] == "email"
    assert detail["code"] == "VALIDATION_ERROR"


def test_default_code_is_class_name():
    assert map_changelogs_error(ConflictError("taken")).detail["code"] == "ConflictError"
