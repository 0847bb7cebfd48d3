"""Fixtures for route tests: a full app wired to a scripted identity provider."""

import httpx
import pytest
from fastapi.testclient import TestClient
from route_support import ScriptedProvider, make_config

from changelogs.application.api.rest.app import create_app
from changelogs.config import Config


@pytest.fixture
def provider() -> ScriptedProvider:
    return ScriptedProvider()


@pytest.fixture
def config() -> Config:
    return make_config()


@pytest.fixture
def client(config: Config, provider: ScriptedProvider):
    app = create_app(config=config, transport=httpx.MockTransport(provider))
    with TestClient(app) as client:
        yield client
