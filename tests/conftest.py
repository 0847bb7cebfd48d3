"""Global test fixtures."""

import os

# Set required settings before any test modules import Config
# This must happen at module load time, not in a fixture
os.environ.setdefault("CHANGELOGS_AUTH__SESSION__SECRET", "test-secret-for-unit-tests-min-32")
os.environ.setdefault("CHANGELOGS_DATABASE__URL", "sqlite+aiosqlite:///:memory:")
