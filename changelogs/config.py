import logging
import os
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


# =============================================================================
# Application Configuration
# =============================================================================


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by CHANGELOGS_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get the value for a field from the YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML file."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load config from YAML file if specified."""
        config_file = os.environ.get("CHANGELOGS_CONFIG_FILE")
        if config_file:
            path = Path(config_file)
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


class Frontend(BaseModel):
    """Public site configuration (nested in Config, uses env_nested_delimiter)."""

    base_url: str = "http://localhost:5173"  # Also used to derive the OIDC redirect URI
    dashboard_path: str = "/dashboard"  # Where a completed login lands
    home_path: str = "/"  # Where logout lands
    login_path: str = "/auth/login"  # Where unauthenticated requests are sent

    @property
    def callback_url(self) -> str:
        """Redirect URI registered with the identity provider."""
        return f"{self.base_url.rstrip('/')}/auth/callback"


class Server(BaseModel):
    """Server configuration (nested in Config, uses env_nested_delimiter)."""

    name: str = "Changelogs"
    version: str = "0.1.0"
    description: str = "Versioned changelog publishing for software projects"


class DatabaseConfig(BaseModel):
    """Database configuration (nested in Config, uses env_nested_delimiter)."""

    url: str = "sqlite+aiosqlite:///./changelogs.db"
    echo: bool = False
    auto_migrate: bool = True  # Create missing tables on startup


class LoggingConfig(BaseModel):
    """Logging configuration (nested in Config, uses env_nested_delimiter)."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from CHANGELOGS_LOG_FILE env var."""
        return os.environ.get("CHANGELOGS_LOG_FILE")


# =============================================================================
# Authentication Configuration
# =============================================================================


class OidcConfig(BaseModel):
    """OpenID Connect provider configuration."""

    issuer: str = ""  # e.g. https://accounts.example.com
    client_id: str = ""
    client_secret: str = ""
    scope: str = "openid email profile"

    @property
    def discovery_url(self) -> str:
        """Well-known discovery document location for the issuer."""
        return f"{self.issuer.rstrip('/')}/.well-known/openid-configuration"


class SessionConfig(BaseModel):
    """Cookie session configuration."""

    secret: str = ""  # Must be set in production
    algorithm: str = "HS256"
    secure_cookies: bool = False  # Enable behind HTTPS
    session_max_age_days: int = 30
    state_max_age_seconds: int = 600  # 10 minutes


class AuthConfig(BaseModel):
    """Authentication configuration."""

    oidc: OidcConfig = OidcConfig()
    session: SessionConfig = SessionConfig()


class Config(BaseSettings):
    # These are BaseModel, so env_nested_delimiter handles their env vars
    server: Server = Server()
    frontend: Frontend = Frontend()
    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    auth: AuthConfig = AuthConfig()

    model_config = {
        "env_prefix": "CHANGELOGS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",  # Allows CHANGELOGS_AUTH__OIDC__ISSUER override
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - CHANGELOGS_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Should be called early in application startup, before other modules
    are imported to ensure all loggers pick up the configuration.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(config.level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(config.level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
