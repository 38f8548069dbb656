from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from huddle.errors import ConfigError

PRODUCTION = "production"

# Connection parameters used outside production, keyed by settings attribute.
_DEVELOPMENT_DEFAULTS: dict[str, str] = {
    "database_user": "user",
    "database_password": "pass",
    "database_host": "postgres-db",
    "database_name": "dbname",
}

_ENVIRONMENT_NAMES: dict[str, str] = {
    "database_user": "DB_USER",
    "database_password": "DB_PASS",
    "database_host": "DB_ADDRESS",
    "database_name": "DB_NAME",
}


@dataclass(frozen=True, slots=True)
class ConnectionParameters:
    """Resolved parameters for the PostgreSQL connection."""

    user: str
    password: str
    host: str
    port: int
    name: str
    sslmode: str


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = Field(default="Huddle API", validation_alias="APP_NAME", description="Human readable service name")
    environment: str = Field(
        default="development",
        validation_alias="DB_ENV",
        description="Execution mode; 'production' enables strict TLS and required credentials",
    )
    debug: bool = Field(default=False, validation_alias="DEBUG", description="Echo SQL statements to the log")

    database_user: str | None = Field(default=None, validation_alias="DB_USER")
    database_password: str | None = Field(default=None, validation_alias="DB_PASS")
    database_host: str | None = Field(default=None, validation_alias="DB_ADDRESS")
    database_port: int = Field(default=5432, validation_alias="DB_PORT")
    database_name: str | None = Field(default=None, validation_alias="DB_NAME")
    database_url_override: str | None = Field(
        default=None,
        validation_alias="DATABASE_URL",
        description="Complete SQLAlchemy URL used instead of the assembled PostgreSQL DSN",
    )

    provision_fail_fast: bool = Field(
        default=False,
        validation_alias="PROVISION_FAIL_FAST",
        description="Abort schema provisioning on the first table that cannot be created",
    )

    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8080, validation_alias="PORT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator(
        "database_user",
        "database_password",
        "database_host",
        "database_name",
        "database_url_override",
        mode="before",
    )
    @classmethod
    def blank_as_missing(cls, value: str | None) -> str | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def is_production(self) -> bool:
        return self.environment == PRODUCTION

    @property
    def sslmode(self) -> str:
        return "verify-full" if self.is_production else "disable"

    def connection_parameters(self) -> ConnectionParameters:
        """Resolve credentials, falling back to local defaults outside production."""

        resolved: dict[str, str] = {}
        missing: list[str] = []
        for attribute, default in _DEVELOPMENT_DEFAULTS.items():
            value = getattr(self, attribute)
            if value is None:
                if self.is_production:
                    missing.append(_ENVIRONMENT_NAMES[attribute])
                    continue
                value = default
            resolved[attribute] = value

        if missing:
            raise ConfigError(f"Missing required database settings: {', '.join(missing)}")

        return ConnectionParameters(
            user=resolved["database_user"],
            password=resolved["database_password"],
            host=resolved["database_host"],
            port=self.database_port,
            name=resolved["database_name"],
            sslmode=self.sslmode,
        )

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        params = self.connection_parameters()
        url = URL.create(
            "postgresql+psycopg",
            username=params.user,
            password=params.password,
            host=params.host,
            port=params.port,
            database=params.name,
            query={"sslmode": params.sslmode},
        )
        return url.render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    return Settings()
