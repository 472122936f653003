"""Configuration management for the Chargeback API.

Configuration is loaded from environment variables. The same settings drive
both the standalone HTTP server and the Lambda handler.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Well-known credentials accepted by DynamoDB Local
LOCAL_ACCESS_KEY_ID = "dummy-access-key-id"
LOCAL_SECRET_ACCESS_KEY = "dummy-secret-access-key"


class AppEnvironment(str, Enum):
    LOCAL = "local"
    TEST = "test"
    PROD = "prod"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AppConfig(BaseSettings):
    name: str = Field(default="chargeback-api")
    env: AppEnvironment = Field(default=AppEnvironment.LOCAL)
    version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)
    log_level: LogLevel = Field(default=LogLevel.INFO)

    model_config = SettingsConfigDict(env_prefix="APP_")

    @field_validator("env", mode="before")
    @classmethod
    def validate_env(cls, v: str | AppEnvironment) -> AppEnvironment:
        if isinstance(v, AppEnvironment):
            return v
        return AppEnvironment(v.lower())

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        if isinstance(v, LogLevel):
            return v
        # "warn" is accepted as an alias for WARNING
        value = v.upper()
        if value == "WARN":
            value = LogLevel.WARNING.value
        return LogLevel(value)


class ServerConfig(BaseSettings):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)
    workers: int = Field(default=1, ge=1)

    model_config = SettingsConfigDict(env_prefix="SERVER_")


class DynamoDBConfig(BaseSettings):
    # Empty endpoint means the regular AWS endpoint for the region
    endpoint: str = Field(default="")
    region: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices("dynamodb_region", "aws_region"),
    )
    table_name: str = Field(default="chargebacks")
    transaction_index: str = Field(default="transaction-id-index")
    merchant_index: str = Field(default="merchant-id-index")
    status_index: str = Field(default="status-index")

    # Only used together with a custom endpoint (DynamoDB Local)
    access_key_id: str = Field(default="")
    secret_access_key: SecretStr = Field(default=SecretStr(""))

    model_config = SettingsConfigDict(env_prefix="DYNAMODB_", populate_by_name=True)

    @property
    def is_local(self) -> bool:
        """True when a custom endpoint (e.g. DynamoDB Local) is configured."""
        return bool(self.endpoint)

    @property
    def static_credentials(self) -> tuple[str, str]:
        """Credentials for a custom endpoint, falling back to DynamoDB Local defaults."""
        if self.access_key_id:
            return self.access_key_id, self.secret_access_key.get_secret_value()
        return LOCAL_ACCESS_KEY_ID, LOCAL_SECRET_ACCESS_KEY


class ObservabilityConfig(BaseSettings):
    service_name: str = Field(default="chargeback-api")
    otlp_endpoint: str | None = Field(default=None)
    otlp_insecure: bool = Field(default=True)
    log_record_format: str = Field(default="json")

    model_config = SettingsConfigDict(env_prefix="OTEL_")

    @field_validator("log_record_format", mode="before")
    @classmethod
    def validate_log_record_format(cls, v: str) -> str:
        value = v.lower()
        # "text" is accepted as an alias for the console renderer
        if value == "text":
            value = "console"
        if value not in ("json", "console"):
            raise ValueError(f"invalid log format: {v}")
        return value


class SecurityConfig(BaseSettings):
    cors_allowed_origins: str = Field(default="*")
    cors_allow_methods: list[str] = Field(default=["GET", "POST", "PUT", "DELETE", "OPTIONS"])
    cors_allow_headers: list[str] = Field(default=["Content-Type", "Authorization"])

    model_config = SettingsConfigDict(env_prefix="SECURITY_")

    @field_validator("cors_allowed_origins", mode="after")
    @classmethod
    def validate_cors_allowed_origins(cls, v: str | list[str]) -> list[str]:
        """Parse comma-separated string into list of origins."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


class Settings(BaseSettings):
    app: AppConfig = Field(default_factory=AppConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    dynamodb: DynamoDBConfig = Field(default_factory=DynamoDBConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reload_settings() -> Settings:
    """Reload settings (useful for testing)."""
    get_settings.cache_clear()
    return get_settings()
