from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rememberme.core.crypto import DEFAULT_HASH_ALGORITHM, DEFAULT_SECRET_LENGTH, check_algorithm
from rememberme.core.errors import ConfigurationError


class LedgerConfig(BaseModel):
    """Opciones reconocidas por TokenLedger. Inmutable: se fija al construir el ledger."""

    model_config = ConfigDict(frozen=True)

    cookie_name: str = "remembermecookie"
    secret_length: int = DEFAULT_SECRET_LENGTH
    table_name: str = "rememberme"
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
    # None -> ahora + 10 años en cada emisión
    expires_at: datetime | None = None
    cookie_path: str = "/"
    cookie_domain: str = ""
    cookie_secure: bool = False
    cookie_http_only: bool = False

    @field_validator("hash_algorithm")
    @classmethod
    def _known_algorithm(cls, v: str) -> str:
        try:
            return check_algorithm(v)
        except ConfigurationError as e:
            # pydantic sólo convierte ValueError en ValidationError
            raise ValueError(str(e)) from e

    @field_validator("secret_length")
    @classmethod
    def _positive_length(cls, v: int) -> int:
        if v < 1:
            raise ValueError("secret_length must be >= 1")
        return v

    @field_validator("cookie_name", "table_name")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v


class Settings(BaseSettings):
    # Base de datos
    db_url: str = Field("sqlite+aiosqlite:///./rememberme.sqlite3", alias="DB_URL")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Cookie "remember me"
    cookie_name: str = Field("remembermecookie", alias="REMEMBERME_COOKIE_NAME")
    secret_length: int = Field(DEFAULT_SECRET_LENGTH, alias="REMEMBERME_SECRET_LENGTH")
    table_name: str = Field("rememberme", alias="REMEMBERME_TABLE")
    hash_algorithm: str = Field(DEFAULT_HASH_ALGORITHM, alias="REMEMBERME_HASH_ALGO")
    expires_at: datetime | None = Field(None, alias="REMEMBERME_EXPIRES_AT")
    cookie_path: str = Field("/", alias="REMEMBERME_COOKIE_PATH")
    cookie_domain: str = Field("", alias="REMEMBERME_COOKIE_DOMAIN")
    cookie_secure: bool = Field(False, alias="REMEMBERME_COOKIE_SECURE")
    cookie_http_only: bool = Field(False, alias="REMEMBERME_COOKIE_HTTPONLY")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,  # permite defaults si no hay variable de entorno
    )

    def ledger_config(self) -> LedgerConfig:
        return LedgerConfig(
            cookie_name=self.cookie_name,
            secret_length=self.secret_length,
            table_name=self.table_name,
            hash_algorithm=self.hash_algorithm,
            expires_at=self.expires_at,
            cookie_path=self.cookie_path,
            cookie_domain=self.cookie_domain,
            cookie_secure=self.cookie_secure,
            cookie_http_only=self.cookie_http_only,
        )


settings = Settings()
