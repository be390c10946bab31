import os
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from user_service.errors import ConfigError

DEFAULT_PORT = 3001


class Settings(BaseModel):
    """Process configuration. Immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    host: str = Field("0.0.0.0", description="Interface to bind the HTTP server to")
    port: int = Field(DEFAULT_PORT, ge=1, le=65535, description="Listening port")
    database_dsn: str = Field(..., min_length=1, description="libpq connection string / URL")
    db_pool_min: int = Field(1, ge=1)
    db_pool_max: int = Field(10, ge=1)
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])
    debug: bool = False
    log_level: str = "INFO"


def _required_env(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name)
    if not value:
        raise ConfigError(
            f"Missing required environment variable '{name}'. "
            "Set POSTGRES_URL or the POSTGRES_* variables in the environment or .env."
        )
    return value


def _build_dsn(environ: Mapping[str, str]) -> str:
    """
    Build DSN from the standardized database env vars.

    Uses:
      - POSTGRES_URL (optional full DSN; if provided, it wins)
      - POSTGRES_USER, POSTGRES_PASSWORD, POSTGRES_DB, POSTGRES_PORT
    """
    url = environ.get("POSTGRES_URL")
    if url:
        return url

    user = _required_env(environ, "POSTGRES_USER")
    password = _required_env(environ, "POSTGRES_PASSWORD")
    db = _required_env(environ, "POSTGRES_DB")
    port = _required_env(environ, "POSTGRES_PORT")
    host = environ.get("POSTGRES_HOST", "localhost")
    return f"postgresql://{user}:{password}@{host}:{port}/{db}"


def _parse_origins(raw: Optional[str]) -> List[str]:
    if not raw:
        return ["*"]
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def _parse_bool(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() in ("1", "true", "yes", "on")


# PUBLIC_INTERFACE
def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Load settings from the environment.

    When ``environ`` is omitted, a ``.env`` file is loaded first; variables
    already present in the process environment take precedence over it.
    Raises ConfigError on missing or invalid values.
    """
    if environ is None:
        load_dotenv(override=False)
        environ = os.environ

    raw = {
        "host": environ.get("HOST") or "0.0.0.0",
        "port": environ.get("PORT") or DEFAULT_PORT,
        "database_dsn": _build_dsn(environ),
        "db_pool_min": environ.get("DB_POOL_MIN") or 1,
        "db_pool_max": environ.get("DB_POOL_MAX") or 10,
        "cors_allow_origins": _parse_origins(environ.get("CORS_ALLOW_ORIGINS")),
        "debug": _parse_bool(environ.get("DEBUG")),
        "log_level": (environ.get("LOG_LEVEL") or "INFO").upper(),
    }
    try:
        settings = Settings(**raw)
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
        raise ConfigError(f"Invalid configuration value(s): {fields}", details={"errors": str(exc)}) from exc

    if settings.db_pool_min > settings.db_pool_max:
        raise ConfigError("DB_POOL_MIN must not exceed DB_POOL_MAX")
    return settings
