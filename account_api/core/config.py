import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


DEFAULT_JWT_SECRET = "change-me"


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup."""

    app_env: str = "development"
    port: int = 3000
    database_url: str = "sqlite:///./account_api.db"

    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 1440

    session_cookie_name: str = "token"
    cookie_secure: bool = True

    cors_origins: tuple[str, ...] = ("http://localhost:3000",)
    admin_emails: frozenset[str] = field(default_factory=frozenset)

    log_level: str = "info"
    log_dir: str | None = "logs"

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def cookie_max_age(self) -> int:
        return self.jwt_expires_minutes * 60


def load_settings() -> Settings:
    load_dotenv()

    return Settings(
        app_env=os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "development",
        port=int(os.getenv("PORT", "3000")),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./account_api.db"),
        jwt_secret=os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        jwt_expires_minutes=int(os.getenv("JWT_EXPIRES_MINUTES", "1440")),
        session_cookie_name=os.getenv("SESSION_COOKIE_NAME", "token"),
        cookie_secure=_get_bool(os.getenv("COOKIE_SECURE"), default=True),
        cors_origins=_get_list(os.getenv("CORS_ORIGINS", "http://localhost:3000")),
        admin_emails=frozenset(email.lower() for email in _get_list(os.getenv("ADMIN_EMAILS"))),
        log_level=os.getenv("LOG_LEVEL", "info"),
        log_dir=os.getenv("LOG_DIR", "logs") or None,
    )


def validate_runtime_config(settings: Settings) -> None:
    if settings.is_production and settings.jwt_secret == DEFAULT_JWT_SECRET:
        raise RuntimeError("JWT_SECRET must be set in production.")
    if settings.jwt_expires_minutes <= 0:
        raise RuntimeError("JWT_EXPIRES_MINUTES must be a positive number of minutes.")
