from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from account_api.core.config import Settings
from account_api.core.errors import AuthenticationError
from account_api.models.user import User

REQUIRED_CLAIMS = ["sub", "role", "ver", "exp", "iat"]


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: str
    email: str | None
    token_version: int
    expires_at: datetime


def create_access_token(user: User, settings: Settings, expires_delta: timedelta | None = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expires_minutes)
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "role": user.role,
        "email": user.email,
        "ver": user.token_version or 0,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> TokenClaims:
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Session expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid token") from exc

    try:
        user_id = int(payload["sub"])
        token_version = int(payload["ver"])
    except (TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid token subject") from exc

    return TokenClaims(
        user_id=user_id,
        role=str(payload["role"]),
        email=payload.get("email"),
        token_version=token_version,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
