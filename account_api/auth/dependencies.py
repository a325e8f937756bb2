from collections.abc import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from account_api.auth import jwt_handler, session
from account_api.auth.permissions import authorize
from account_api.core.config import Settings
from account_api.core.errors import AuthenticationError, AuthorizationError
from account_api.database import get_db
from account_api.models.user import User


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def resolve_user(token: str | None, db: Session, settings: Settings) -> User:
    if not token:
        raise AuthenticationError()

    claims = jwt_handler.decode_access_token(token, settings)

    user = db.query(User).filter(User.id == claims.user_id).first()
    if user is None:
        raise AuthenticationError("Invalid token subject")
    if user.token_version != claims.token_version:
        raise AuthenticationError("Session has been revoked")
    return user


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    token = session.read_session_token(request, settings)
    return resolve_user(token, db, settings)


def get_optional_user(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User | None:
    token = session.read_session_token(request, settings)
    try:
        return resolve_user(token, db, settings)
    except AuthenticationError:
        return None


def require_role(role: str) -> Callable[..., User]:
    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if not authorize(role, current_user.role):
            raise AuthorizationError(f"{role.capitalize()} access required")
        return current_user

    return dependency
