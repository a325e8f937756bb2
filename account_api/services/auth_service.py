"""Registration, credential checks and session revocation.

These functions take an explicit ``Session`` and never touch the HTTP layer,
so they can be called from scripts and tests as-is.
"""

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from account_api.auth.passwords import burn_verification, hash_password, verify_password
from account_api.core.config import Settings
from account_api.core.errors import AuthenticationError, ConflictError
from account_api.models.user import ROLE_ADMIN, ROLE_USER, User
from account_api.schemas.user_schemas import LoginRequest, RegisterRequest

logger = structlog.get_logger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
EMAIL_TAKEN_MESSAGE = "A user with this email already exists"


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def register_user(db: Session, payload: RegisterRequest, settings: Settings) -> User:
    if get_user_by_email(db, payload.email) is not None:
        raise ConflictError(EMAIL_TAKEN_MESSAGE)

    role = ROLE_ADMIN if payload.email in settings.admin_emails else ROLE_USER
    user = User(
        name=payload.name,
        email=payload.email,
        hashed_password=hash_password(payload.password),
        role=role,
        token_version=0,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # lost a race with a concurrent registration for the same email
        db.rollback()
        raise ConflictError(EMAIL_TAKEN_MESSAGE) from exc
    db.refresh(user)

    logger.info("User registered", user_id=user.id, role=user.role)
    return user


def authenticate_user(db: Session, payload: LoginRequest) -> User:
    user = get_user_by_email(db, payload.email)
    if user is None:
        burn_verification()
        logger.warning("Failed sign-in", reason="unknown_email")
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    if not verify_password(payload.password, user.hashed_password):
        logger.warning("Failed sign-in", reason="bad_password", user_id=user.id)
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    logger.info("User signed in", user_id=user.id)
    return user


def revoke_sessions(db: Session, user: User) -> User:
    user.token_version = (user.token_version or 0) + 1
    db.commit()
    db.refresh(user)
    logger.info("Sessions revoked", user_id=user.id)
    return user
