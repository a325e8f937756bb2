import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from account_api.auth.passwords import hash_password
from account_api.auth.permissions import authorize, can_act_on_user
from account_api.core.errors import AuthorizationError, ConflictError, NotFoundError
from account_api.models.user import ROLE_ADMIN, User
from account_api.schemas.user_schemas import UserUpdateRequest
from account_api.services.auth_service import EMAIL_TAKEN_MESSAGE, get_user_by_email

logger = structlog.get_logger(__name__)


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_user_for_actor(db: Session, user_id: int, actor: User) -> User:
    if not can_act_on_user(actor.id, actor.role, user_id):
        raise AuthorizationError("You can only access your own account")
    return get_user(db, user_id)


def update_user(db: Session, user_id: int, payload: UserUpdateRequest, actor: User) -> User:
    if not can_act_on_user(actor.id, actor.role, user_id):
        raise AuthorizationError("You can only update your own account")

    user = get_user(db, user_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    if "role" in changes and changes["role"] != user.role:
        if not authorize(ROLE_ADMIN, actor.role):
            raise AuthorizationError("Only admins can change user roles")
        user.role = changes["role"]

    if "email" in changes and changes["email"] != user.email:
        existing = get_user_by_email(db, changes["email"])
        if existing is not None and existing.id != user.id:
            raise ConflictError(EMAIL_TAKEN_MESSAGE)
        user.email = changes["email"]

    if "name" in changes:
        user.name = changes["name"]

    if "password" in changes:
        user.hashed_password = hash_password(changes["password"])
        user.token_version = (user.token_version or 0) + 1

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(EMAIL_TAKEN_MESSAGE) from exc
    db.refresh(user)

    logger.info(
        "User updated",
        user_id=user.id,
        actor_id=actor.id,
        fields=sorted(changes),
    )
    return user


def delete_user(db: Session, user_id: int, actor: User) -> None:
    if not authorize(ROLE_ADMIN, actor.role):
        raise AuthorizationError("Admin access required")
    if actor.id == user_id:
        raise AuthorizationError("Admins cannot delete their own account")

    user = get_user(db, user_id)
    db.delete(user)
    db.commit()

    logger.info("User deleted", user_id=user_id, actor_id=actor.id)
