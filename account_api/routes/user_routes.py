from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from account_api.auth.dependencies import get_current_user, require_role
from account_api.database import get_db
from account_api.models.user import ROLE_ADMIN, User
from account_api.schemas.user_schemas import (
    MessageResponse,
    UserEnvelope,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)
from account_api.services import user_service

router = APIRouter(tags=['users'])

require_admin = require_role(ROLE_ADMIN)


@router.get('', response_model=UserListResponse)
def list_users(
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    users = user_service.list_users(db)
    return UserListResponse(count=len(users), users=[UserResponse.model_validate(user) for user in users])


@router.get('/{user_id}', response_model=UserResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.get_user_for_actor(db, user_id, current_user)


@router.patch('/{user_id}', response_model=UserEnvelope)
def update_user(
    user_id: int,
    payload: UserUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = user_service.update_user(db, user_id, payload, current_user)
    return UserEnvelope(message='User updated', user=UserResponse.model_validate(user))


@router.delete('/{user_id}', response_model=MessageResponse)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user_service.delete_user(db, user_id, current_user)
    return MessageResponse(message='User deleted')
