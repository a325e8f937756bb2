from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from account_api.auth import jwt_handler, session
from account_api.auth.dependencies import get_current_user, get_optional_user, get_settings
from account_api.core.config import Settings
from account_api.database import get_db
from account_api.models.user import User
from account_api.schemas.user_schemas import (
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserEnvelope,
    UserResponse,
)
from account_api.services import auth_service

router = APIRouter(tags=['auth'])


@router.post('/sign-up', response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def sign_up(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = auth_service.register_user(db, payload, settings)
    return UserEnvelope(message='User registered', user=UserResponse.model_validate(user))


@router.post('/sign-in', response_model=UserEnvelope)
def sign_in(
    payload: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = auth_service.authenticate_user(db, payload)
    token = jwt_handler.create_access_token(user, settings)
    session.set_session_cookie(response, token, settings)
    return UserEnvelope(message='User signed in', user=UserResponse.model_validate(user))


@router.post('/sign-out', response_model=MessageResponse)
def sign_out(
    response: Response,
    current_user: User | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if current_user is not None:
        auth_service.revoke_sessions(db, current_user)
    session.clear_session_cookie(response, settings)
    return MessageResponse(message='User signed out')


@router.get('/me', response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
