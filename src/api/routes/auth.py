from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.sqlite.repos import SQLiteUserRepo
from src.api.deps import get_auth_adapter, get_rules, get_session, get_user_repo
from src.api.schemas import Token, UserResponse
from src.domain.entities import SessionContext
from src.rules.models import Rules

router = APIRouter()


@router.post("/login", response_model=Token)
async def login_for_access_token(
    response: Response,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    auth: JWTAuthAdapter = Depends(get_auth_adapter),
    rules: Rules = Depends(get_rules),
) -> Token:
    """Authenticate user and return access token."""
    user = user_repo.get_by_email(form_data.username)
    if not user or not auth.verify_password(form_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if user.status != "active":
        raise HTTPException(status_code=400, detail="User account is inactive")

    ttl = rules.auth.token_ttl_minutes
    access_token = auth.create_token(user.id, ttl)

    # Set HttpOnly Cookie
    response.set_cookie(
        key="access_token",
        value=f"Bearer {access_token}",
        httponly=True,
        max_age=ttl * 60,
        samesite="lax",
        secure=False,  # Set to True for HTTPS prod
    )

    return Token(access_token=access_token, token_type="bearer")


@router.post("/logout")
def logout(response: Response) -> dict[str, str]:
    response.delete_cookie(key="access_token")
    return {"status": "success"}


@router.get("/me", response_model=UserResponse)
def read_users_me(
    session: SessionContext = Depends(get_session),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
) -> UserResponse:
    user = user_repo.get_by_id(session.user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    return UserResponse(
        id=str(user.id),
        email=user.email,
        display_name=user.display_name,
        roles=user.roles,
    )
