"""
Authentication endpoints
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_identity, get_token_service
from app.core.security import TokenClaims, TokenService
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    SignupRequest,
    UserOut,
)
from app.services import auth_service

router = APIRouter()


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    body: SignupRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Register a new user and return it with a bearer token

    409 when the email is already registered.
    """
    user, token = auth_service.signup(
        db,
        tokens,
        email=body.email,
        password=body.password,
        full_name=body.full_name,
    )
    return AuthResponse(user=UserOut.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Authenticate by email and password

    401 for unknown email or wrong password, 403 for deactivated accounts.
    """
    user, token = auth_service.login(db, tokens, email=body.email, password=body.password)
    return AuthResponse(user=UserOut.model_validate(user), token=token)


@router.get("/profile", response_model=ProfileResponse)
async def profile(
    db: Session = Depends(get_db),
    identity: TokenClaims = Depends(get_current_identity),
):
    """Current user's profile; 404 if the account no longer exists."""
    user = auth_service.get_profile(db, identity.user_id)
    return ProfileResponse(user=UserOut.model_validate(user))
