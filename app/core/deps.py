"""
Dependencies and guards for FastAPI endpoints
"""
from typing import Generator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import Settings
from app.core.exceptions import Unauthenticated
from app.core.security import TokenClaims, TokenService

# auto_error=False: missing/malformed headers are rejected with our own error envelope
security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_db(request: Request) -> Generator:
    """Dependency for getting database session"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def _verify(credentials: HTTPAuthorizationCredentials, tokens: TokenService) -> TokenClaims:
    if not credentials.credentials:
        raise Unauthenticated()
    return tokens.verify(credentials.credentials)


async def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """
    Resolve the caller from the Bearer token

    Missing or non-Bearer Authorization header -> 401 "Not authenticated".
    Token fails verification -> 401 "Invalid or expired token".
    The identity comes from the token claims only; no store lookup.
    """
    if credentials is None:
        raise Unauthenticated()

    identity = _verify(credentials, tokens)
    request.state.identity = identity
    return identity


async def get_optional_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_token_service),
) -> Optional[TokenClaims]:
    """Identity when a valid Bearer token is present, otherwise None. Never rejects."""
    request.state.identity = None
    if credentials is None:
        return None
    try:
        identity = _verify(credentials, tokens)
    except Unauthenticated:
        return None
    request.state.identity = identity
    return identity
