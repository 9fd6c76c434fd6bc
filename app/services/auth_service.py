"""
Auth service - signup, login and profile lookup against the user store
"""
import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    AccountInactive,
    EmailAlreadyRegistered,
    Unauthenticated,
    UserNotFound,
)
from app.core.security import TokenClaims, TokenService, hash_password, needs_rehash, verify_password
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def claims_for(user: User) -> TokenClaims:
    return TokenClaims(user_id=user.id, email=user.email, role=user.role)


def signup(
    db: Session,
    tokens: TokenService,
    email: str,
    password: str,
    full_name: str,
) -> Tuple[User, str]:
    """
    Register a new user with role 'user' and return it with a fresh token

    Raises:
        EmailAlreadyRegistered: the email is taken (pre-check or unique constraint)
    """
    email = normalize_email(email)
    if get_user_by_email(db, email) is not None:
        raise EmailAlreadyRegistered()

    user = User(
        email=email,
        password_hash=hash_password(password),
        full_name=full_name.strip(),
        role=UserRole.USER.value,
        is_active=True,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("signup lost a concurrent insert for email=%s", email)
        raise EmailAlreadyRegistered()
    db.refresh(user)

    logger.info("User registered: id=%s email=%s", user.id, user.email)
    return user, tokens.issue(claims_for(user))


def login(db: Session, tokens: TokenService, email: str, password: str) -> Tuple[User, str]:
    """
    Authenticate by email/password

    Raises:
        Unauthenticated: unknown email or wrong password (same message for both)
        AccountInactive: the account is deactivated
    """
    user = get_user_by_email(db, email)
    if not user:
        raise Unauthenticated(INVALID_CREDENTIALS)

    if not user.is_active:
        raise AccountInactive()

    if not verify_password(password, user.password_hash):
        raise Unauthenticated(INVALID_CREDENTIALS)

    # Upgrade legacy bcrypt hashes on successful login
    if needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        db.commit()
        db.refresh(user)
        logger.info("Password hash upgraded for user id=%s", user.id)

    return user, tokens.issue(claims_for(user))


def get_profile(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise UserNotFound()
    return user
