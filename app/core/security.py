"""
Security utilities: password hashing and session tokens
"""
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Dict, Optional

import bcrypt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from jose import JWTError, jwt

from app.core.config import Settings
from app.core.exceptions import InvalidToken
from app.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)

# New hashes are argon2; bcrypt hashes imported from the previous system still verify.
_argon2 = PasswordHasher()
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str) -> str:
    """Hash a password with argon2"""
    return _argon2.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against an argon2 or bcrypt hash"""
    if not hashed_password:
        return False

    if hashed_password.startswith("$argon2"):
        try:
            return _argon2.verify(hashed_password, plain_password)
        except (VerificationError, InvalidHashError):
            return False

    if hashed_password.startswith(BCRYPT_PREFIXES):
        # Bcrypt only looks at the first 72 bytes
        password_bytes = plain_password.encode("utf-8")[:72]
        try:
            return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
        except ValueError:
            logger.warning("Malformed bcrypt hash encountered during verification")
            return False

    logger.warning("Unknown password hash scheme")
    return False


def needs_rehash(hashed_password: str) -> bool:
    """True for legacy bcrypt hashes or argon2 hashes with outdated parameters"""
    if hashed_password.startswith(BCRYPT_PREFIXES):
        return True
    try:
        return _argon2.check_needs_rehash(hashed_password)
    except InvalidHashError:
        return True


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a session token"""
    user_id: int
    email: str
    role: str


class TokenService:
    """
    Issues and verifies signed, time-limited session tokens.

    Tokens are opaque to callers; verify() is the only way to read them.
    There is no revocation list: expiry is the only bound on a token's life.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 7 * 24 * 60,
        issuer: str = "attendance-task-system",
    ):
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes
        self.issuer = issuer

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret_key=settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            expire_minutes=settings.JWT_EXPIRE_MINUTES,
            issuer=settings.JWT_ISSUER,
        )

    def issue(self, claims: TokenClaims, expires_minutes: Optional[int] = None) -> str:
        """Create a signed token for the given identity"""
        if expires_minutes is None:
            expires_minutes = self.expire_minutes

        issued_at = now_utc()
        # 'sub' must be a string (RFC 7519)
        to_encode: Dict = {
            "sub": str(claims.user_id),
            "email": claims.email,
            "role": claims.role,
            "iss": self.issuer,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=expires_minutes),
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and verify a token

        Raises:
            InvalidToken: bad signature, wrong issuer, expired, or malformed claims
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
            )
        except JWTError as e:
            logger.debug("Token rejected: %s", e)
            raise InvalidToken()

        try:
            return TokenClaims(
                user_id=int(payload["sub"]),
                email=str(payload["email"]),
                role=str(payload["role"]),
            )
        except (KeyError, TypeError, ValueError):
            raise InvalidToken()
