"""
Authentication schemas
"""
import re
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_serializer, field_validator

from app.utils.datetime_utils import iso_8601_utc


class SignupRequest(BaseModel):
    """Signup request schema"""
    email: EmailStr = Field(..., description="Email address (stored lowercase)")
    password: str = Field(..., max_length=128, description="Password")
    full_name: str = Field(..., description="Display name")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Require 8+ chars with upper, lower, digit and special character"""
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[0-9]", v):
            raise ValueError("Password must contain at least one number")
        if not re.search(r"[^A-Za-z0-9]", v):
            raise ValueError("Password must contain at least one special character")
        return v

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Full name must be at least 2 characters")
        return v


class LoginRequest(BaseModel):
    """Login request schema"""
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, description="Password")


class UserOut(BaseModel):
    """Public view of a user; never includes the password hash"""
    id: int
    email: str
    full_name: str
    role: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at")
    def _ser_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        return iso_8601_utc(dt)


class AuthResponse(BaseModel):
    """Signup/login response: the user plus a bearer token"""
    user: UserOut
    token: str
    token_type: str = "bearer"


class ProfileResponse(BaseModel):
    user: UserOut
