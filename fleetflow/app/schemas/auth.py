"""
Authentication Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List
from fleetflow.app.models.enums import UserRole


class UserLogin(BaseModel):
    # Plain str: the demo accounts use addresses EmailStr would still accept,
    # but login must not reveal format rules
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Login result: the bearer token and what the role can see."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user_id: int
    email: str
    name: str
    role: UserRole
    role_label: str = Field(..., description="Display name of the role, e.g. Safety Officer")
    allowed_pages: List[str] = Field(..., description="Dashboard paths the role may open")


class CurrentUserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: UserRole
    is_active: bool
    role_label: str
    allowed_pages: List[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PageAccessResponse(BaseModel):
    page: str
    role: UserRole
    allowed: bool


class MessageResponse(BaseModel):
    message: str
