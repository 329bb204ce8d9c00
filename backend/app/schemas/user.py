"""
Pydantic schemas for registration, login, and the profile view.
"""

from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

from app.schemas.settlement import CamelModel


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class ProfileResponse(CamelModel):
    id: str
    name: str
    email: str
    wallet_balance: int
    created_at: datetime

    model_config = {"from_attributes": True}


class Token(CamelModel):
    access_token: str
    token_type: str = "bearer"
