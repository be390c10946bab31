from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class APIMessage(BaseModel):
    message: str = Field(..., description="Human readable message")


class ErrorResponse(BaseModel):
    detail: str = Field(..., description="Human readable error message")
    code: str = Field(..., description="Machine readable error code")


class User(BaseModel):
    id: int
    name: str
    email: EmailStr
    created_at: datetime


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailStr = Field(..., description="User email address")


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
