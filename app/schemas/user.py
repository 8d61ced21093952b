from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.models.user import UserRoleEnum


class UserRegister(BaseModel):
    """
    Schema para el registro público de un usuario.
    """
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    role: Optional[UserRoleEnum] = None


class User(BaseModel):
    """
    Schema para devolver un usuario (sin el hash de la contraseña).
    """
    id: int
    name: str
    email: str
    role: UserRoleEnum
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
