from typing import Optional

from pydantic import BaseModel

from app.schemas.user import User


class Token(BaseModel):
    """
    Schema para el token de acceso devuelto por la API.
    """
    access_token: str
    token_type: str


class LoginResponse(Token):
    """
    Token más los datos públicos del usuario autenticado.
    """
    user: User


class TokenPayload(BaseModel):
    """
    Schema para el payload del token JWT.
    """
    sub: Optional[str] = None
    role: Optional[str] = None


class UserLogin(BaseModel):
    """
    Schema para el login del usuario.
    """
    email: str
    password: str
