# app/api/v1/endpoints/auth.py
from datetime import timedelta
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core import security
from app.core.config import settings
from app.crud import crud_user
from app.db.session import get_db
from app.schemas.token import LoginResponse, Token, UserLogin
from app.schemas.user import User, UserRegister

router = APIRouter()
logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def _issue_token(user) -> str:
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return security.create_access_token(
        subject=user.email, expires_delta=access_token_expires, role=user.role.value
    )


@router.get("/ping", summary="Comprobación rápida del router de autenticación")
def ping():
    return {"ok": True}


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Registrar nuevo usuario")
def register_user(user_data: UserRegister, db: Session = Depends(get_db)):
    """
    Crea un nuevo usuario con rol `user`.
    """
    existing_user = crud_user.get_user_by_email(db, email=user_data.email)
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already exists",
        )

    if len(user_data.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
        )

    try:
        new_user = crud_user.create_user(
            db,
            name=user_data.name,
            email=user_data.email,
            password=user_data.password,
        )
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already exists",
        )

    logger.info(f"User registered: {new_user.email}")
    return {"message": "User registered", "user": User.model_validate(new_user)}


@router.post("/login", response_model=LoginResponse, summary="Login con email y contraseña (JSON)")
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    user = crud_user.get_user_by_email(db, email=credentials.email)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if not security.verify_password(credentials.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {"access_token": _issue_token(user), "token_type": "bearer", "user": user}


@router.post("/token", response_model=Token, summary="Autenticación con Email y Contraseña (OAuth2 form)")
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)
):
    user = crud_user.authenticate_user(db, email=form_data.username, password=form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {"access_token": _issue_token(user), "token_type": "bearer"}
