from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.security import get_password_hash, verify_password
from app.models.user import User, UserRoleEnum
from app.schemas.user import UserUpdate


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """
    Obtiene un usuario por su email.
    """
    return db.query(User).filter(User.email == email).first()


def get_users(db: Session, skip: int = 0, limit: int = 100) -> List[User]:
    return db.query(User).order_by(User.id).offset(skip).limit(limit).all()


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """
    Autentica un usuario verificando email y contraseña.
    """
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def create_user(
    db: Session,
    name: str,
    email: str,
    password: str = None,
    hashed_password: str = None,
    role: UserRoleEnum = UserRoleEnum.user,
) -> User:
    """
    Crea un nuevo usuario.
    Puede aceptar password plano O hashed_password (no ambos).
    """
    if hashed_password is None:
        if password is None:
            raise ValueError("Debe proporcionar password o hashed_password")
        hashed_password = get_password_hash(password)

    db_user = User(
        name=name or email.split('@')[0],  # Usar email como fallback
        email=email,
        hashed_password=hashed_password,
        role=role,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_user(db: Session, db_user: User, user_update: UserUpdate) -> User:
    """
    Actualiza un usuario existente. Si llega password se vuelve a hashear.
    """
    update_data = user_update.model_dump(exclude_unset=True, exclude_none=True)

    password = update_data.pop("password", None)
    if password:
        db_user.hashed_password = get_password_hash(password)

    for field, value in update_data.items():
        setattr(db_user, field, value)

    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def delete_user(db: Session, db_user: User) -> User:
    db.delete(db_user)
    db.commit()
    return db_user
