# app/models/user.py
import enum
from sqlalchemy import (
    Column, Integer, String, TIMESTAMP, Enum as SAEnum, func
)
from sqlalchemy.orm import relationship

from app.db.base import Base


class UserRoleEnum(str, enum.Enum):
    user = "user"
    admin = "admin"


class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(
        SAEnum(UserRoleEnum, name='user_role_enum'),
        nullable=False, default=UserRoleEnum.user, server_default=UserRoleEnum.user.value
    )
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), onupdate=func.now())

    attempts = relationship(
        "QuizAttempt", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRoleEnum.admin

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"
