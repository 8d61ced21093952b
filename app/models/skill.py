# app/models/skill.py
from sqlalchemy import Column, Integer, String, TIMESTAMP, func
from sqlalchemy.orm import relationship

from app.db.base import Base


class Skill(Base):
    __tablename__ = 'skills'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(String(500))
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), onupdate=func.now())

    quizzes = relationship(
        "Quiz", back_populates="skill", cascade="all, delete-orphan", passive_deletes=True
    )
    # Relación heredada: preguntas ligadas directamente al skill (usada por los reportes)
    questions = relationship("Question", back_populates="skill")
