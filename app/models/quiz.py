# app/models/quiz.py
from sqlalchemy import (
    Boolean, Column, Integer, String, Text, ForeignKey, TIMESTAMP, func
)
from sqlalchemy.orm import relationship

from app.db.base import Base


class Quiz(Base):
    __tablename__ = 'quizzes'

    id = Column(Integer, primary_key=True)
    skill_id = Column(Integer, ForeignKey('skills.id', ondelete='CASCADE'), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    time_limit_sec = Column(Integer, nullable=False, default=0, server_default='0')  # 0 = sin límite
    is_published = Column(Boolean, nullable=False, default=False, server_default='false')
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), onupdate=func.now())

    skill = relationship("Skill", back_populates="quizzes")
    questions = relationship(
        "Question", back_populates="quiz", cascade="all, delete-orphan",
        passive_deletes=True, order_by="Question.id"
    )
    attempts = relationship(
        "QuizAttempt", back_populates="quiz", cascade="all, delete-orphan", passive_deletes=True
    )
