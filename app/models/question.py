# app/models/question.py
from sqlalchemy import (
    JSON, Column, Integer, String, Text, ForeignKey, TIMESTAMP, func
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from app.db.base import Base


class Question(Base):
    __tablename__ = 'questions'

    id = Column(Integer, primary_key=True)
    quiz_id = Column(Integer, ForeignKey('quizzes.id', ondelete='CASCADE'), nullable=True, index=True)
    skill_id = Column(Integer, ForeignKey('skills.id'), nullable=True, index=True)
    question_text = Column(Text, nullable=False)
    options = Column(JSON().with_variant(JSONB, 'postgresql'), nullable=False, default=list)  # ["opA", "opB", ...]
    correct_answer = Column(String(255), nullable=False)
    points = Column(Integer, nullable=False, default=1, server_default='1')
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), onupdate=func.now())

    quiz = relationship("Quiz", back_populates="questions")
    skill = relationship("Skill", back_populates="questions")
    answers = relationship(
        "QuizAnswer", back_populates="question", cascade="all, delete-orphan", passive_deletes=True
    )
