# app/models/attempt.py
from sqlalchemy import (
    BigInteger, Boolean, Column, Float, Integer, String, ForeignKey, TIMESTAMP, func
)
from sqlalchemy.orm import relationship

from app.db.base import Base


class QuizAttempt(Base):
    """
    Un evento de calificación. Inmutable una vez creado.
    """
    __tablename__ = 'quiz_attempts'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    quiz_id = Column(Integer, ForeignKey('quizzes.id', ondelete='CASCADE'), nullable=True, index=True)
    total_score = Column(Float, nullable=False, default=0)
    max_score = Column(Float, nullable=False, default=0)
    num_questions = Column(Integer, nullable=False, default=0)
    duration_ms = Column(BigInteger, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False, index=True)

    user = relationship("User", back_populates="attempts")
    quiz = relationship("Quiz", back_populates="attempts")
    answers = relationship(
        "QuizAnswer", back_populates="attempt", cascade="all, delete-orphan",
        passive_deletes=True, order_by="QuizAnswer.id"
    )

    def __repr__(self):
        return f"<QuizAttempt(id={self.id}, user_id={self.user_id}, score={self.total_score}/{self.max_score})>"


class QuizAnswer(Base):
    """
    Respuesta a una pregunta dentro de un intento. Es una foto histórica:
    is_correct y points_earned no se recalculan si la pregunta cambia.
    """
    __tablename__ = 'quiz_answers'

    id = Column(Integer, primary_key=True)
    attempt_id = Column(Integer, ForeignKey('quiz_attempts.id', ondelete='CASCADE'), nullable=False, index=True)
    question_id = Column(Integer, ForeignKey('questions.id', ondelete='CASCADE'), nullable=False, index=True)
    selected_option = Column(String(255), nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)
    points_earned = Column(Float, nullable=False, default=0)

    attempt = relationship("QuizAttempt", back_populates="answers")
    question = relationship("Question", back_populates="answers")
