# app/db/models_registry.py
# Este archivo importa todos los modelos para que Alembic y create_all puedan detectarlos
# Se importa en alembic/env.py y en app.db.session

from app.db.base import Base
from app.models.user import User
from app.models.skill import Skill
from app.models.quiz import Quiz
from app.models.question import Question
from app.models.attempt import QuizAttempt, QuizAnswer

# Exportar Base para uso en Alembic
__all__ = ["Base", "User", "Skill", "Quiz", "Question", "QuizAttempt", "QuizAnswer"]
