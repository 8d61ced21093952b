from typing import List, Optional, TYPE_CHECKING
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import desc

from app.schemas.quiz import QuizCreate, QuizUpdate

if TYPE_CHECKING:
    from app.models.quiz import Quiz


def get_quiz(db: Session, quiz_id: int, with_questions: bool = False) -> Optional["Quiz"]:
    """
    Obtiene un quiz por su ID, opcionalmente con sus preguntas precargadas.
    """
    from app.models.quiz import Quiz
    query = db.query(Quiz).filter(Quiz.id == quiz_id)
    if with_questions:
        query = query.options(selectinload(Quiz.questions))
    return query.first()


def get_quizzes_for_skill(
    db: Session,
    skill_id: int,
    published_only: bool = False
) -> List["Quiz"]:
    """
    Lista los quizzes de un skill, del más reciente al más antiguo.
    Si published_only es True, solo devuelve quizzes publicados.
    """
    from app.models.quiz import Quiz
    query = db.query(Quiz).filter(Quiz.skill_id == skill_id)

    if published_only:
        query = query.filter(Quiz.is_published.is_(True))

    return query.order_by(desc(Quiz.created_at), desc(Quiz.id)).all()


def create_quiz(db: Session, quiz: QuizCreate, skill_id: int) -> "Quiz":
    from app.models.quiz import Quiz
    db_quiz = Quiz(
        skill_id=skill_id,
        title=quiz.title,
        description=quiz.description,
        time_limit_sec=quiz.time_limit_sec,
        is_published=quiz.is_published,
    )
    db.add(db_quiz)
    db.commit()
    db.refresh(db_quiz)
    return db_quiz


def update_quiz(db: Session, db_quiz: "Quiz", quiz_update: QuizUpdate) -> "Quiz":
    """
    Actualiza un quiz existente; los campos en null se ignoran.
    """
    update_data = quiz_update.model_dump(exclude_unset=True, exclude_none=True)

    for field, value in update_data.items():
        setattr(db_quiz, field, value)

    db.add(db_quiz)
    db.commit()
    db.refresh(db_quiz)
    return db_quiz


def delete_quiz(db: Session, db_quiz: "Quiz") -> "Quiz":
    """
    Elimina un quiz; sus preguntas e intentos se eliminan en cascada.
    """
    db.delete(db_quiz)
    db.commit()
    return db_quiz
