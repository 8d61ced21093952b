from typing import List, Optional, Sequence, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import asc, desc, func

from app.models.question import Question
from app.schemas.question import QuestionCreate, QuestionUpdate

SORTABLE_FIELDS = {
    "createdAt": Question.created_at,
    "created_at": Question.created_at,
    "id": Question.id,
    "points": Question.points,
    "question_text": Question.question_text,
}


def get_question(db: Session, question_id: int) -> Optional[Question]:
    return db.get(Question, question_id)


def get_questions(
    db: Session,
    skip: int = 0,
    limit: int = 20,
    sort: str = "createdAt",
    direction: str = "DESC",
    search: Optional[str] = None,
    skill_id: Optional[int] = None,
    quiz_id: Optional[int] = None,
) -> Tuple[int, List[Question]]:
    """
    Lista preguntas con paginación, orden y filtros opcionales.

    Returns:
        (total, items) donde total es el conteo sin paginar
    """
    query = db.query(Question)

    if skill_id:
        query = query.filter(Question.skill_id == skill_id)
    if quiz_id:
        query = query.filter(Question.quiz_id == quiz_id)
    if search:
        query = query.filter(Question.question_text.ilike(f"%{search}%"))

    total = query.count()

    column = SORTABLE_FIELDS.get(sort, Question.created_at)
    order = asc if direction.upper() == "ASC" else desc
    items = query.order_by(order(column), order(Question.id)).offset(skip).limit(limit).all()
    return total, items


def get_questions_by_skill(
    db: Session,
    skill_id: int,
    skip: int = 0,
    limit: int = 20,
    shuffle: bool = False,
) -> Tuple[int, List[Question]]:
    query = db.query(Question).filter(Question.skill_id == skill_id)
    total = query.count()

    if shuffle:
        query = query.order_by(func.random())
    else:
        query = query.order_by(desc(Question.created_at), desc(Question.id))
    return total, query.offset(skip).limit(limit).all()


def create_question(db: Session, question: QuestionCreate, skill_id: Optional[int] = None) -> Question:
    """
    Crea una pregunta. Opciones y respuesta correcta llegan ya validadas.
    """
    db_question = Question(
        quiz_id=question.quiz_id,
        skill_id=skill_id if skill_id is not None else question.skill_id,
        question_text=question.question_text,
        options=list(question.options),
        correct_answer=question.correct_answer,
        points=question.points,
    )
    db.add(db_question)
    db.commit()
    db.refresh(db_question)
    return db_question


def update_question(db: Session, db_question: Question, question_update: QuestionUpdate) -> Question:
    update_data = question_update.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        if field in ("question_text", "options", "correct_answer", "points") and value is None:
            continue
        if field == "options":
            value = list(value)
        setattr(db_question, field, value)

    db.add(db_question)
    db.commit()
    db.refresh(db_question)
    return db_question


def delete_question(db: Session, db_question: Question) -> Question:
    db.delete(db_question)
    db.commit()
    return db_question


def delete_questions(db: Session, ids: Sequence[int]) -> int:
    """
    Borrado masivo por IDs. Devuelve cuántas preguntas existían y se borraron.
    """
    questions = db.query(Question).filter(Question.id.in_(list(ids))).all()
    for question in questions:
        db.delete(question)
    db.commit()
    return len(questions)
