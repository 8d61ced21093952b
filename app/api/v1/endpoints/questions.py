import math
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_admin, get_current_user
from app.crud import crud_question, crud_quiz, crud_skill
from app.db.session import get_db
from app.models.user import User
from app.schemas.question import (
    BulkDeleteRequest,
    Question,
    QuestionCreate,
    QuestionUpdate,
    question_payload,
)
from app.utils.question_rules import QuestionRuleError, validate_question

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=Question, status_code=status.HTTP_201_CREATED)
def create_question(
    question: QuestionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Crea una pregunta (solo administradores). Si pertenece a un quiz y no se
    indica skill, hereda el skill del quiz.
    """
    try:
        validate_question(question.options, question.correct_answer)
    except QuestionRuleError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    skill_id = question.skill_id
    if question.quiz_id is not None:
        quiz = crud_quiz.get_quiz(db, question.quiz_id)
        if not quiz:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quiz not found")
        if skill_id is None:
            skill_id = quiz.skill_id
    if skill_id is not None and not crud_skill.get_skill(db, skill_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Skill not found")

    return crud_question.create_question(db, question=question, skill_id=skill_id)


@router.get("")
def read_questions(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    sort: str = "createdAt",
    dir: str = "DESC",
    q: Optional[str] = Query(None, description="Búsqueda en el texto de la pregunta"),
    skillId: Optional[int] = None,
    quizId: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Lista paginada de preguntas con filtros por skill, quiz y texto.
    """
    total, items = crud_question.get_questions(
        db,
        skip=(page - 1) * limit,
        limit=limit,
        sort=sort,
        direction=dir,
        search=(q or "").strip() or None,
        skill_id=skillId,
        quiz_id=quizId,
    )
    return {
        "page": page,
        "pageSize": limit,
        "total": total,
        "totalPages": math.ceil(total / limit),
        "items": [question_payload(item, include_answer=current_user.is_admin) for item in items],
    }


@router.get("/skill/{skill_id}")
def read_questions_by_skill(
    skill_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    shuffle: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    total, items = crud_question.get_questions_by_skill(
        db, skill_id=skill_id, skip=(page - 1) * limit, limit=limit, shuffle=shuffle
    )
    return {
        "skillId": skill_id,
        "page": page,
        "pageSize": limit,
        "total": total,
        "items": [question_payload(item, include_answer=current_user.is_admin) for item in items],
    }


@router.put("/{question_id}", response_model=Question)
def update_question(
    question_id: int,
    question_update: QuestionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Actualiza una pregunta. Opciones y respuesta correcta se validan con los
    valores resultantes (nuevos o existentes); si fallan no se modifica nada.
    """
    question = crud_question.get_question(db, question_id)
    if not question:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")

    options = question_update.options if question_update.options is not None else question.options
    correct_answer = (
        question_update.correct_answer
        if question_update.correct_answer is not None
        else question.correct_answer
    )
    try:
        validate_question(options, correct_answer)
    except QuestionRuleError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if question_update.quiz_id is not None and not crud_quiz.get_quiz(db, question_update.quiz_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quiz not found")
    if question_update.skill_id is not None and not crud_skill.get_skill(db, question_update.skill_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Skill not found")

    return crud_question.update_question(db, db_question=question, question_update=question_update)


@router.delete("/{question_id}")
def delete_question(
    question_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    question = crud_question.get_question(db, question_id)
    if not question:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")

    crud_question.delete_question(db, db_question=question)
    return {"message": "Question deleted", "id": question_id}


@router.delete("")
def bulk_delete_questions(
    body: BulkDeleteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Borrado masivo. Body: `{"ids": [1, 2, 3]}`
    """
    if not body.ids:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Provide ids: number[]")

    count = crud_question.delete_questions(db, body.ids)
    logger.info(f"Bulk delete of {count} questions by user {current_user.id}")
    return {"message": "Questions deleted", "count": count, "ids": body.ids}
