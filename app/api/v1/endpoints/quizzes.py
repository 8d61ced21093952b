from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_admin, get_current_user
from app.crud import crud_quiz, crud_skill
from app.db.session import get_db
from app.models.user import User
from app.schemas.question import question_payload
from app.schemas.quiz import Quiz, QuizCreate, QuizUpdate

router = APIRouter()


@router.post("/skills/{skill_id}/quizzes", response_model=Quiz, status_code=status.HTTP_201_CREATED)
def create_quiz(
    skill_id: int,
    quiz: QuizCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Crea un quiz dentro de un skill (solo administradores).
    """
    if not crud_skill.get_skill(db, skill_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Skill not found")
    return crud_quiz.create_quiz(db, quiz=quiz, skill_id=skill_id)


@router.get("/skills/{skill_id}/quizzes", response_model=List[Quiz])
def list_quizzes_for_skill(
    skill_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Lista los quizzes de un skill. Los estudiantes solo ven los publicados.
    """
    return crud_quiz.get_quizzes_for_skill(
        db, skill_id=skill_id, published_only=not current_user.is_admin
    )


@router.get("/quizzes/{quiz_id}")
def read_quiz_with_questions(
    quiz_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Devuelve el quiz con sus preguntas. correct_answer solo se incluye para
    administradores.
    """
    quiz = crud_quiz.get_quiz(db, quiz_id, with_questions=True)
    if not quiz or (not quiz.is_published and not current_user.is_admin):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quiz not found")

    payload = Quiz.model_validate(quiz).model_dump(mode="json")
    payload["questions"] = [
        question_payload(q, include_answer=current_user.is_admin) for q in quiz.questions
    ]
    return payload


@router.put("/quizzes/{quiz_id}", response_model=Quiz)
def update_quiz(
    quiz_id: int,
    quiz_update: QuizUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    quiz = crud_quiz.get_quiz(db, quiz_id)
    if not quiz:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quiz not found")
    return crud_quiz.update_quiz(db, db_quiz=quiz, quiz_update=quiz_update)


@router.delete("/quizzes/{quiz_id}")
def delete_quiz(
    quiz_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    quiz = crud_quiz.get_quiz(db, quiz_id)
    if not quiz:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quiz not found")

    crud_quiz.delete_quiz(db, db_quiz=quiz)
    return {"message": "Quiz deleted", "id": quiz_id}
