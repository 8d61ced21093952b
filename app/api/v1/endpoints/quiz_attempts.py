# app/api/v1/endpoints/quiz_attempts.py
"""
Endpoints del motor de calificación: envío de quizzes e historial de intentos.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.v1.endpoints.metrics import quiz_submissions_total
from app.core.deps import ensure_self_or_admin, get_current_user
from app.crud import crud_attempt
from app.db.session import get_db
from app.models.user import User
from app.schemas.attempt import AttemptPage, FreeFormSubmitRequest, QuizSubmitRequest, SubmitResult
from app.services.scoring_service import QuizScoringService, ScoringError

router = APIRouter()


def get_scoring_service(db: Session = Depends(get_db)) -> QuizScoringService:
    return QuizScoringService(db)


def _http_error(error: ScoringError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.to_detail())


@router.post(
    "/submit",
    response_model=SubmitResult,
    summary="Enviar un quiz completo",
    description="Califica todas las preguntas de un quiz y guarda el intento de forma atómica."
)
def submit_quiz(
    request: QuizSubmitRequest,
    service: QuizScoringService = Depends(get_scoring_service),
    current_user: User = Depends(get_current_user),
):
    """
    - **userId**: usuario que responde (un estudiante solo puede enviar por sí mismo)
    - **quizId**: quiz a calificar
    - **answers**: lista de `{questionId, selected_option}`; si una pregunta se repite cuenta la primera
    - **durationMs**: tiempo reportado por el cliente
    """
    ensure_self_or_admin(current_user, request.user_id)
    try:
        result = service.submit_quiz(
            user_id=request.user_id,
            quiz_id=request.quiz_id,
            answers=request.answers,
            duration_ms=request.duration_ms,
        )
    except ScoringError as e:
        quiz_submissions_total.labels(mode="quiz", outcome="rejected" if e.status_code < 500 else "error").inc()
        raise _http_error(e) from e

    quiz_submissions_total.labels(mode="quiz", outcome="accepted").inc()
    return result


@router.post(
    "/start",
    response_model=SubmitResult,
    summary="Enviar respuestas libres",
    description="Califica un conjunto arbitrario de preguntas sin quiz asociado."
)
def start_quiz(
    request: FreeFormSubmitRequest,
    service: QuizScoringService = Depends(get_scoring_service),
    current_user: User = Depends(get_current_user),
):
    ensure_self_or_admin(current_user, request.user_id)
    try:
        result = service.submit_free_form(
            user_id=request.user_id,
            answers=request.answers,
            duration_ms=request.duration_ms,
        )
    except ScoringError as e:
        quiz_submissions_total.labels(mode="free_form", outcome="rejected" if e.status_code < 500 else "error").inc()
        raise _http_error(e) from e

    quiz_submissions_total.labels(mode="free_form", outcome="accepted").inc()
    return result


@router.get("/attempts/{user_id}", response_model=AttemptPage)
def get_attempts_by_user_id(
    user_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    withAnswers: bool = Query(False, description="Incluir el detalle de respuestas por pregunta"),
    quizId: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Historial paginado de intentos de un usuario (el propio usuario o un admin).
    """
    ensure_self_or_admin(current_user, user_id)
    return crud_attempt.get_attempts_for_user(
        db,
        user_id=user_id,
        page=page,
        limit=limit,
        with_answers=withAnswers,
        quiz_id=quizId,
    )
