import math
from typing import Dict, List, Optional, Tuple

from sqlalchemy import case, desc, func
from sqlalchemy.orm import Session, joinedload, selectinload

from app.models.attempt import QuizAnswer, QuizAttempt
from app.models.quiz import Quiz
from app.schemas.attempt import AttemptAnswerDetail, AttemptPage, AttemptSummary
from app.services.scoring_service import compute_percent


def _answer_counts(db: Session, attempt_ids: List[int]) -> Dict[int, Tuple[int, int]]:
    """
    Cuenta, por intento, las respuestas registradas y cuántas son correctas.
    """
    if not attempt_ids:
        return {}
    rows = (
        db.query(
            QuizAnswer.attempt_id,
            func.count(QuizAnswer.id),
            func.sum(case((QuizAnswer.is_correct.is_(True), 1), else_=0)),
        )
        .filter(QuizAnswer.attempt_id.in_(attempt_ids))
        .group_by(QuizAnswer.attempt_id)
        .all()
    )
    return {attempt_id: (int(total or 0), int(correct or 0)) for attempt_id, total, correct in rows}


def _answer_details(attempt: QuizAttempt) -> List[AttemptAnswerDetail]:
    details = []
    for answer in attempt.answers:
        question = answer.question
        details.append(AttemptAnswerDetail(
            answer_id=answer.id,
            question_id=answer.question_id,
            question_text=question.question_text if question else None,
            selected_option=answer.selected_option,
            correct_option=question.correct_answer if question else None,
            is_correct=bool(answer.is_correct),
            points_earned=answer.points_earned or 0,
        ))
    return details


def get_attempts_for_user(
    db: Session,
    user_id: int,
    page: int = 1,
    limit: int = 20,
    with_answers: bool = False,
    quiz_id: Optional[int] = None,
) -> AttemptPage:
    """
    Historial paginado de intentos de un usuario, del más reciente al más
    antiguo, enriquecido con el quiz y su skill.

    El porcentaje se recalcula a partir de los totales guardados; nunca se
    vuelve a calificar.
    """
    query = db.query(QuizAttempt).filter(QuizAttempt.user_id == user_id)
    if quiz_id:
        query = query.filter(QuizAttempt.quiz_id == quiz_id)

    total = query.count()

    options = [joinedload(QuizAttempt.quiz).joinedload(Quiz.skill)]
    if with_answers:
        options.append(selectinload(QuizAttempt.answers).joinedload(QuizAnswer.question))

    attempts = (
        query.options(*options)
        .order_by(desc(QuizAttempt.created_at), desc(QuizAttempt.id))
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    counts = _answer_counts(db, [a.id for a in attempts])

    items = []
    for attempt in attempts:
        attempted, correct = counts.get(attempt.id, (0, 0))
        quiz = attempt.quiz
        skill = quiz.skill if quiz else None
        items.append(AttemptSummary(
            attempt_id=attempt.id,
            quiz_id=attempt.quiz_id,
            quiz_title=quiz.title if quiz else None,
            quiz_description=quiz.description if quiz else None,
            skill_id=skill.id if skill else None,
            skill_name=skill.name if skill else None,
            score=attempt.total_score or 0,
            max_score=attempt.max_score or 0,
            percent=compute_percent(attempt.total_score or 0, attempt.max_score or 0),
            num_questions=attempt.num_questions or 0,
            attempted_questions=attempted,
            correct=correct,
            incorrect=max(attempted - correct, 0),
            duration_ms=attempt.duration_ms or 0,
            created_at=attempt.created_at,
            answers=_answer_details(attempt) if with_answers else None,
        ))

    return AttemptPage(
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit) if limit else 0,
        items=items,
    )
