# app/services/scoring_service.py
"""
Motor de calificación de quizzes.

Valida un envío, calcula aciertos y puntos por pregunta y persiste el intento
junto con todas sus respuestas en una única transacción: o se escribe todo o
no se escribe nada.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.attempt import QuizAnswer, QuizAttempt
from app.models.question import Question
from app.models.quiz import Quiz
from app.models.user import User
from app.schemas.attempt import AnswerIn, SubmitResult

logger = logging.getLogger(__name__)


class ScoringError(Exception):
    """Error de negocio del motor de calificación."""
    status_code = 400

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_detail(self) -> dict:
        return {"message": self.message, **self.extra}


class NotFoundError(ScoringError):
    status_code = 404


class InvalidSubmissionError(ScoringError):
    status_code = 400


class MissingAnswersError(InvalidSubmissionError):
    def __init__(self, missing: List[int]):
        super().__init__("Answer all questions", missing=missing)
        self.missing = missing


class UnknownQuestionsError(InvalidSubmissionError):
    def __init__(self, missing: List[int]):
        super().__init__("Some questions were not found", missing=missing)
        self.missing = missing


class AttemptPersistenceError(ScoringError):
    status_code = 500


@dataclass
class ScoredAnswer:
    question_id: int
    selected_option: str
    is_correct: bool
    points_earned: float


@dataclass
class Tally:
    answers: List[ScoredAnswer]
    total: float
    max_score: float

    @property
    def correct(self) -> int:
        return sum(1 for a in self.answers if a.is_correct)


def collapse_answers(answers: Iterable[AnswerIn]) -> Dict[int, str]:
    """
    Reduce la lista de respuestas a un mapa question_id -> opción elegida.
    Si una pregunta aparece repetida se conserva la primera respuesta.
    """
    selections: Dict[int, str] = {}
    for answer in answers:
        selections.setdefault(answer.question_id, answer.selected_option)
    return selections


def compute_percent(total: float, max_score: float) -> float:
    if not max_score:
        return 0
    return round(total / max_score * 100, 2)


def tally(questions: Sequence[Question], selections: Dict[int, str]) -> Tally:
    """
    Califica cada pregunta contra la opción seleccionada (igualdad exacta,
    sensible a mayúsculas) y acumula el puntaje obtenido y el máximo.
    """
    scored = []
    total = 0.0
    max_score = 0.0
    for question in questions:
        selected = selections[question.id]
        points = question.points if question.points is not None else 1
        is_correct = selected == question.correct_answer
        earned = points if is_correct else 0
        total += earned
        max_score += points
        scored.append(ScoredAnswer(
            question_id=question.id,
            selected_option=selected,
            is_correct=is_correct,
            points_earned=earned,
        ))
    return Tally(answers=scored, total=total, max_score=max_score)


class QuizScoringService:
    """
    Servicio de calificación. Recibe la sesión de base de datos de quien lo
    invoca; no abre conexiones por su cuenta.
    """

    def __init__(self, db: Session):
        self.db = db

    def submit_quiz(
        self,
        user_id: int,
        quiz_id: int,
        answers: Sequence[AnswerIn],
        duration_ms: int = 0,
    ) -> SubmitResult:
        """
        Envío ligado a un quiz: todas las preguntas del quiz deben tener
        respuesta o el envío completo se rechaza sin escribir nada.
        No exige que el quiz esté publicado; eso solo limita su listado y lectura.
        """
        self._ensure_user(user_id)

        quiz = self.db.get(Quiz, quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz not found")
        if not answers:
            raise InvalidSubmissionError("answers must be provided")

        questions = (
            self.db.query(Question)
            .filter(Question.quiz_id == quiz_id)
            .order_by(Question.id)
            .all()
        )
        if not questions:
            raise InvalidSubmissionError("Quiz has no questions")

        selections = collapse_answers(answers)
        missing = [q.id for q in questions if q.id not in selections]
        if missing:
            logger.info(
                "Quiz %s submission by user %s rejected: %d unanswered questions",
                quiz_id, user_id, len(missing),
            )
            raise MissingAnswersError(missing)

        result = tally(questions, selections)
        attempt_id = self._persist(user_id, quiz_id, result, len(questions), duration_ms)

        logger.info(
            "Quiz %s submitted by user %s: attempt=%s score=%s/%s",
            quiz_id, user_id, attempt_id, result.total, result.max_score,
        )
        return self._result(attempt_id, quiz_id, result, len(questions))

    def submit_free_form(
        self,
        user_id: int,
        answers: Sequence[AnswerIn],
        duration_ms: int = 0,
    ) -> SubmitResult:
        """
        Envío libre sobre preguntas arbitrarias. Falla si alguna pregunta
        referenciada no existe; el intento queda sin quiz asociado.
        """
        self._ensure_user(user_id)
        if not answers:
            raise InvalidSubmissionError("answers must be a non-empty array")

        selections = collapse_answers(answers)
        question_ids = list(selections)

        found = self.db.query(Question).filter(Question.id.in_(question_ids)).all()
        by_id = {q.id: q for q in found}
        missing = [qid for qid in question_ids if qid not in by_id]
        if missing:
            logger.info("Free-form submission by user %s references unknown questions %s", user_id, missing)
            raise UnknownQuestionsError(missing)

        questions = [by_id[qid] for qid in question_ids]
        result = tally(questions, selections)
        attempt_id = self._persist(user_id, None, result, len(questions), duration_ms)

        logger.info(
            "Free-form quiz submitted by user %s: attempt=%s score=%s/%s",
            user_id, attempt_id, result.total, result.max_score,
        )
        return self._result(attempt_id, None, result, len(questions))

    def _ensure_user(self, user_id: int) -> None:
        if self.db.get(User, user_id) is None:
            raise NotFoundError("User not found")

    def _persist(
        self,
        user_id: int,
        quiz_id: Optional[int],
        result: Tally,
        num_questions: int,
        duration_ms: int,
    ) -> int:
        """
        Inserta el intento y luego sus respuestas dentro de la misma
        transacción. Ante cualquier error se hace rollback completo.
        """
        try:
            attempt = QuizAttempt(
                user_id=user_id,
                quiz_id=quiz_id,
                total_score=result.total,
                max_score=result.max_score,
                num_questions=num_questions,
                duration_ms=duration_ms or 0,
            )
            self.db.add(attempt)
            self.db.flush()

            self.db.add_all([
                QuizAnswer(
                    attempt_id=attempt.id,
                    question_id=answer.question_id,
                    selected_option=answer.selected_option,
                    is_correct=answer.is_correct,
                    points_earned=answer.points_earned,
                )
                for answer in result.answers
            ])
            self.db.flush()
            attempt_id = attempt.id
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Error persisting quiz attempt for user %s: %s", user_id, e, exc_info=True)
            raise AttemptPersistenceError(f"Could not save quiz attempt: {e.__class__.__name__}") from e
        return attempt_id

    @staticmethod
    def _result(attempt_id: int, quiz_id: Optional[int], result: Tally, num_questions: int) -> SubmitResult:
        return SubmitResult(
            attempt_id=attempt_id,
            quiz_id=quiz_id,
            score=result.total,
            max_score=result.max_score,
            percent=compute_percent(result.total, result.max_score),
            num_questions=num_questions,
            correct=result.correct,
        )

