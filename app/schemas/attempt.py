from datetime import datetime
import math
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base para los contratos del motor de calificación: JSON en camelCase,
    atributos en snake_case.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Límites de las columnas: ids INTEGER, duración BIGINT, opción VARCHAR(255)
MAX_ID = 2**31 - 1
MAX_DURATION_MS = 2**63 - 1
MAX_OPTION_LENGTH = 255


class AnswerIn(CamelModel):
    """Respuesta enviada por el cliente para una pregunta."""
    question_id: int = Field(..., gt=0, le=MAX_ID)
    selected_option: str = Field("", alias="selected_option", max_length=MAX_OPTION_LENGTH)

    @field_validator("selected_option", mode="before")
    @classmethod
    def normalize_selected_option(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)


class _SubmissionBase(CamelModel):
    user_id: int = Field(..., gt=0, le=MAX_ID)
    answers: List[AnswerIn] = []
    duration_ms: int = Field(0, le=MAX_DURATION_MS)

    @field_validator("duration_ms", mode="before")
    @classmethod
    def normalize_duration(cls, value: Any) -> int:
        # duración reportada por el cliente; valores inválidos cuentan como 0
        if isinstance(value, int):
            return max(0, value)
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0
        if not math.isfinite(number):
            return 0
        return max(0, int(number))


class QuizSubmitRequest(_SubmissionBase):
    """
    Envío de un quiz completo: debe contestar todas sus preguntas.
    """
    quiz_id: int = Field(..., gt=0, le=MAX_ID)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "userId": 1,
                "quizId": 3,
                "answers": [
                    {"questionId": 10, "selected_option": "Paris"},
                    {"questionId": 11, "selected_option": "Euro"},
                ],
                "durationMs": 42000,
            }
        }
    )


class FreeFormSubmitRequest(_SubmissionBase):
    """
    Envío libre: preguntas arbitrarias, sin quiz asociado.
    """
    pass


class SubmitResult(CamelModel):
    message: str = "Quiz submitted"
    attempt_id: int
    quiz_id: Optional[int] = None
    score: float
    max_score: float
    percent: float
    num_questions: int
    correct: int


class AttemptAnswerDetail(CamelModel):
    answer_id: int
    question_id: int
    question_text: Optional[str] = None
    selected_option: str
    correct_option: Optional[str] = None
    is_correct: bool
    points_earned: float


class AttemptSummary(CamelModel):
    attempt_id: int
    quiz_id: Optional[int] = None
    quiz_title: Optional[str] = None
    quiz_description: Optional[str] = None
    skill_id: Optional[int] = None
    skill_name: Optional[str] = None
    score: float
    max_score: float
    percent: float
    num_questions: int
    attempted_questions: int
    correct: int
    incorrect: int
    duration_ms: int
    created_at: Optional[datetime] = None
    answers: Optional[List[AttemptAnswerDetail]] = None


class AttemptPage(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    items: List[AttemptSummary]
