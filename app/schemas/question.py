from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class QuestionCreate(BaseModel):
    question_text: str = Field(..., min_length=1)
    options: List[str]
    correct_answer: str
    points: int = Field(1, ge=1)
    quiz_id: Optional[int] = None
    skill_id: Optional[int] = None


class QuestionUpdate(BaseModel):
    question_text: Optional[str] = Field(None, min_length=1)
    options: Optional[List[str]] = None
    correct_answer: Optional[str] = None
    points: Optional[int] = Field(None, ge=1)
    quiz_id: Optional[int] = None
    skill_id: Optional[int] = None


class QuestionPublic(BaseModel):
    """
    Pregunta tal como la ve un estudiante: sin la respuesta correcta.
    """
    id: int
    quiz_id: Optional[int] = None
    skill_id: Optional[int] = None
    question_text: str
    options: List[str]
    points: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Question(QuestionPublic):
    correct_answer: str


class BulkDeleteRequest(BaseModel):
    ids: List[int] = []


def question_payload(question, include_answer: bool) -> dict:
    """
    Serializa una pregunta; los estudiantes nunca reciben correct_answer.
    """
    schema = Question if include_answer else QuestionPublic
    return schema.model_validate(question).model_dump(mode="json")
