from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class QuizBase(BaseModel):
    """
    Schema base para las propiedades compartidas de un quiz.
    """
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    time_limit_sec: int = Field(0, ge=0, description="0 = sin límite de tiempo")
    is_published: bool = False


class QuizCreate(QuizBase):
    pass


class QuizUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    time_limit_sec: Optional[int] = Field(None, ge=0)
    is_published: Optional[bool] = None


class Quiz(QuizBase):
    id: int
    skill_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
