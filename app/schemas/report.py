from datetime import datetime
from typing import List, Optional

from app.schemas.attempt import CamelModel


class SkillAccuracy(CamelModel):
    skill_id: Optional[int] = None
    skill: Optional[str] = None
    total: int
    correct: int
    accuracy: float


class UserOverview(CamelModel):
    user_id: int
    total_attempts: int
    avg_score: float
    last_attempt_at: Optional[datetime] = None
    skills: List[SkillAccuracy]


class UserSkillReport(CamelModel):
    user_id: int
    min_attempts: int
    skills: List[SkillAccuracy]


class TrendPoint(CamelModel):
    bucket: str
    attempts: int
    avg_score: float


class SkillUsers(CamelModel):
    skill_id: int
    skill: str
    users: int


class TimeTrend(CamelModel):
    start: datetime
    end: datetime
    group_by: str
    skill_id: Optional[int] = None
    points: List[TrendPoint]
    users_attempted_for_skill: Optional[int] = None
    skills_users: Optional[List[SkillUsers]] = None


class GroupOverviewItem(CamelModel):
    user_id: int
    name: str
    email: str
    attempts: int
    avg_score: float
    last_attempt_at: Optional[datetime] = None
    skills_covered: int
    best_skill_name: Optional[str] = None
    best_skill_acc: Optional[float] = None
    weakest_skill_name: Optional[str] = None
    weakest_skill_acc: Optional[float] = None


class GroupOverview(CamelModel):
    page: int
    limit: int
    items: List[GroupOverviewItem]


class LeaderboardEntry(CamelModel):
    user_id: int
    name: str
    email: str
    total: int
    correct: int
    accuracy: float


class SkillGap(CamelModel):
    skill_id: int
    skill: str
    total: int
    correct: int
    avg_accuracy: float
    users: int
    last_activity: Optional[datetime] = None
