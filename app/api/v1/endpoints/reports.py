from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.deps import ensure_self_or_admin, get_current_admin, get_current_user
from app.crud.crud_report import report
from app.db.session import get_db
from app.models.user import User
from app.schemas.report import (
    GroupOverview,
    LeaderboardEntry,
    SkillGap,
    TimeTrend,
    UserOverview,
    UserSkillReport,
)

router = APIRouter()


@router.get("/user/{user_id}", response_model=UserOverview)
def user_overview(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Rendimiento global de un usuario. Cada usuario ve el suyo; un admin ve cualquiera.
    """
    ensure_self_or_admin(current_user, user_id)
    return report.user_overview(db, user_id=user_id)


@router.get("/user/{user_id}/skills", response_model=UserSkillReport)
def user_skill_accuracy(
    user_id: int,
    minAttempts: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_self_or_admin(current_user, user_id)
    return report.user_skill_accuracy(db, user_id=user_id, min_attempts=minAttempts)


@router.get("/skills/gaps", response_model=List[SkillGap])
def group_skill_gaps(
    minAnswers: int = Query(5, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    return report.skill_gaps(db, min_answers=minAnswers, limit=limit)


@router.get("/time", response_model=TimeTrend)
def time_trend(
    period: Optional[str] = Query(None, pattern="^(week|month)$"),
    start: Optional[date] = None,
    end: Optional[date] = None,
    groupBy: str = Query("day", pattern="^(day|week)$"),
    skillId: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Tendencia temporal de intentos. Usa `start`/`end` si llegan ambos; si no,
    la última semana (`period=week`) o los últimos 30 días.
    """
    if start and end and start > end:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="start must be before end")
    return report.time_trend(
        db, period=period, start=start, end=end, group_by=groupBy, skill_id=skillId
    )


@router.get("/group", response_model=GroupOverview)
def group_overview(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    orderBy: str = Query("avgScore", pattern="^(avgScore|attempts)$"),
    dir: str = Query("DESC", pattern="^(ASC|DESC|asc|desc)$"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    return report.group_overview(db, page=page, limit=limit, order_by=orderBy, direction=dir)


@router.get("/skill/{skill_id}/leaderboard", response_model=List[LeaderboardEntry])
def skill_leaderboard(
    skill_id: int,
    minAnswers: int = Query(3, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    return report.skill_leaderboard(db, skill_id=skill_id, min_answers=minAnswers, limit=limit)
