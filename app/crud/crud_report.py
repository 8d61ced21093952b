from collections import OrderedDict
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple
import logging

from sqlalchemy import and_, asc, case, desc, exists, func
from sqlalchemy.orm import Session

from app.models.attempt import QuizAnswer, QuizAttempt
from app.models.question import Question
from app.models.skill import Skill
from app.models.user import User

logger = logging.getLogger(__name__)


def _accuracy(correct: Any, total: Any) -> float:
    total = int(total or 0)
    if total == 0:
        return 0
    return round(int(correct or 0) / total * 100, 2)


def _correct_count():
    return func.sum(case((QuizAnswer.is_correct.is_(True), 1), else_=0))


class CRUDReport:
    """
    Consultas agregadas de solo lectura sobre intentos y respuestas.
    Todas se construyen con expresiones de SQLAlchemy parametrizadas.
    """

    def _skill_accuracy_rows(self, db: Session, user_id: int) -> List[Tuple]:
        correct = _correct_count()
        return (
            db.query(
                Skill.id,
                Skill.name,
                func.count(QuizAnswer.id),
                correct,
            )
            .select_from(QuizAnswer)
            .join(QuizAttempt, QuizAttempt.id == QuizAnswer.attempt_id)
            .join(Question, Question.id == QuizAnswer.question_id)
            .join(Skill, Skill.id == Question.skill_id)
            .filter(QuizAttempt.user_id == user_id)
            .group_by(Skill.id, Skill.name)
            .order_by(Skill.id)
            .all()
        )

    def user_overview(self, db: Session, user_id: int) -> Dict[str, Any]:
        """
        Rendimiento global de un usuario: intentos, promedio, último intento y
        precisión por skill.
        """
        total_attempts, avg_score, last_attempt_at = (
            db.query(
                func.count(QuizAttempt.id),
                func.avg(QuizAttempt.total_score),
                func.max(QuizAttempt.created_at),
            )
            .filter(QuizAttempt.user_id == user_id)
            .one()
        )

        skills = [
            {
                "skill_id": skill_id,
                "skill": name,
                "total": int(total or 0),
                "correct": int(correct or 0),
                "accuracy": _accuracy(correct, total),
            }
            for skill_id, name, total, correct in self._skill_accuracy_rows(db, user_id)
        ]

        return {
            "user_id": user_id,
            "total_attempts": int(total_attempts or 0),
            "avg_score": round(float(avg_score or 0), 2),
            "last_attempt_at": last_attempt_at,
            "skills": skills,
        }

    def user_skill_accuracy(self, db: Session, user_id: int, min_attempts: int = 0) -> Dict[str, Any]:
        skills = [
            {
                "skill_id": skill_id,
                "skill": name,
                "total": int(total or 0),
                "correct": int(correct or 0),
                "accuracy": _accuracy(correct, total),
            }
            for skill_id, name, total, correct in self._skill_accuracy_rows(db, user_id)
            if int(total or 0) >= min_attempts
        ]
        return {"user_id": user_id, "min_attempts": min_attempts, "skills": skills}

    @staticmethod
    def resolve_window(
        period: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[datetime, datetime]:
        """
        Ventana de tiempo del reporte: start/end explícitos (end inclusivo
        hasta el final del día), o bien la última semana / últimos 30 días.
        """
        now = now or datetime.now(timezone.utc)
        if start and end:
            start_dt = datetime.combine(start, time.min, tzinfo=timezone.utc)
            end_dt = datetime.combine(end, time.max, tzinfo=timezone.utc)
            return start_dt, end_dt
        if period == "week":
            return now - timedelta(days=7), now
        return now - timedelta(days=30), now

    @staticmethod
    def bucket_key(moment: datetime, group_by: str) -> str:
        if group_by == "week":
            iso = moment.isocalendar()
            return f"{iso[0]}-{iso[1]:02d}"
        return moment.strftime("%Y-%m-%d")

    def time_trend(
        self,
        db: Session,
        period: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        group_by: str = "day",
        skill_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Tendencia temporal: intentos y puntaje promedio por día o semana,
        opcionalmente restringida a intentos que tocan un skill.
        """
        group_by = "week" if group_by == "week" else "day"
        start_dt, end_dt = self.resolve_window(period, start, end)
        in_window = QuizAttempt.created_at.between(start_dt, end_dt)

        query = db.query(QuizAttempt.created_at, QuizAttempt.total_score).filter(in_window)
        if skill_id:
            touches_skill = exists().where(and_(
                QuizAnswer.attempt_id == QuizAttempt.id,
                QuizAnswer.question_id == Question.id,
                Question.skill_id == skill_id,
            ))
            query = query.filter(touches_skill)

        buckets: "OrderedDict[str, List[float]]" = OrderedDict()
        for created_at, total_score in query.order_by(asc(QuizAttempt.created_at)).all():
            key = self.bucket_key(created_at, group_by)
            buckets.setdefault(key, []).append(float(total_score or 0))

        points = [
            {
                "bucket": key,
                "attempts": len(scores),
                "avg_score": round(sum(scores) / len(scores), 2),
            }
            for key, scores in sorted(buckets.items())
        ]

        users_for_skill = None
        skills_users = None
        distinct_users = func.count(func.distinct(QuizAttempt.user_id))

        def answered_in_window(*entities):
            return (
                db.query(*entities)
                .select_from(QuizAttempt)
                .join(QuizAnswer, QuizAnswer.attempt_id == QuizAttempt.id)
                .join(Question, Question.id == QuizAnswer.question_id)
                .filter(in_window)
            )

        if skill_id:
            users_for_skill = int(
                answered_in_window(distinct_users)
                .filter(Question.skill_id == skill_id)
                .scalar() or 0
            )
        else:
            rows = (
                answered_in_window(Skill.id, Skill.name, distinct_users)
                .join(Skill, Skill.id == Question.skill_id)
                .group_by(Skill.id, Skill.name)
                .order_by(desc(distinct_users), asc(Skill.name))
                .all()
            )
            skills_users = [
                {"skill_id": sid, "skill": name, "users": int(users or 0)}
                for sid, name, users in rows
            ]

        return {
            "start": start_dt,
            "end": end_dt,
            "group_by": group_by,
            "skill_id": skill_id,
            "points": points,
            "users_attempted_for_skill": users_for_skill,
            "skills_users": skills_users,
        }

    def group_overview(
        self,
        db: Session,
        page: int = 1,
        limit: int = 10,
        order_by: str = "avgScore",
        direction: str = "DESC",
    ) -> Dict[str, Any]:
        """
        Tabla de posiciones paginada por usuario, con su mejor y su peor skill.
        """
        attempts = func.count(QuizAttempt.id)
        avg_score = func.coalesce(func.avg(QuizAttempt.total_score), 0)
        sort_column = attempts if order_by == "attempts" else avg_score
        order = asc if direction.upper() == "ASC" else desc

        rows = (
            db.query(
                User.id, User.name, User.email,
                attempts.label("attempts"),
                avg_score.label("avg_score"),
                func.max(QuizAttempt.created_at).label("last_attempt_at"),
            )
            .outerjoin(QuizAttempt, QuizAttempt.user_id == User.id)
            .group_by(User.id, User.name, User.email)
            .order_by(order(sort_column), asc(User.id))
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        per_user = self._per_user_skill_accuracy(db, [r[0] for r in rows])

        items = []
        for user_id, name, email, n_attempts, avg, last_at in rows:
            skills = per_user.get(user_id, [])
            best = max(skills, key=lambda s: s[1], default=None)
            weakest = min(skills, key=lambda s: s[1], default=None)
            items.append({
                "user_id": user_id,
                "name": name,
                "email": email,
                "attempts": int(n_attempts or 0),
                "avg_score": round(float(avg or 0), 2),
                "last_attempt_at": last_at,
                "skills_covered": len(skills),
                "best_skill_name": best[0] if best else None,
                "best_skill_acc": best[1] if best else None,
                "weakest_skill_name": weakest[0] if weakest else None,
                "weakest_skill_acc": weakest[1] if weakest else None,
            })
        return {"page": page, "limit": limit, "items": items}

    def _per_user_skill_accuracy(self, db: Session, user_ids: List[int]) -> Dict[int, List[Tuple[str, float]]]:
        if not user_ids:
            return {}
        rows = (
            db.query(
                QuizAttempt.user_id,
                Skill.name,
                func.count(QuizAnswer.id),
                _correct_count(),
            )
            .select_from(QuizAnswer)
            .join(QuizAttempt, QuizAttempt.id == QuizAnswer.attempt_id)
            .join(Question, Question.id == QuizAnswer.question_id)
            .join(Skill, Skill.id == Question.skill_id)
            .filter(QuizAttempt.user_id.in_(user_ids))
            .group_by(QuizAttempt.user_id, Skill.id, Skill.name)
            .order_by(Skill.id)
            .all()
        )
        result: Dict[int, List[Tuple[str, float]]] = {}
        for user_id, skill_name, total, correct in rows:
            result.setdefault(user_id, []).append((skill_name, _accuracy(correct, total)))
        return result

    def skill_leaderboard(
        self, db: Session, skill_id: int, min_answers: int = 3, limit: int = 20
    ) -> List[Dict[str, Any]]:
        """
        Quién rinde mejor en un skill, con un mínimo de respuestas para entrar.
        """
        total = func.count(QuizAnswer.id)
        correct = _correct_count()
        rows = (
            db.query(User.id, User.name, User.email, correct, total)
            .select_from(QuizAnswer)
            .join(QuizAttempt, QuizAttempt.id == QuizAnswer.attempt_id)
            .join(User, User.id == QuizAttempt.user_id)
            .join(Question, Question.id == QuizAnswer.question_id)
            .filter(Question.skill_id == skill_id)
            .group_by(User.id, User.name, User.email)
            .having(total >= min_answers)
            .order_by(desc(correct * 1.0 / total), asc(User.id))
            .limit(limit)
            .all()
        )
        return [
            {
                "user_id": user_id,
                "name": name,
                "email": email,
                "total": int(n_total),
                "correct": int(n_correct or 0),
                "accuracy": _accuracy(n_correct, n_total),
            }
            for user_id, name, email, n_correct, n_total in rows
        ]

    def skill_gaps(self, db: Session, min_answers: int = 5, limit: int = 100) -> List[Dict[str, Any]]:
        """
        Precisión promedio por skill entre todos los usuarios, de menor a mayor.
        """
        total = func.count(QuizAnswer.id)
        correct = _correct_count()
        rows = (
            db.query(
                Skill.id, Skill.name, correct, total,
                func.count(func.distinct(QuizAttempt.user_id)),
                func.max(QuizAttempt.created_at),
            )
            .select_from(QuizAnswer)
            .join(QuizAttempt, QuizAttempt.id == QuizAnswer.attempt_id)
            .join(Question, Question.id == QuizAnswer.question_id)
            .join(Skill, Skill.id == Question.skill_id)
            .group_by(Skill.id, Skill.name)
            .having(total >= min_answers)
            .order_by(asc(correct * 1.0 / total), asc(Skill.id))
            .limit(limit)
            .all()
        )
        return [
            {
                "skill_id": sid,
                "skill": name,
                "total": int(n_total),
                "correct": int(n_correct or 0),
                "avg_accuracy": _accuracy(n_correct, n_total),
                "users": int(users or 0),
                "last_activity": last_activity,
            }
            for sid, name, n_correct, n_total, users, last_activity in rows
        ]


report = CRUDReport()
