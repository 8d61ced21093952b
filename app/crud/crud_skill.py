from typing import List, Optional
import logging

from sqlalchemy.orm import Session

from app.models.question import Question
from app.models.skill import Skill
from app.schemas.skill import SkillCreate, SkillUpdate

logger = logging.getLogger(__name__)


def get_skill(db: Session, skill_id: int) -> Optional[Skill]:
    return db.get(Skill, skill_id)


def get_skill_by_name(db: Session, name: str) -> Optional[Skill]:
    return db.query(Skill).filter(Skill.name == name).first()


def get_skills(db: Session) -> List[Skill]:
    return db.query(Skill).order_by(Skill.id.asc()).all()


def create_skill(db: Session, skill: SkillCreate) -> Skill:
    db_skill = Skill(name=skill.name.strip(), description=skill.description)
    db.add(db_skill)
    db.commit()
    db.refresh(db_skill)
    return db_skill


def update_skill(db: Session, db_skill: Skill, skill_update: SkillUpdate) -> Skill:
    """
    Actualiza nombre y/o descripción. El nombre llega ya validado como único.
    """
    update_data = skill_update.model_dump(exclude_unset=True)
    name = (update_data.get("name") or "").strip()
    if name:
        db_skill.name = name
    if "description" in update_data:
        db_skill.description = update_data["description"]

    db.add(db_skill)
    db.commit()
    db.refresh(db_skill)
    return db_skill


def count_skill_questions(db: Session, skill_id: int) -> int:
    return db.query(Question).filter(Question.skill_id == skill_id).count()


def delete_skill(db: Session, db_skill: Skill, force: bool = False) -> int:
    """
    Elimina un skill. Con force=True borra antes las preguntas ligadas al
    skill; todo se confirma en un único commit.

    Returns:
        int: número de preguntas eliminadas junto con el skill
    """
    deleted_questions = 0
    try:
        if force:
            questions = db.query(Question).filter(Question.skill_id == db_skill.id).all()
            for question in questions:
                db.delete(question)
            deleted_questions = len(questions)
            db.flush()

        db.delete(db_skill)
        db.commit()
    except Exception:
        db.rollback()
        logger.error(f"Error deleting skill {db_skill.id}", exc_info=True)
        raise
    return deleted_questions
