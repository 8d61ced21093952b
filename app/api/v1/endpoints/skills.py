from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_admin, get_current_user
from app.crud import crud_skill
from app.db.session import get_db
from app.models.user import User
from app.schemas.skill import Skill, SkillCreate, SkillUpdate

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[Skill])
def read_skills(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud_skill.get_skills(db)


@router.get("/{skill_id}", response_model=Skill)
def read_skill(
    skill_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    skill = crud_skill.get_skill(db, skill_id)
    if not skill:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Skill not found")
    return skill


@router.post("", response_model=Skill, status_code=status.HTTP_201_CREATED)
def create_skill(
    skill: SkillCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Crea un skill (solo administradores). El nombre debe ser único.
    """
    if not skill.name.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Skill name is required")
    if crud_skill.get_skill_by_name(db, skill.name.strip()):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Skill name already exists")
    return crud_skill.create_skill(db, skill)


@router.put("/{skill_id}", response_model=Skill)
def update_skill(
    skill_id: int,
    skill_update: SkillUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    skill = crud_skill.get_skill(db, skill_id)
    if not skill:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Skill not found")

    new_name = (skill_update.name or "").strip()
    if new_name and new_name != skill.name and crud_skill.get_skill_by_name(db, new_name):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Skill name already exists")

    return crud_skill.update_skill(db, db_skill=skill, skill_update=skill_update)


@router.delete("/{skill_id}")
def delete_skill(
    skill_id: int,
    force: bool = Query(False, description="Eliminar también las preguntas ligadas al skill"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Elimina un skill. Si tiene preguntas ligadas responde 409 salvo que se
    pase `?force=true`, en cuyo caso se eliminan también las preguntas.
    """
    skill = crud_skill.get_skill(db, skill_id)
    if not skill:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Skill not found")

    question_count = crud_skill.count_skill_questions(db, skill_id)
    if question_count > 0 and not force:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": "Skill has linked questions. Pass ?force=true to delete skill and its questions.",
                "questions": question_count,
            },
        )

    deleted_questions = crud_skill.delete_skill(db, db_skill=skill, force=force)
    logger.info(f"Skill {skill_id} deleted by user {current_user.id} ({deleted_questions} questions)")
    return {"message": "Skill deleted", "id": skill_id, "deletedQuestions": deleted_questions}
