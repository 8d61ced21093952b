"""
Fixtures compartidas: cada test usa su propia base SQLite en un archivo
temporal, inyectada en la aplicación mediante create_app(database).
"""
import os
import tempfile

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-skillquiz")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="skillquiz-logs-"))

import pytest
from fastapi.testclient import TestClient

from app.core import security
from app.crud.crud_user import create_user
from app.db.session import Database
from app.main import create_app
from app.models.question import Question
from app.models.quiz import Quiz
from app.models.skill import Skill
from app.models.user import UserRoleEnum


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'skillquiz.db'}").connect()
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def client(database):
    with TestClient(create_app(database)) as test_client:
        yield test_client


def auth_headers(user) -> dict:
    token = security.create_access_token(subject=user.email, role=user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(db_session):
    return create_user(
        db_session, name="Admin", email="admin@example.com",
        password="admin-password", role=UserRoleEnum.admin,
    )


@pytest.fixture
def learner(db_session):
    return create_user(db_session, name="Ana", email="ana@example.com", password="ana-password")


@pytest.fixture
def other_learner(db_session):
    return create_user(db_session, name="Beto", email="beto@example.com", password="beto-password")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def learner_headers(learner):
    return auth_headers(learner)


@pytest.fixture
def geography(db_session):
    """Skill con un quiz publicado de tres preguntas de 1 punto."""
    skill = Skill(name="Geography", description="Capitals and currencies")
    db_session.add(skill)
    db_session.flush()

    quiz = Quiz(skill_id=skill.id, title="Europe basics", is_published=True)
    db_session.add(quiz)
    db_session.flush()

    questions = [
        Question(quiz_id=quiz.id, skill_id=skill.id, question_text="Capital of France?",
                 options=["Paris", "London", "Rome"], correct_answer="Paris"),
        Question(quiz_id=quiz.id, skill_id=skill.id, question_text="Currency of Spain?",
                 options=["Euro", "Peseta"], correct_answer="Euro"),
        Question(quiz_id=quiz.id, skill_id=skill.id, question_text="Capital of Italy?",
                 options=["Milan", "Rome"], correct_answer="Rome"),
    ]
    db_session.add_all(questions)
    db_session.commit()

    return {
        "skill_id": skill.id,
        "quiz_id": quiz.id,
        "question_ids": [q.id for q in questions],
    }
