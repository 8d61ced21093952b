"""
Tests del catálogo de preguntas: reglas de opciones, visibilidad de la
respuesta correcta y borrados.
"""
import pytest

from app.models.question import Question
from app.utils.question_rules import QuestionRuleError, validate_options, validate_question


@pytest.mark.parametrize("options,message", [
    ("Paris", "`options` must be an array"),
    (["Only one"], "Options must be between 2 and 6"),
    (["a", "b", "c", "d", "e", "f", "g"], "Options must be between 2 and 6"),
    (["Paris", "  "], "All options must be non-empty"),
    (["Paris", " Paris "], "Options must be unique (no duplicates)"),
])
def test_invalid_options(options, message):
    with pytest.raises(QuestionRuleError) as exc_info:
        validate_options(options)
    assert str(exc_info.value) == message


def test_correct_answer_must_match_an_option_exactly():
    validate_question(["Paris", "London"], "Paris")
    with pytest.raises(QuestionRuleError):
        validate_question(["Paris", "London"], "paris")
    with pytest.raises(QuestionRuleError):
        validate_question(["Paris", "London"], "")


def _question_body(**overrides):
    body = {
        "question_text": "Capital of Germany?",
        "options": ["Berlin", "Bonn", "Munich"],
        "correct_answer": "Berlin",
    }
    body.update(overrides)
    return body


def test_create_question_inherits_quiz_skill(client, admin_headers, geography):
    response = client.post(
        "/api/questions", headers=admin_headers, json=_question_body(quiz_id=geography["quiz_id"])
    )
    assert response.status_code == 201
    body = response.json()
    assert body["skill_id"] == geography["skill_id"]
    assert body["quiz_id"] == geography["quiz_id"]
    assert body["correct_answer"] == "Berlin"
    assert body["points"] == 1


@pytest.mark.parametrize("overrides,message", [
    ({"options": ["Berlin"]}, "Options must be between 2 and 6"),
    ({"options": ["Berlin", "Berlin"]}, "Options must be unique (no duplicates)"),
    ({"correct_answer": "Hamburg"}, "correct_answer must be one of the options"),
])
def test_create_question_rejects_invalid_options(client, admin_headers, overrides, message):
    response = client.post("/api/questions", headers=admin_headers, json=_question_body(**overrides))
    assert response.status_code == 400
    assert response.json() == {"message": message}


def test_create_question_requires_admin(client, learner_headers):
    response = client.post("/api/questions", headers=learner_headers, json=_question_body())
    assert response.status_code == 403
    assert response.json() == {"message": "Admin access required"}


def test_create_question_unknown_quiz(client, admin_headers):
    response = client.post("/api/questions", headers=admin_headers, json=_question_body(quiz_id=999))
    assert response.status_code == 404


@pytest.mark.parametrize("options,message", [
    (["Lyon", "Marseille"], "correct_answer must be one of the options"),
    (["Paris"], "Options must be between 2 and 6"),
    (["Paris", "a", "b", "c", "d", "e", "f"], "Options must be between 2 and 6"),
    (["Paris", "   "], "All options must be non-empty"),
    (["Paris", "Paris "], "Options must be unique (no duplicates)"),
])
def test_invalid_update_leaves_question_untouched(client, db_session, admin_headers, geography, options, message):
    question_id = geography["question_ids"][0]
    response = client.put(
        f"/api/questions/{question_id}", headers=admin_headers, json={"options": options},
    )
    assert response.status_code == 400
    assert response.json() == {"message": message}

    db_session.expire_all()
    question = db_session.get(Question, question_id)
    assert question.options == ["Paris", "London", "Rome"]
    assert question.correct_answer == "Paris"


def test_update_merges_with_stored_values(client, admin_headers, geography):
    question_id = geography["question_ids"][0]
    response = client.put(
        f"/api/questions/{question_id}", headers=admin_headers,
        json={"options": ["Paris", "Lyon"], "points": 2},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["options"] == ["Paris", "Lyon"]
    assert body["correct_answer"] == "Paris"
    assert body["points"] == 2


def test_learners_never_see_correct_answer(client, learner_headers, admin_headers, geography):
    response = client.get("/api/questions", headers=learner_headers, params={"quizId": geography["quiz_id"]})
    assert response.status_code == 200
    page = response.json()
    assert page["total"] == 3
    assert all("correct_answer" not in item for item in page["items"])

    response = client.get(f"/api/questions/skill/{geography['skill_id']}", headers=learner_headers)
    assert all("correct_answer" not in item for item in response.json()["items"])

    response = client.get("/api/questions", headers=admin_headers, params={"quizId": geography["quiz_id"]})
    assert all("correct_answer" in item for item in response.json()["items"])


def test_list_questions_search_and_pagination(client, admin_headers, geography):
    response = client.get("/api/questions", headers=admin_headers, params={"q": "capital", "limit": 1})
    page = response.json()
    assert page["total"] == 2
    assert page["pageSize"] == 1
    assert page["totalPages"] == 2
    assert len(page["items"]) == 1


def test_questions_by_skill_shuffle_returns_all(client, admin_headers, geography):
    response = client.get(
        f"/api/questions/skill/{geography['skill_id']}", headers=admin_headers, params={"shuffle": "true"}
    )
    page = response.json()
    assert page["skillId"] == geography["skill_id"]
    assert sorted(item["id"] for item in page["items"]) == sorted(geography["question_ids"])


def test_delete_question(client, admin_headers, geography):
    question_id = geography["question_ids"][0]
    response = client.delete(f"/api/questions/{question_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Question deleted", "id": question_id}

    response = client.delete(f"/api/questions/{question_id}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json() == {"message": "Question not found"}


def test_bulk_delete(client, db_session, admin_headers, geography):
    q1, q2, _ = geography["question_ids"]
    response = client.request("DELETE", "/api/questions", headers=admin_headers, json={"ids": [q1, q2, 999]})
    assert response.status_code == 200
    assert response.json()["count"] == 2
    assert db_session.query(Question).count() == 1

    response = client.request("DELETE", "/api/questions", headers=admin_headers, json={"ids": []})
    assert response.status_code == 400
