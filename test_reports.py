"""
Tests de reportes: rendimiento por usuario, tendencia temporal, resumen de
grupo, leaderboard por skill y brechas de skill.
"""
from datetime import date, datetime

import pytest

from app.crud.crud_report import CRUDReport


@pytest.fixture
def two_attempts(client, learner, other_learner, admin_headers, geography):
    """Ana acierta 1 de 3; Beto acierta las 3."""
    q1, q2, q3 = geography["question_ids"]
    for user, pairs in (
        (learner, [(q1, "Paris"), (q2, "Peseta"), (q3, "Milan")]),
        (other_learner, [(q1, "Paris"), (q2, "Euro"), (q3, "Rome")]),
    ):
        response = client.post("/api/quiz/submit", headers=admin_headers, json={
            "userId": user.id,
            "quizId": geography["quiz_id"],
            "answers": [{"questionId": qid, "selected_option": opt} for qid, opt in pairs],
        })
        assert response.status_code == 200
    return geography


def test_bucket_key():
    moment = datetime(2026, 1, 1, 10, 30)
    assert CRUDReport.bucket_key(moment, "day") == "2026-01-01"
    assert CRUDReport.bucket_key(moment, "week") == "2026-01"


def test_resolve_window_with_explicit_dates():
    start, end = CRUDReport.resolve_window(start=date(2026, 3, 1), end=date(2026, 3, 7))
    assert start.isoformat().startswith("2026-03-01T00:00:00")
    assert end.date() == date(2026, 3, 7)
    assert end.hour == 23


def test_user_overview(client, learner, learner_headers, two_attempts):
    response = client.get(f"/api/reports/user/{learner.id}", headers=learner_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["userId"] == learner.id
    assert body["totalAttempts"] == 1
    assert body["avgScore"] == 1
    assert body["lastAttemptAt"] is not None
    assert body["skills"] == [{
        "skillId": two_attempts["skill_id"],
        "skill": "Geography",
        "total": 3,
        "correct": 1,
        "accuracy": 33.33,
    }]


def test_user_without_attempts(client, learner, learner_headers):
    body = client.get(f"/api/reports/user/{learner.id}", headers=learner_headers).json()
    assert body["totalAttempts"] == 0
    assert body["avgScore"] == 0
    assert body["skills"] == []


def test_user_skill_accuracy_min_attempts(client, learner, learner_headers, two_attempts):
    url = f"/api/reports/user/{learner.id}/skills"
    assert len(client.get(url, headers=learner_headers, params={"minAttempts": 3}).json()["skills"]) == 1
    assert client.get(url, headers=learner_headers, params={"minAttempts": 4}).json()["skills"] == []


def test_user_reports_are_private(client, learner_headers, other_learner):
    response = client.get(f"/api/reports/user/{other_learner.id}", headers=learner_headers)
    assert response.status_code == 403


def test_time_trend(client, admin_headers, two_attempts):
    body = client.get("/api/reports/time", headers=admin_headers).json()
    assert body["groupBy"] == "day"
    assert len(body["points"]) == 1
    assert body["points"][0]["attempts"] == 2
    assert body["points"][0]["avgScore"] == 2
    assert body["skillsUsers"] == [{"skillId": two_attempts["skill_id"], "skill": "Geography", "users": 2}]
    assert body["usersAttemptedForSkill"] is None

    body = client.get(
        "/api/reports/time", headers=admin_headers,
        params={"skillId": two_attempts["skill_id"], "period": "week", "groupBy": "week"},
    ).json()
    assert body["usersAttemptedForSkill"] == 2
    assert body["points"][0]["attempts"] == 2

    body = client.get("/api/reports/time", headers=admin_headers, params={"skillId": 999}).json()
    assert body["points"] == []
    assert body["usersAttemptedForSkill"] == 0


def test_time_trend_rejects_inverted_window(client, admin_headers):
    response = client.get(
        "/api/reports/time", headers=admin_headers, params={"start": "2026-03-07", "end": "2026-03-01"}
    )
    assert response.status_code == 400


def test_group_overview(client, admin_headers, learner, other_learner, two_attempts):
    body = client.get("/api/reports/group", headers=admin_headers).json()
    assert body["page"] == 1
    items = body["items"]
    assert [i["userId"] for i in items[:2]] == [other_learner.id, learner.id]

    best = items[0]
    assert best["attempts"] == 1
    assert best["avgScore"] == 3
    assert best["skillsCovered"] == 1
    assert best["bestSkillName"] == "Geography"
    assert best["bestSkillAcc"] == 100

    idle = items[2]
    assert idle["attempts"] == 0
    assert idle["bestSkillName"] is None

    body = client.get("/api/reports/group", headers=admin_headers, params={"orderBy": "attempts", "dir": "ASC"}).json()
    assert body["items"][0]["attempts"] == 0


def test_skill_leaderboard(client, admin_headers, learner, other_learner, two_attempts):
    url = f"/api/reports/skill/{two_attempts['skill_id']}/leaderboard"
    rows = client.get(url, headers=admin_headers).json()
    assert [(r["userId"], r["accuracy"]) for r in rows] == [(other_learner.id, 100), (learner.id, 33.33)]

    assert client.get(url, headers=admin_headers, params={"minAnswers": 4}).json() == []


def test_skill_gaps(client, admin_headers, two_attempts):
    rows = client.get("/api/reports/skills/gaps", headers=admin_headers).json()
    assert len(rows) == 1
    gap = rows[0]
    assert gap["skill"] == "Geography"
    assert gap["total"] == 6
    assert gap["correct"] == 4
    assert gap["avgAccuracy"] == 66.67
    assert gap["users"] == 2

    assert client.get("/api/reports/skills/gaps", headers=admin_headers, params={"minAnswers": 7}).json() == []


def test_group_reports_are_admin_only(client, learner_headers, geography):
    for path in (
        "/api/reports/group",
        "/api/reports/time",
        "/api/reports/skills/gaps",
        f"/api/reports/skill/{geography['skill_id']}/leaderboard",
    ):
        assert client.get(path, headers=learner_headers).status_code == 403
