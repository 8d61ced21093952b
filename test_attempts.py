"""
Tests del historial de intentos: forma de la respuesta, paginación,
detalle por pregunta y control de acceso.
"""


def _submit(client, headers, user_id, quiz_id, pairs, duration_ms=0):
    response = client.post("/api/quiz/submit", headers=headers, json={
        "userId": user_id,
        "quizId": quiz_id,
        "answers": [{"questionId": qid, "selected_option": opt} for qid, opt in pairs],
        "durationMs": duration_ms,
    })
    assert response.status_code == 200, response.text
    return response.json()


def test_history_is_enriched_with_quiz_and_skill(client, learner, learner_headers, geography):
    q1, q2, q3 = geography["question_ids"]
    submitted = _submit(client, learner_headers, learner.id, geography["quiz_id"],
                        [(q1, "Paris"), (q2, "Peseta"), (q3, "Milan")], duration_ms=9000)

    response = client.get(f"/api/quiz/attempts/{learner.id}", headers=learner_headers)
    assert response.status_code == 200
    page = response.json()
    assert page["page"] == 1
    assert page["limit"] == 20
    assert page["total"] == 1
    assert page["totalPages"] == 1

    item = page["items"][0]
    assert item["attemptId"] == submitted["attemptId"]
    assert item["quizTitle"] == "Europe basics"
    assert item["skillId"] == geography["skill_id"]
    assert item["skillName"] == "Geography"
    assert item["score"] == 1
    assert item["maxScore"] == 3
    assert item["percent"] == 33.33
    assert item["numQuestions"] == 3
    assert item["attemptedQuestions"] == 3
    assert item["correct"] == 1
    assert item["incorrect"] == 2
    assert item["durationMs"] == 9000
    assert item["answers"] is None


def test_history_with_answers(client, learner, learner_headers, geography):
    q1, q2, q3 = geography["question_ids"]
    _submit(client, learner_headers, learner.id, geography["quiz_id"],
            [(q1, "London"), (q2, "Euro"), (q3, "Rome")])

    response = client.get(
        f"/api/quiz/attempts/{learner.id}", headers=learner_headers, params={"withAnswers": "true"}
    )
    answers = response.json()["items"][0]["answers"]
    assert [a["questionId"] for a in answers] == [q1, q2, q3]
    first = answers[0]
    assert first["questionText"] == "Capital of France?"
    assert first["selectedOption"] == "London"
    assert first["correctOption"] == "Paris"
    assert first["isCorrect"] is False
    assert first["pointsEarned"] == 0


def test_history_is_newest_first_and_paginated(client, learner, learner_headers, geography):
    q1, q2, q3 = geography["question_ids"]
    ids = [
        _submit(client, learner_headers, learner.id, geography["quiz_id"],
                [(q1, "Paris"), (q2, option), (q3, "Rome")])["attemptId"]
        for option in ("Euro", "Peseta", "Euro")
    ]

    response = client.get(
        f"/api/quiz/attempts/{learner.id}", headers=learner_headers, params={"page": 1, "limit": 2}
    )
    page = response.json()
    assert page["total"] == 3
    assert page["totalPages"] == 2
    assert [i["attemptId"] for i in page["items"]] == [ids[2], ids[1]]

    response = client.get(
        f"/api/quiz/attempts/{learner.id}", headers=learner_headers, params={"page": 2, "limit": 2}
    )
    assert [i["attemptId"] for i in response.json()["items"]] == [ids[0]]


def test_reading_history_does_not_change_it(client, learner, learner_headers, geography):
    q1, q2, q3 = geography["question_ids"]
    _submit(client, learner_headers, learner.id, geography["quiz_id"],
            [(q1, "Paris"), (q2, "Euro"), (q3, "Milan")])

    url = f"/api/quiz/attempts/{learner.id}"
    first = client.get(url, headers=learner_headers, params={"withAnswers": "true"}).json()
    second = client.get(url, headers=learner_headers, params={"withAnswers": "true"}).json()
    assert first == second


def test_free_form_attempt_has_no_quiz(client, learner, learner_headers, geography):
    q1 = geography["question_ids"][0]
    response = client.post("/api/quiz/start", headers=learner_headers, json={
        "userId": learner.id,
        "answers": [{"questionId": q1, "selected_option": "Paris"}],
    })
    assert response.status_code == 200

    item = client.get(f"/api/quiz/attempts/{learner.id}", headers=learner_headers).json()["items"][0]
    assert item["quizId"] is None
    assert item["quizTitle"] is None
    assert item["skillName"] is None
    assert item["percent"] == 100


def test_filter_by_quiz(client, learner, learner_headers, geography):
    q1, q2, q3 = geography["question_ids"]
    _submit(client, learner_headers, learner.id, geography["quiz_id"],
            [(q1, "Paris"), (q2, "Euro"), (q3, "Rome")])
    client.post("/api/quiz/start", headers=learner_headers, json={
        "userId": learner.id,
        "answers": [{"questionId": q1, "selected_option": "Paris"}],
    })

    response = client.get(
        f"/api/quiz/attempts/{learner.id}", headers=learner_headers,
        params={"quizId": geography["quiz_id"]},
    )
    assert response.json()["total"] == 1


def test_empty_history(client, learner, learner_headers):
    page = client.get(f"/api/quiz/attempts/{learner.id}", headers=learner_headers).json()
    assert page["total"] == 0
    assert page["totalPages"] == 0
    assert page["items"] == []


def test_history_of_another_user_is_forbidden(client, learner_headers, other_learner):
    response = client.get(f"/api/quiz/attempts/{other_learner.id}", headers=learner_headers)
    assert response.status_code == 403


def test_admin_can_read_any_history(client, admin_headers, learner):
    response = client.get(f"/api/quiz/attempts/{learner.id}", headers=admin_headers)
    assert response.status_code == 200
