import random
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from quizrunner.app import create_app
from quizrunner.errors import SourceUnavailable
from quizrunner.router import get_engine
from quizrunner.source import QuestionSource


@pytest.fixture
def client(question_file):
    app = create_app(
        source=QuestionSource(str(question_file)),
        question_count=3,
        rng=random.Random(7),
    )
    with TestClient(app) as client:
        yield client


def play_current(client, answer_key, correct=True):
    question = client.get("/api/question").json()["question"]
    answer = answer_key[question["prompt"]]
    if not correct:
        answer = next(o for o in question["options"] if o != answer)
    return question, client.post(
        "/api/answer", json={"position": question["position"], "answer": answer}
    )


def test_api_full_session(client, answer_key):
    started = client.post("/api/start").json()
    assert started == {"status": "in_progress", "total_questions": 3}

    for number in range(1, 4):
        question, response = play_current(client, answer_key)
        assert question["number"] == number
        assert response.status_code == 200
        assert response.json()["is_correct"] is True

    assert client.get("/api/question").json() == {"status": "complete", "question": None}
    summary = client.get("/api/summary").json()
    assert summary == {
        "correct_count": 3,
        "total_questions": 3,
        "percentage": 100,
        "tier": "perfect",
    }


def test_api_rejects_replayed_answer(client, answer_key):
    client.post("/api/start")
    question, _ = play_current(client, answer_key)

    replay = client.post(
        "/api/answer", json={"position": question["position"], "answer": "whatever"}
    )

    assert replay.status_code == 409
    assert replay.json()["error"] == "InvalidState"


def test_api_summary_requires_completion(client, answer_key):
    client.post("/api/start")
    play_current(client, answer_key)
    response = client.get("/api/summary")
    assert response.status_code == 409


def test_api_question_before_start(client):
    response = client.get("/api/question")
    assert response.status_code == 409


def test_html_flow(client, answer_key):
    home = client.get("/")
    assert home.status_code == 200
    assert "3 questions will be drawn from 10" in home.text

    page = client.post("/start")
    assert page.status_code == 200
    assert "Question 1 of 3" in page.text

    early = client.get("/result")
    assert "Question 1 of 3" in early.text

    for step in range(3):
        question = client.get("/api/question").json()["question"]
        answer = answer_key[question["prompt"]]
        if step == 0:
            answer = next(o for o in question["options"] if o != answer)
        feedback = client.post("/answer", data={"position": str(step), "answer": answer})
        assert feedback.status_code == 200
        assert ("Not quite." if step == 0 else "Correct!") in feedback.text

    result = client.get("/quiz")
    assert result.status_code == 200
    assert "67%" in result.text
    assert "2 of 3 correct" in result.text
    assert "More than half right!" in result.text


def test_missing_question_file(tmp_path):
    app = create_app(source=QuestionSource(str(tmp_path / "missing.json")))
    with TestClient(app) as client:
        page = client.get("/")
        assert page.status_code == 503
        assert "could not be loaded" in page.text

        api = client.post("/api/start")
        assert api.status_code == 503
        assert api.json()["error"] == "SourceUnavailable"


def test_empty_question_file(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text("[]", encoding="utf-8")
    app = create_app(source=QuestionSource(str(path)))
    with TestClient(app) as client:
        page = client.get("/")
        assert page.status_code == 503
        assert "no questions" in page.text


def test_load_error_raised_as_fresh_exception():
    stored = SourceUnavailable("Question file q.json not found.")
    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(load_error=stored)))

    raised = []
    for _ in range(2):
        with pytest.raises(SourceUnavailable) as excinfo:
            get_engine(request)
        raised.append(excinfo.value)

    assert raised[0] is not stored
    assert raised[0] is not raised[1]
    assert all(e.__cause__ is stored for e in raised)
    assert str(raised[1]) == str(stored)
    assert stored.__traceback__ is None
