import json
import random

import pytest

from quizrunner.config import settings
from quizrunner.models import QuestionRecord

RAW_QUESTIONS = [
    {
        "q": f"Question {i}",
        "a": f"Answer {i}",
        "options": [f"Answer {i}", f"Wrong {i}a", f"Wrong {i}b", f"Wrong {i}c"],
        "explanation": f"Because of reason {i}.",
    }
    for i in range(10)
]


@pytest.fixture(autouse=True)
def log_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "log"))


@pytest.fixture
def questions():
    return [QuestionRecord.model_validate(q) for q in RAW_QUESTIONS]


@pytest.fixture
def answer_key():
    return {q["q"]: q["a"] for q in RAW_QUESTIONS}


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def question_file(tmp_path):
    path = tmp_path / "questions.json"
    path.write_text(json.dumps(RAW_QUESTIONS), encoding="utf-8")
    return path
