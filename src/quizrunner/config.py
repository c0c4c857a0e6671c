import os
from typing import Optional


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or value.strip() == "":
        return None
    return int(value)


class Settings:
    PROJECT_NAME: str = "quizrunner"
    DEBUG: bool = os.environ.get("QUIZ_DEBUG", "").lower() in ("1", "true", "yes")
    LOG_DIR: str = os.environ.get("QUIZ_LOG_DIR", "log")
    LOG_FILE: str = "quizrunner.log"
    QUESTIONS_FILE: str = os.environ.get("QUESTIONS_FILE", "questions.json")
    TEST_SIZE: int = int(os.environ.get("QUIZ_TEST_SIZE", "5"))
    RANDOM_SEED: Optional[int] = _optional_int(os.environ.get("QUIZ_SEED"))
    TEMPLATES_DIR: str = os.environ.get(
        "QUIZ_TEMPLATES_DIR",
        os.path.join(os.path.dirname(__file__), "templates"),
    )
    HOST: str = os.environ.get("QUIZ_HOST", "127.0.0.1")
    PORT: int = int(os.environ.get("QUIZ_PORT", "8000"))
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")


settings = Settings()
