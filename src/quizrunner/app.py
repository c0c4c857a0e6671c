import logging
import os
import random
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings
from .engine import QuizEngine
from .errors import EmptyDataset, InvalidState, QuizError, SourceUnavailable
from .globals import templates
from .router import router
from .source import QuestionSource

logger = logging.getLogger("quizrunner")

ERROR_MESSAGES = {
    SourceUnavailable: "The questions could not be loaded. Please try again later.",
    EmptyDataset: "There are no questions to ask yet.",
    InvalidState: "That action is not available at this point of the quiz.",
}


# --- Logging Setup ---
def setup_logging():
    logger.setLevel(logging.INFO)

    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        log_path = os.path.join(settings.LOG_DIR, settings.LOG_FILE)
        file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)
    # Also configure root logger to see logs from other libraries
    logging.basicConfig(level=logging.INFO)


# --- Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.engine = None
    app.state.load_error = None
    try:
        questions = await app.state.source.load_async()
    except (SourceUnavailable, EmptyDataset) as e:
        logger.error(f"Quiz unavailable: {e}")
        app.state.load_error = e
    else:
        app.state.engine = QuizEngine(
            questions, app.state.question_count, app.state.rng
        )
    yield


# --- Error Handlers ---
async def quiz_error_handler(request: Request, exc: QuizError):
    status_code = 409 if isinstance(exc, InvalidState) else 503
    if isinstance(exc, InvalidState):
        logger.warning(f"{request.method} {request.url.path}: {exc}")
    message = ERROR_MESSAGES.get(type(exc), str(exc))

    if request.url.path.startswith("/api"):
        return JSONResponse(
            {"error": type(exc).__name__, "detail": str(exc)}, status_code=status_code
        )
    return templates.TemplateResponse(
        request, "error.html", {"message": message}, status_code=status_code
    )


# --- App Factory ---
def create_app(
    source: Optional[QuestionSource] = None,
    question_count: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    setup_logging()
    app = FastAPI(
        title=settings.PROJECT_NAME,
        debug=settings.DEBUG,
        lifespan=lifespan,
        root_path=settings.ROOT_PATH,
    )

    app.state.source = source or QuestionSource(settings.QUESTIONS_FILE)
    app.state.question_count = question_count or settings.TEST_SIZE
    app.state.rng = rng or random.Random(settings.RANDOM_SEED)

    app.add_exception_handler(QuizError, quiz_error_handler)
    app.include_router(router)

    return app
