from typing import Dict

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel

from .engine import QuizEngine
from .errors import InvalidState
from .globals import templates
from .models import (
    AnswerOutcome,
    PresentedQuestion,
    SessionStatus,
    SessionSummary,
    Tier,
)

router = APIRouter()

TIER_MESSAGES: Dict[Tier, Dict[str, str]] = {
    Tier.PERFECT: {
        "title": "Perfect score!",
        "message": "Every answer was right. Your knowledge here is complete.",
    },
    Tier.GREAT: {
        "title": "Excellent result!",
        "message": "Almost there. Aim for a perfect score next time.",
    },
    Tier.GOOD: {
        "title": "More than half right!",
        "message": "Keep going and work on the questions you missed.",
    },
    Tier.BASIC: {
        "title": "Thanks for playing",
        "message": "Have another go whenever you are ready.",
    },
}


class AnswerRequest(BaseModel):
    position: int
    answer: str


# --- Dependencies ---
def get_engine(request: Request) -> QuizEngine:
    """Returns the process-wide engine, re-raising the load failure if any."""
    load_error = getattr(request.app.state, "load_error", None)
    if load_error is not None:
        raise type(load_error)(str(load_error)) from load_error
    return request.app.state.engine


# --- Pages ---
@router.get("/", response_class=HTMLResponse)
async def home(request: Request, engine: QuizEngine = Depends(get_engine)):
    return templates.TemplateResponse(
        request,
        "start.html",
        {
            "question_count": min(engine.question_count, len(engine.questions)),
            "available": len(engine.questions),
            "in_progress": engine.status is SessionStatus.IN_PROGRESS,
        },
    )


@router.post("/start", response_class=RedirectResponse)
async def start_quiz(request: Request, engine: QuizEngine = Depends(get_engine)):
    engine.start()
    return RedirectResponse(url=str(request.url_for("show_question")), status_code=303)


@router.get("/quiz", response_class=HTMLResponse, name="show_question")
async def show_question(request: Request, engine: QuizEngine = Depends(get_engine)):
    if engine.status is SessionStatus.NOT_STARTED:
        return RedirectResponse(url=str(request.url_for("home")), status_code=302)

    presented = engine.current()
    if presented is None:
        return RedirectResponse(url=str(request.url_for("show_result")), status_code=302)

    return templates.TemplateResponse(
        request, "quiz.html", {"question": presented}
    )


@router.post("/answer", response_class=HTMLResponse)
async def answer_question(
    request: Request,
    position: int = Form(...),
    answer: str = Form(...),
    engine: QuizEngine = Depends(get_engine),
):
    outcome = engine.submit_at(position, answer)
    return templates.TemplateResponse(
        request,
        "feedback.html",
        {
            "outcome": outcome,
            "number": position + 1,
            "total_questions": engine.state.total_questions,
            "is_last": engine.status is SessionStatus.COMPLETE,
        },
    )


@router.get("/result", response_class=HTMLResponse, name="show_result")
async def show_result(request: Request, engine: QuizEngine = Depends(get_engine)):
    if engine.status is not SessionStatus.COMPLETE:
        return RedirectResponse(url=str(request.url_for("show_question")), status_code=302)

    summary = engine.summarize()
    return templates.TemplateResponse(
        request,
        "result.html",
        {
            "summary": summary,
            "tier_text": TIER_MESSAGES[summary.tier],
            "answers": engine.state.answers,
        },
    )


# --- JSON API ---
@router.post("/api/start")
async def api_start(engine: QuizEngine = Depends(get_engine)):
    state = engine.start()
    return {"status": state.status, "total_questions": state.total_questions}


@router.get("/api/question")
async def api_question(engine: QuizEngine = Depends(get_engine)):
    if engine.status is SessionStatus.NOT_STARTED:
        raise InvalidState("No session has been started.")
    presented = engine.current()
    if presented is None:
        return {"status": SessionStatus.COMPLETE, "question": None}
    return {"status": SessionStatus.IN_PROGRESS, "question": question_payload(presented)}


@router.post("/api/answer", response_model=AnswerOutcome)
async def api_answer(payload: AnswerRequest, engine: QuizEngine = Depends(get_engine)):
    return engine.submit_at(payload.position, payload.answer)


@router.get("/api/summary", response_model=SessionSummary)
async def api_summary(engine: QuizEngine = Depends(get_engine)):
    return engine.summarize()


def question_payload(presented: PresentedQuestion) -> Dict[str, object]:
    return {"number": presented.number, **presented.model_dump()}
