import io

import pytest
from docx import Document
from fastapi.testclient import TestClient

from interview_assistant.main import app
from interview_assistant.models.database import SessionStore, get_store
from interview_assistant.services.engine import InterviewEngine, get_engine
from interview_assistant.services.questions import QuestionBank
from interview_assistant.services.scorer import AnswerScorer


@pytest.fixture
def store():
    return SessionStore("sqlite://")


@pytest.fixture
def scorer():
    return AnswerScorer(base_url=None)


@pytest.fixture
def engine(store, scorer):
    """Engine with the countdown driven by hand through ``engine.tick``."""
    return InterviewEngine(
        store=store,
        scorer=scorer,
        question_bank=QuestionBank(seed=7),
        next_question_delay=0,
        auto_timer=False,
    )


@pytest.fixture
def client(store, engine):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_engine] = lambda: engine
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_docx(*paragraphs: str) -> bytes:
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


FULL_RESUME = (
    "Jane Doe",
    "Senior Frontend Engineer",
    "Email: Jane.Doe@Example.com | Phone: +1 (555) 123-4567",
    "Experience building React and Node.js applications.",
)
