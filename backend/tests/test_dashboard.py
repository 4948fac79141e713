import pytest

from interview_assistant.models.schemas import Answer, CandidateInfo, InterviewSession, SessionStatus, utcnow
from interview_assistant.services.dashboard import candidate_detail, rank_completed, score_band
from interview_assistant.services.questions import QuestionBank


def make_session(name, score, status=SessionStatus.COMPLETED):
    return InterviewSession(
        candidate_info=CandidateInfo(name=name, email=f"{name.split()[0].lower()}@mail.dev", phone="555 010 0000"),
        status=status,
        total_score=score,
        completed_at=utcnow() if status == SessionStatus.COMPLETED else None,
    )


@pytest.mark.parametrize(
    "score, band",
    [(80, "Excellent"), (79, "Good"), (70, "Good"), (60, "Average"), (50, "Below Average"), (49, "Poor"), (None, "Poor")],
)
def test_score_band(score, band):
    assert score_band(score) == band


def test_only_completed_sessions_are_ranked():
    rows = rank_completed([
        make_session("Ana Lima", 40),
        make_session("Bo Chen", None, status=SessionStatus.PAUSED),
        make_session("Cy Park", 90),
    ])
    assert [(r.rank, r.name) for r in rows] == [(1, "Cy Park"), (2, "Ana Lima")]


def test_sort_by_name_keeps_score_rank():
    rows = rank_completed([make_session("Zoe Adams", 90), make_session("Al Brown", 30)], sort_by="name")
    assert [(r.name, r.rank) for r in rows] == [("Al Brown", 2), ("Zoe Adams", 1)]


def test_unknown_sort_key():
    with pytest.raises(ValueError):
        rank_completed([], sort_by="age")


def test_detail_pairs_questions_with_answers():
    session = make_session("Ana Lima", 15)
    session.questions = QuestionBank(seed=3).generate()
    session.answers = [Answer(question_id="q_0", text="answer", time_taken=12, score=9)]

    detail = candidate_detail(session, [])

    assert detail.band == "Poor"
    assert detail.review[0].answer.score == 9
    assert all(item.answer is None for item in detail.review[1:])
