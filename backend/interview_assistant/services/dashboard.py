from datetime import datetime, timezone
from typing import Iterable, List, Optional

from interview_assistant.models.schemas import (
    CandidateDetail,
    CandidateRow,
    ChatMessage,
    InterviewSession,
    QuestionReview,
    SessionStatus,
)

SORT_KEYS = ("score", "name", "completed_at")

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def score_band(total_score: Optional[int]) -> str:
    score = total_score or 0
    if score >= 80:
        return "Excellent"
    if score >= 70:
        return "Good"
    if score >= 60:
        return "Average"
    if score >= 50:
        return "Below Average"
    return "Poor"


def _matches(session: InterviewSession, search: str) -> bool:
    info = session.candidate_info
    needle = search.lower()
    return (
        needle in info.name.lower()
        or needle in info.email.lower()
        or search in info.phone
    )


def rank_completed(
    sessions: Iterable[InterviewSession],
    search: Optional[str] = None,
    sort_by: str = "score",
) -> List[CandidateRow]:
    """Completed sessions, ranked by total score, optionally filtered and re-sorted.

    Rank always reflects score order; ``sort_by`` only changes row order.
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"sort_by must be one of {', '.join(SORT_KEYS)}")

    completed = sorted(
        (s for s in sessions if s.status == SessionStatus.COMPLETED),
        key=lambda s: s.total_score or 0,
        reverse=True,
    )
    rows = [
        CandidateRow(
            rank=rank,
            session_id=s.id,
            name=s.candidate_info.name,
            email=s.candidate_info.email,
            phone=s.candidate_info.phone,
            total_score=s.total_score or 0,
            band=score_band(s.total_score),
            completed_at=s.completed_at,
        )
        for rank, s in enumerate(completed, start=1)
        if not search or _matches(s, search)
    ]

    if sort_by == "name":
        rows.sort(key=lambda r: r.name.lower())
    elif sort_by == "completed_at":
        rows.sort(key=lambda r: r.completed_at or _EARLIEST, reverse=True)
    return rows


def candidate_detail(session: InterviewSession, messages: List[ChatMessage]) -> CandidateDetail:
    answers = {a.question_id: a for a in session.answers}
    review = [QuestionReview(question=q, answer=answers.get(q.id)) for q in session.questions]
    return CandidateDetail(
        session=session,
        band=score_band(session.total_score),
        review=review,
        messages=messages,
    )
