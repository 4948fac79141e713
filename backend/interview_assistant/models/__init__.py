from .database import Base, SessionStore, get_store
from .schemas import (
    Difficulty,
    SessionStatus,
    MessageType,
    CandidateInfo,
    Question,
    Answer,
    InterviewSession,
    ChatMessage,
    MessageMetadata,
    ExtractedFields,
    ValidationResult,
    ScoreOutcome,
    SummaryOutcome,
)

__all__ = [
    "Base",
    "SessionStore",
    "get_store",
    "Difficulty",
    "SessionStatus",
    "MessageType",
    "CandidateInfo",
    "Question",
    "Answer",
    "InterviewSession",
    "ChatMessage",
    "MessageMetadata",
    "ExtractedFields",
    "ValidationResult",
    "ScoreOutcome",
    "SummaryOutcome",
]
