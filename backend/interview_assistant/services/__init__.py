from .documents import extract_text, DocumentProcessingError
from .extractor import extract_fields, validate_fields
from .questions import QuestionBank
from .scorer import AnswerScorer, get_scorer
from .engine import InterviewEngine, InvalidTransitionError, SessionNotFoundError, get_engine
from .dashboard import rank_completed, candidate_detail, score_band

__all__ = [
    "extract_text",
    "DocumentProcessingError",
    "extract_fields",
    "validate_fields",
    "QuestionBank",
    "AnswerScorer",
    "get_scorer",
    "InterviewEngine",
    "InvalidTransitionError",
    "SessionNotFoundError",
    "get_engine",
    "rank_completed",
    "candidate_detail",
    "score_band",
]
