from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime, timezone
from enum import Enum
import uuid


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SessionStatus(str, Enum):
    NOT_STARTED = "not_started"
    COLLECTING_INFO = "collecting_info"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    PAUSED = "paused"


class MessageType(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


# ============ DOMAIN MODELS ============

class CandidateInfo(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str = ""
    email: str = ""
    phone: str = ""
    created_at: datetime = Field(default_factory=utcnow)

class Question(BaseModel):
    id: str
    text: str
    difficulty: Difficulty
    time_limit: int  # seconds
    order_index: int

class Answer(BaseModel):
    question_id: str
    text: str
    time_taken: int  # seconds
    score: Optional[int] = None
    feedback: Optional[str] = None
    submitted_at: datetime = Field(default_factory=utcnow)

class InterviewSession(BaseModel):
    id: str = Field(default_factory=new_id)
    candidate_info: CandidateInfo
    questions: List[Question] = Field(default_factory=list)
    answers: List[Answer] = Field(default_factory=list)
    current_question_index: int = 0
    status: SessionStatus = SessionStatus.COLLECTING_INFO
    started_at: datetime = Field(default_factory=utcnow)
    completed_at: Optional[datetime] = None
    paused_at: Optional[datetime] = None
    time_remaining: Optional[int] = None
    total_score: Optional[int] = None
    summary: Optional[str] = None

    @property
    def current_question(self) -> Optional[Question]:
        if self.current_question_index < len(self.questions):
            return self.questions[self.current_question_index]
        return None

class MessageMetadata(BaseModel):
    is_question: bool = False
    question_id: Optional[str] = None
    is_answer: bool = False

class ChatMessage(BaseModel):
    id: str = Field(default_factory=new_id)
    type: MessageType
    content: str
    timestamp: datetime = Field(default_factory=utcnow)
    metadata: Optional[MessageMetadata] = None


# ============ EXTRACTION ============

class ExtractedFields(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

class ValidationResult(BaseModel):
    is_valid: bool
    missing_fields: List[str]


# ============ SCORING ============

class ScoreOutcome(BaseModel):
    """Grade for one answer; ``source`` says which strategy produced it."""
    source: Literal["remote", "fallback"]
    score: int
    feedback: str

class SummaryOutcome(BaseModel):
    source: Literal["remote", "fallback"]
    total_score: int
    summary: str


# ============ API ============

class MessageSubmission(BaseModel):
    text: str

class DraftUpdate(BaseModel):
    text: str

class SessionSnapshot(BaseModel):
    session: InterviewSession
    messages: List[ChatMessage]
    accepted: bool = True

class ResumableSession(BaseModel):
    id: str
    candidate_name: str
    status: SessionStatus
    current_question_index: int
    question_count: int
    time_remaining: Optional[int] = None
    paused_at: Optional[datetime] = None

class CandidateRow(BaseModel):
    rank: int
    session_id: str
    name: str
    email: str
    phone: str
    total_score: int
    band: str
    completed_at: Optional[datetime] = None

class QuestionReview(BaseModel):
    question: Question
    answer: Optional[Answer] = None

class CandidateDetail(BaseModel):
    session: InterviewSession
    band: str
    review: List[QuestionReview]
    messages: List[ChatMessage]
