from sqlalchemy import create_engine, Column, Integer, String, DateTime, Text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from typing import List, Optional
from datetime import datetime
import logging

from interview_assistant.config import settings
from interview_assistant.models.schemas import InterviewSession, ChatMessage, SessionStatus

logger = logging.getLogger(__name__)

Base = declarative_base()

ACTIVE_SESSION_KEY = "active_session_id"

RESUMABLE_STATUSES = (
    SessionStatus.PAUSED,
    SessionStatus.IN_PROGRESS,
    SessionStatus.COLLECTING_INFO,
)

class SessionRecord(Base):
    __tablename__ = "interview_sessions"

    id = Column(String, primary_key=True, index=True)
    status = Column(String, nullable=False, index=True)
    payload = Column(Text, nullable=False)  # full InterviewSession as JSON
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class ChatMessageRecord(Base):
    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String, nullable=False, index=True)
    payload = Column(Text, nullable=False)

class StoreState(Base):
    __tablename__ = "store_state"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=True)


class SessionStore:
    """Durable session collection: whole-aggregate writes, one commit per write."""

    def __init__(self, database_url: str):
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # a single shared connection keeps the in-memory database alive
            self.engine = create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        elif database_url.startswith("sqlite"):
            self.engine = create_engine(database_url, connect_args={"check_same_thread": False})
        else:
            self.engine = create_engine(database_url)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        Base.metadata.create_all(bind=self.engine)

    def save_session(self, session: InterviewSession) -> None:
        db = self.SessionLocal()
        try:
            record = db.get(SessionRecord, session.id)
            if record is None:
                record = SessionRecord(id=session.id)
                db.add(record)
            record.status = session.status.value
            record.payload = session.model_dump_json()
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def get_session(self, session_id: str) -> Optional[InterviewSession]:
        db = self.SessionLocal()
        try:
            record = db.get(SessionRecord, session_id)
            if record is None:
                return None
            return InterviewSession.model_validate_json(record.payload)
        finally:
            db.close()

    def list_sessions(self, statuses=None) -> List[InterviewSession]:
        db = self.SessionLocal()
        try:
            query = db.query(SessionRecord)
            if statuses:
                query = query.filter(SessionRecord.status.in_([s.value for s in statuses]))
            records = query.order_by(SessionRecord.created_at.asc(), SessionRecord.id.asc()).all()
            return [InterviewSession.model_validate_json(r.payload) for r in records]
        finally:
            db.close()

    def list_resumable(self) -> List[InterviewSession]:
        """Sessions a returning user may pick up again. Status is left untouched."""
        return self.list_sessions(RESUMABLE_STATUSES)

    def append_message(self, session_id: str, message: ChatMessage) -> None:
        db = self.SessionLocal()
        try:
            db.add(ChatMessageRecord(session_id=session_id, payload=message.model_dump_json()))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def get_messages(self, session_id: str) -> List[ChatMessage]:
        db = self.SessionLocal()
        try:
            records = db.query(ChatMessageRecord).filter(
                ChatMessageRecord.session_id == session_id
            ).order_by(ChatMessageRecord.id.asc()).all()
            return [ChatMessage.model_validate_json(r.payload) for r in records]
        finally:
            db.close()

    def get_active_session_id(self) -> Optional[str]:
        db = self.SessionLocal()
        try:
            record = db.get(StoreState, ACTIVE_SESSION_KEY)
            return record.value if record else None
        finally:
            db.close()

    def set_active_session_id(self, session_id: Optional[str]) -> None:
        db = self.SessionLocal()
        try:
            record = db.get(StoreState, ACTIVE_SESSION_KEY)
            if record is None:
                db.add(StoreState(key=ACTIVE_SESSION_KEY, value=session_id))
            else:
                record.value = session_id
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


_store: Optional[SessionStore] = None

def get_store() -> SessionStore:
    global _store
    if _store is None:
        logger.info("Opening session store at %s", settings.DATABASE_URL)
        _store = SessionStore(settings.DATABASE_URL)
    return _store
