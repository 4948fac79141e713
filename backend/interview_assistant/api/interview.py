import logging
from typing import List

from fastapi import APIRouter, HTTPException, UploadFile, File, Depends

from interview_assistant.models.database import SessionStore, get_store
from interview_assistant.models.schemas import (
    ChatMessage,
    DraftUpdate,
    MessageSubmission,
    ResumableSession,
    SessionSnapshot,
)
from interview_assistant.services.documents import DocumentProcessingError, extract_text
from interview_assistant.services.engine import (
    InterviewEngine,
    InvalidTransitionError,
    SessionNotFoundError,
    get_engine,
)
from interview_assistant.services.extractor import extract_fields

logger = logging.getLogger(__name__)

router = APIRouter()


def _snapshot(store: SessionStore, session_id: str, accepted: bool = True) -> SessionSnapshot:
    session = store.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return SessionSnapshot(session=session, messages=store.get_messages(session_id), accepted=accepted)


@router.post("/sessions", response_model=SessionSnapshot)
async def create_interview_session(
    resume: UploadFile = File(...),
    engine: InterviewEngine = Depends(get_engine),
    store: SessionStore = Depends(get_store),
):
    """Upload a resume and open a new interview session"""
    payload = await resume.read()
    try:
        text = extract_text(payload, filename=resume.filename, content_type=resume.content_type)
    except DocumentProcessingError as e:
        logger.info(f"Rejected upload {resume.filename}: {e}")
        raise HTTPException(status_code=400, detail=f"Could not read file: {e}")

    session = await engine.create_session(extract_fields(text))
    return _snapshot(store, session.id)

@router.get("/sessions/resumable", response_model=List[ResumableSession])
async def get_resumable_sessions(store: SessionStore = Depends(get_store)):
    """Unfinished sessions a returning candidate can pick up"""
    return [
        ResumableSession(
            id=s.id,
            candidate_name=s.candidate_info.name,
            status=s.status,
            current_question_index=s.current_question_index,
            question_count=len(s.questions),
            time_remaining=s.time_remaining,
            paused_at=s.paused_at,
        )
        for s in store.list_resumable()
    ]

@router.get("/sessions/active", response_model=SessionSnapshot)
async def get_active_session(store: SessionStore = Depends(get_store)):
    session_id = store.get_active_session_id()
    if not session_id:
        raise HTTPException(status_code=404, detail="No active session")
    return _snapshot(store, session_id)

@router.get("/sessions/{session_id}", response_model=SessionSnapshot)
async def get_interview_session(session_id: str, store: SessionStore = Depends(get_store)):
    return _snapshot(store, session_id)

@router.get("/sessions/{session_id}/messages", response_model=List[ChatMessage])
async def get_session_messages(session_id: str, store: SessionStore = Depends(get_store)):
    if store.get_session(session_id) is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return store.get_messages(session_id)

@router.post("/sessions/{session_id}/messages", response_model=SessionSnapshot)
async def send_message(
    session_id: str,
    submission: MessageSubmission,
    engine: InterviewEngine = Depends(get_engine),
    store: SessionStore = Depends(get_store),
):
    """Supply a missing contact field or answer the current question"""
    if not submission.text.strip():
        raise HTTPException(status_code=422, detail="Message text is empty")
    try:
        accepted = await engine.handle_message(session_id, submission.text)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")

    snapshot = _snapshot(store, session_id, accepted=accepted)
    if not accepted:
        raise HTTPException(
            status_code=409,
            detail=f"Session is {snapshot.session.status.value}; message not accepted",
        )
    return snapshot

@router.put("/sessions/{session_id}/draft")
async def stage_draft(
    session_id: str,
    draft: DraftUpdate,
    engine: InterviewEngine = Depends(get_engine),
):
    try:
        engine.stage_draft(session_id, draft.text)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    return {"message": "Draft saved"}

@router.post("/sessions/{session_id}/pause", response_model=SessionSnapshot)
async def pause_session(
    session_id: str,
    engine: InterviewEngine = Depends(get_engine),
    store: SessionStore = Depends(get_store),
):
    try:
        await engine.pause(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _snapshot(store, session_id)

@router.post("/sessions/{session_id}/resume", response_model=SessionSnapshot)
async def resume_session(
    session_id: str,
    engine: InterviewEngine = Depends(get_engine),
    store: SessionStore = Depends(get_store),
):
    try:
        await engine.resume(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _snapshot(store, session_id)
