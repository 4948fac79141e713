from fastapi import APIRouter, HTTPException, Depends, Query
from typing import List, Optional

from interview_assistant.models.database import SessionStore, get_store
from interview_assistant.models.schemas import CandidateDetail, CandidateRow, SessionStatus
from interview_assistant.services.dashboard import SORT_KEYS, candidate_detail, rank_completed

router = APIRouter()

@router.get("/candidates", response_model=List[CandidateRow])
async def list_candidates(
    search: Optional[str] = None,
    sort_by: str = Query("score"),
    store: SessionStore = Depends(get_store),
):
    """Completed interviews ranked by total score"""
    if sort_by not in SORT_KEYS:
        raise HTTPException(status_code=422, detail=f"sort_by must be one of {', '.join(SORT_KEYS)}")
    return rank_completed(store.list_sessions([SessionStatus.COMPLETED]), search=search, sort_by=sort_by)

@router.get("/candidates/{session_id}", response_model=CandidateDetail)
async def get_candidate(session_id: str, store: SessionStore = Depends(get_store)):
    """Questions, answers, summary and full chat history for one candidate"""
    session = store.get_session(session_id)
    if session is None or session.status != SessionStatus.COMPLETED:
        raise HTTPException(status_code=404, detail="Completed interview not found")
    return candidate_detail(session, store.get_messages(session_id))
