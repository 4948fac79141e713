from fastapi import APIRouter, Depends

from interview_assistant.services.engine import InterviewEngine, get_engine

router = APIRouter()

@router.get("/")
async def health_check():

    return {
        "status": "healthy",
        "service": "Interview Assistant API",
        "version": "1.0.0"
    }

@router.get("/ready")
async def readiness_check(engine: InterviewEngine = Depends(get_engine)):

    return {
        "status": "ready",
        "dependencies": {
            "store": "ok",
            "grader": "remote" if engine.scorer.remote_enabled else "local"
        }
    }
