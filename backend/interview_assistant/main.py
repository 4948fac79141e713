import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from interview_assistant.api import interview, dashboard, health
from interview_assistant.config import settings
from interview_assistant.services.engine import get_engine

logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = app.dependency_overrides.get(get_engine, get_engine)()
    resumable = engine.store.list_resumable()
    if resumable:
        logger.info(f"{len(resumable)} unfinished interview session(s) can be resumed")
    yield
    await engine.shutdown()
    await engine.scorer.aclose()

app = FastAPI(
    title="Interview Assistant API",
    description="Resume intake, timed interviews and candidate ranking",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware for frontend communication
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(interview.router, prefix="/api/interview", tags=["interview"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])

@app.get("/")
async def root():
    return {"message": "Interview Assistant API is running!"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
