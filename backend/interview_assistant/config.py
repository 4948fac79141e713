from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # API Configuration
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    DEBUG: bool = True
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Database
    DATABASE_URL: str = "sqlite:///./interview_assistant.db"

    # Remote grader (Ollama-compatible). Unset means local scoring only.
    GRADER_BASE_URL: Optional[str] = None
    GRADER_MODEL: str = "llama3.2"
    GRADER_TIMEOUT_SECONDS: float = 30.0

    # Interview pacing
    TIMER_TICK_SECONDS: float = 1.0
    NEXT_QUESTION_DELAY_SECONDS: float = 1.0
    QUESTION_SEED: Optional[int] = None

    class Config:
        env_file = ".env"

settings = Settings()
