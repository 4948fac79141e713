import json
import logging
import math
from typing import Dict, List, Optional, Sequence

import httpx

from interview_assistant.config import settings
from interview_assistant.models.schemas import (
    Answer,
    Difficulty,
    Question,
    ScoreOutcome,
    SummaryOutcome,
)

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 10

ANSWER_KEYWORDS = [
    "react", "node", "javascript", "component", "state",
    "props", "hook", "express", "api", "database",
]

FEEDBACK_GOOD = "Good answer with relevant details."
FEEDBACK_ADEQUATE = "Adequate answer but could be more comprehensive."
FEEDBACK_WEAK = "Answer needs more detail and technical depth."

SUMMARY_STRONG = "Strong performance overall."
SUMMARY_ADEQUATE = "Adequate performance with room for improvement."
SUMMARY_WEAK = "Needs significant improvement in technical skills."


def clamp_score(value) -> int:
    return int(min(MAX_SCORE, max(MIN_SCORE, round(value))))


def percentage(answers: Sequence[Answer], questions: Sequence[Question]) -> int:
    """Share of the maximum possible score, rounded half up."""
    if not questions:
        return 0
    actual = sum(answer.score or 0 for answer in answers)
    return int(math.floor(100 * actual / (MAX_SCORE * len(questions)) + 0.5))


def local_evaluation(answer: str) -> ScoreOutcome:
    """Deterministic length and keyword heuristic."""
    word_count = len(answer.split())
    lowered = answer.lower()

    score = 5
    if word_count > 50:
        score += 2
    elif word_count > 20:
        score += 1

    if any(keyword in lowered for keyword in ANSWER_KEYWORDS):
        score += 2

    if len(answer) < 10:
        score = 2

    score = clamp_score(score)

    if score >= 7:
        feedback = FEEDBACK_GOOD
    elif score >= 5:
        feedback = FEEDBACK_ADEQUATE
    else:
        feedback = FEEDBACK_WEAK

    return ScoreOutcome(source="fallback", score=score, feedback=feedback)


def local_summary(total_score: int) -> str:
    if total_score >= 70:
        verdict = SUMMARY_STRONG
    elif total_score >= 50:
        verdict = SUMMARY_ADEQUATE
    else:
        verdict = SUMMARY_WEAK
    return f"Candidate completed the interview with a score of {total_score}%. {verdict}"


def scores_by_difficulty(answers: Sequence[Answer], questions: Sequence[Question]) -> Dict[str, List[Optional[int]]]:
    difficulty_of = {q.id: q.difficulty for q in questions}
    breakdown: Dict[str, List[Optional[int]]] = {d.value: [] for d in Difficulty}
    for answer in answers:
        difficulty = difficulty_of.get(answer.question_id)
        if difficulty is not None:
            breakdown[difficulty.value].append(answer.score)
    return breakdown


class AnswerScorer:
    """Grades answers through a remote grader when one is configured.

    Every remote failure collapses into the local heuristic, so callers only
    ever see a ``ScoreOutcome``/``SummaryOutcome`` and never an exception.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        model: str = "llama3.2",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.model = model
        self.client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def remote_enabled(self) -> bool:
        return self.base_url is not None

    async def score(self, question: Question, answer: str) -> ScoreOutcome:
        if not self.remote_enabled:
            return local_evaluation(answer)

        prompt = f"""
        Evaluate the following answer to a technical interview question.

        Question: {question.text}
        Difficulty: {question.difficulty.value}
        Answer: {answer}

        Provide:
        1. A score from 0 to 10
        2. Brief feedback (max 2 sentences)

        Format your response as JSON:
        {{
          "score": <number>,
          "feedback": "<string>"
        }}
        """

        response = await self._call_grader(
            prompt,
            system="You are an expert technical interviewer evaluating answers for a full-stack developer role.",
            json_mode=True,
        )
        parsed = self._parse_evaluation(response)
        if parsed is None:
            logger.warning("Remote grading unavailable for question %s, using local evaluation", question.id)
            return local_evaluation(answer)
        return parsed

    async def summarize(self, answers: Sequence[Answer], questions: Sequence[Question]) -> SummaryOutcome:
        total_score = percentage(answers, questions)
        fallback = SummaryOutcome(source="fallback", total_score=total_score, summary=local_summary(total_score))

        if not self.remote_enabled:
            return fallback

        breakdown = scores_by_difficulty(answers, questions)
        performance = "\n".join(
            f"        - {difficulty.capitalize()} questions: {', '.join(str(s) for s in scores)}"
            for difficulty, scores in breakdown.items()
        )
        prompt = f"""
        Generate a brief summary (2-3 sentences) for a candidate's interview performance.

        Total Score: {total_score}%
        Number of Questions: {len(questions)}

        Performance by difficulty:
{performance}

        Provide a professional summary highlighting strengths and areas for improvement.
        """

        response = await self._call_grader(
            prompt,
            system="You are an expert technical interviewer providing candidate summaries.",
        )
        if not response or not response.strip():
            logger.warning("Remote summary unavailable, using local template")
            return fallback
        return SummaryOutcome(source="remote", total_score=total_score, summary=response.strip())

    async def _call_grader(self, prompt: str, system: str, json_mode: bool = False) -> Optional[str]:
        """One request to the grader; None on any failure."""
        payload = {
            "model": self.model,
            "system": system,
            "prompt": prompt,
            "stream": False,
        }
        if json_mode:
            payload["format"] = "json"

        try:
            response = await self.client.post(f"{self.base_url}/api/generate", json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            logger.warning(f"Error calling grader: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Grader returned a non-JSON body: {e}")
            return None
        except Exception as e:
            # bad base URL, closed client and the like
            logger.warning(f"Grader request failed: {type(e).__name__}: {e}")
            return None

        text = body.get("response") if isinstance(body, dict) else None
        return text if isinstance(text, str) else None

    def _parse_evaluation(self, response: Optional[str]) -> Optional[ScoreOutcome]:
        if response is None:
            return None
        try:
            result = json.loads(response)
        except ValueError:
            logger.warning(f"Could not parse grader evaluation: {response[:200]}")
            return None

        if not isinstance(result, dict):
            return None
        raw_score = result.get("score")
        if isinstance(raw_score, bool) or not isinstance(raw_score, (int, float)):
            return None
        if not math.isfinite(raw_score):
            return None

        feedback = result.get("feedback")
        if not isinstance(feedback, str) or not feedback.strip():
            feedback = "Answer evaluated."

        return ScoreOutcome(source="remote", score=clamp_score(raw_score), feedback=feedback.strip())

    async def aclose(self) -> None:
        await self.client.aclose()


_scorer: Optional[AnswerScorer] = None

def get_scorer() -> AnswerScorer:
    global _scorer
    if _scorer is None:
        _scorer = AnswerScorer(
            base_url=settings.GRADER_BASE_URL,
            model=settings.GRADER_MODEL,
            timeout=settings.GRADER_TIMEOUT_SECONDS,
        )
    return _scorer
