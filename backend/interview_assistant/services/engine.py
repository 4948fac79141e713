"""
Interview Engine Module
Session lifecycle for one candidate: collecting_info -> in_progress -> completed,
with pause/resume and a per-question countdown.
"""

import asyncio
import logging
from typing import Dict, Optional, Set

from interview_assistant.config import settings
from interview_assistant.models.database import SessionStore, get_store
from interview_assistant.models.schemas import (
    Answer,
    CandidateInfo,
    ChatMessage,
    ExtractedFields,
    InterviewSession,
    MessageMetadata,
    MessageType,
    SessionStatus,
    utcnow,
)
from interview_assistant.services.extractor import validate_fields
from interview_assistant.services.questions import QuestionBank
from interview_assistant.services.scorer import AnswerScorer, get_scorer, local_evaluation

logger = logging.getLogger(__name__)

TIME_EXPIRED_PLACEHOLDER = "Time expired - no answer provided"


class SessionNotFoundError(Exception):
    """No session with the requested id exists in the store."""
    pass


class InvalidTransitionError(Exception):
    """The requested action is not legal in the session's current status."""
    pass


class InterviewEngine:
    """Drives interview sessions through their lifecycle.

    Every operation names its session explicitly. Sessions are only ever
    mutated from the event loop the engine runs on, and at most one answer
    submission per session is outstanding at any time.
    """

    def __init__(
        self,
        store: SessionStore,
        scorer: AnswerScorer,
        question_bank: Optional[QuestionBank] = None,
        tick_seconds: float = 1.0,
        next_question_delay: float = 1.0,
        auto_timer: bool = True,
    ):
        self.store = store
        self.scorer = scorer
        self.question_bank = question_bank or QuestionBank()
        self.tick_seconds = tick_seconds
        self.next_question_delay = next_question_delay
        self.auto_timer = auto_timer

        self._timers: Dict[str, asyncio.Task] = {}
        self._in_flight: Set[str] = set()
        self._pacing: Set[str] = set()
        self._drafts: Dict[str, str] = {}

    # ============ HELPERS ============

    def get_session(self, session_id: str) -> InterviewSession:
        session = self.store.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    def is_submitting(self, session_id: str) -> bool:
        return session_id in self._in_flight

    def has_timer(self, session_id: str) -> bool:
        return session_id in self._timers

    def _post(
        self,
        session_id: str,
        message_type: MessageType,
        content: str,
        metadata: Optional[MessageMetadata] = None,
    ) -> ChatMessage:
        message = ChatMessage(type=message_type, content=content, metadata=metadata)
        self.store.append_message(session_id, message)
        return message

    def _question_shown(self, session: InterviewSession) -> bool:
        question = session.current_question
        return question is not None and any(
            m.metadata is not None and m.metadata.is_question and m.metadata.question_id == question.id
            for m in self.store.get_messages(session.id)
        )

    def _prompt_for_missing(self, session: InterviewSession) -> None:
        missing = validate_fields(session.candidate_info).missing_fields
        self._post(
            session.id,
            MessageType.ASSISTANT,
            f"I noticed some information is missing from your resume. Please provide your {', '.join(missing)}.",
        )

    # ============ TRANSITIONS ============

    async def create_session(self, fields: ExtractedFields) -> InterviewSession:
        """Open a session for a freshly parsed resume and make it active."""
        candidate = CandidateInfo(
            name=fields.name or "",
            email=fields.email or "",
            phone=fields.phone or "",
        )
        session = InterviewSession(candidate_info=candidate, status=SessionStatus.COLLECTING_INFO)
        self.store.save_session(session)
        self.store.set_active_session_id(session.id)
        logger.info(f"Created session {session.id} for candidate {candidate.id}")

        self._post(session.id, MessageType.SYSTEM, "Resume uploaded successfully. Let me verify your information.")

        if validate_fields(candidate).is_valid:
            return await self.start_interview(session.id)

        self._prompt_for_missing(session)
        return session

    async def handle_message(self, session_id: str, text: str) -> bool:
        """Route chat input to field collection or answer submission.

        Returns False when the input was not accepted (wrong status, or an
        answer is already being graded).
        """
        session = self.get_session(session_id)

        if session.status == SessionStatus.COLLECTING_INFO:
            self._post(session_id, MessageType.USER, text)
            await self.supply_field(session_id, text)
            return True

        if session.status == SessionStatus.IN_PROGRESS:
            return await self.submit_answer(session_id, text) is not None

        logger.info(f"Ignoring message for session {session_id} in status {session.status.value}")
        return False

    async def supply_field(self, session_id: str, text: str) -> InterviewSession:
        session = self.get_session(session_id)
        if session.status != SessionStatus.COLLECTING_INFO:
            raise InvalidTransitionError(
                f"Cannot collect candidate info while session is {session.status.value}"
            )

        value = text.strip()
        missing = validate_fields(session.candidate_info).missing_fields
        assigned = None
        if value and missing:
            assigned = missing[0]
            setattr(session.candidate_info, assigned, value)
            self.store.save_session(session)
            logger.info(f"Session {session_id}: collected {assigned}")

        validation = validate_fields(session.candidate_info)
        if validation.is_valid:
            return await self.start_interview(session_id)

        next_field = validation.missing_fields[0]
        if assigned:
            prompt = f"Thank you! Now, please provide your {next_field}."
        else:
            prompt = f"Please provide your {next_field}."
        self._post(session_id, MessageType.ASSISTANT, prompt)
        return session

    async def start_interview(self, session_id: str) -> InterviewSession:
        session = self.get_session(session_id)
        if session.status != SessionStatus.COLLECTING_INFO:
            raise InvalidTransitionError(f"Cannot start an interview that is {session.status.value}")
        if not validate_fields(session.candidate_info).is_valid:
            raise InvalidTransitionError("Candidate information is incomplete")

        session.questions = self.question_bank.generate()
        session.status = SessionStatus.IN_PROGRESS
        session.time_remaining = session.questions[0].time_limit
        self.store.save_session(session)
        logger.info(f"Session {session_id} started with {len(session.questions)} questions")

        self._present_question(session, opening=True)
        return session

    def _present_question(self, session: InterviewSession, opening: bool = False) -> None:
        question = session.current_question
        content = (
            f"Question {session.current_question_index + 1} ({question.difficulty.value}):\n"
            f"{question.text}"
        )
        if opening:
            content = "Great! Let's begin the interview.\n\n" + content
        self._post(
            session.id,
            MessageType.ASSISTANT,
            content,
            MessageMetadata(is_question=True, question_id=question.id),
        )
        self._arm_timer(session)

    def stage_draft(self, session_id: str, text: str) -> None:
        """Remember the text to auto-submit if the current question's time runs out."""
        self.get_session(session_id)
        self._drafts[session_id] = text

    async def submit_answer(self, session_id: str, text: str, expired: bool = False) -> Optional[Answer]:
        """Grade and record the answer to the current question.

        Returns None, without touching the session, if the session is not in
        progress or another submission for it has not finished yet.
        """
        if session_id in self._in_flight or session_id in self._pacing:
            logger.info(f"Submission already in flight for session {session_id}, ignoring")
            return None

        session = self.get_session(session_id)
        question = session.current_question
        if session.status != SessionStatus.IN_PROGRESS or question is None:
            logger.info(f"Rejected answer for session {session_id} in status {session.status.value}")
            return None

        self._in_flight.add(session_id)
        try:
            self._disarm_timer(session_id)
            self._drafts.pop(session_id, None)

            if expired:
                time_remaining = 0
                if not text.strip():
                    text = TIME_EXPIRED_PLACEHOLDER
            elif session.time_remaining is None:
                time_remaining = question.time_limit
            else:
                time_remaining = session.time_remaining
            time_taken = min(question.time_limit, max(0, question.time_limit - time_remaining))

            if expired:
                self._post(session_id, MessageType.SYSTEM, "Time's up! Submitting your answer.")
            self._post(
                session_id,
                MessageType.USER,
                text,
                MessageMetadata(is_answer=True, question_id=question.id),
            )

            try:
                outcome = await self.scorer.score(question, text)
            except Exception:
                logger.exception(f"Scoring failed for session {session_id}, using local evaluation")
                outcome = local_evaluation(text)

            answer = Answer(
                question_id=question.id,
                text=text,
                time_taken=time_taken,
                score=outcome.score,
                feedback=outcome.feedback,
            )
            session.answers.append(answer)
            session.current_question_index += 1
            more_questions = session.current_question_index < len(session.questions)
            session.time_remaining = session.current_question.time_limit if more_questions else None
            self.store.save_session(session)
            logger.info(
                f"Session {session_id}: answer {len(session.answers)}/{len(session.questions)} "
                f"scored {outcome.score} ({outcome.source})"
            )

            self._post(session_id, MessageType.SYSTEM, f"Score: {outcome.score}/10. {outcome.feedback}")

            if not more_questions:
                await self._finish(session)
                return answer
        finally:
            self._in_flight.discard(session_id)

        # the answer is saved; a pause may land while the next question waits
        self._pacing.add(session_id)
        try:
            if self.next_question_delay > 0:
                await asyncio.sleep(self.next_question_delay)
        finally:
            self._pacing.discard(session_id)

        session = self.get_session(session_id)
        if session.status != SessionStatus.IN_PROGRESS:
            logger.info(
                f"Session {session_id} is {session.status.value}, "
                f"holding question {session.current_question_index + 1}"
            )
        elif not self._question_shown(session):
            self._present_question(session)
        return answer

    async def complete(self, session_id: str) -> InterviewSession:
        """Write the summary for an interview whose answers are all recorded."""
        session = self.get_session(session_id)
        if session.status != SessionStatus.IN_PROGRESS or len(session.answers) != len(session.questions):
            raise InvalidTransitionError("Only a fully answered interview can be completed")
        await self._finish(session)
        return session

    async def _finish(self, session: InterviewSession) -> None:
        self._disarm_timer(session.id)
        outcome = await self.scorer.summarize(session.answers, session.questions)

        session.total_score = outcome.total_score
        session.summary = outcome.summary
        session.completed_at = utcnow()
        session.status = SessionStatus.COMPLETED
        session.time_remaining = None
        self.store.save_session(session)
        logger.info(f"Session {session.id} completed with score {outcome.total_score}% ({outcome.source})")

        self._post(
            session.id,
            MessageType.SYSTEM,
            f"Interview Complete!\n\nFinal Score: {outcome.total_score}%\n\n{outcome.summary}",
        )

    async def pause(self, session_id: str) -> InterviewSession:
        session = self.get_session(session_id)
        if session.status != SessionStatus.IN_PROGRESS:
            raise InvalidTransitionError(f"Cannot pause a session that is {session.status.value}")
        if session_id in self._in_flight:
            raise InvalidTransitionError("Cannot pause while an answer is being graded")

        self._disarm_timer(session_id)
        session.status = SessionStatus.PAUSED
        session.paused_at = utcnow()
        self.store.save_session(session)
        logger.info(
            f"Session {session_id} paused at question {session.current_question_index + 1} "
            f"with {session.time_remaining}s remaining"
        )

        self._post(session_id, MessageType.SYSTEM, "Interview paused. Your progress has been saved.")
        return session

    async def resume(self, session_id: str) -> InterviewSession:
        """Make a session active again.

        Paused sessions go back to in_progress. Sessions left in_progress or
        collecting_info by a restart are reactivated as they are.
        """
        session = self.get_session(session_id)
        if session.status in (SessionStatus.COMPLETED, SessionStatus.NOT_STARTED):
            raise InvalidTransitionError(f"Cannot resume a session that is {session.status.value}")

        if session.status == SessionStatus.PAUSED:
            session.status = SessionStatus.IN_PROGRESS
            session.paused_at = None

        if session.status == SessionStatus.IN_PROGRESS and session.current_question is None:
            # every answer is in but the summary was never written
            self.store.save_session(session)
            self.store.set_active_session_id(session_id)
            return await self.complete(session_id)

        if session.status == SessionStatus.IN_PROGRESS and session.time_remaining is None:
            session.time_remaining = session.current_question.time_limit

        self.store.save_session(session)
        self.store.set_active_session_id(session_id)
        logger.info(f"Session {session_id} resumed ({session.status.value})")

        if session.status == SessionStatus.IN_PROGRESS:
            self._post(
                session_id,
                MessageType.SYSTEM,
                f"Welcome back! Resuming question {session.current_question_index + 1} "
                f"with {session.time_remaining} seconds remaining.",
            )
            if self._question_shown(session):
                self._arm_timer(session)
            else:
                self._present_question(session)
        else:
            self._post(session_id, MessageType.SYSTEM, "Welcome back!")
            self._prompt_for_missing(session)
        return session

    # ============ COUNTDOWN ============

    def _arm_timer(self, session: InterviewSession) -> None:
        if not self.auto_timer:
            return
        self._disarm_timer(session.id)
        self._timers[session.id] = asyncio.create_task(
            self._countdown(session.id, session.current_question_index)
        )

    def _disarm_timer(self, session_id: str) -> None:
        task = self._timers.pop(session_id, None)
        # the countdown may itself be the caller when it auto-submits
        if task is not None and task is not asyncio.current_task():
            task.cancel()

    async def _countdown(self, session_id: str, question_index: int) -> None:
        try:
            while await self._sleep_then_tick(session_id, question_index):
                pass
        except Exception:
            logger.exception(f"Countdown for session {session_id} stopped")
        finally:
            if self._timers.get(session_id) is asyncio.current_task():
                self._timers.pop(session_id, None)

    async def _sleep_then_tick(self, session_id: str, question_index: int) -> bool:
        await asyncio.sleep(self.tick_seconds)
        return await self.tick(session_id, question_index)

    async def tick(self, session_id: str, question_index: int) -> bool:
        """Advance the countdown for ``question_index`` by one second.

        Returns True while the countdown should keep running. A tick for a
        question that is no longer current does nothing.
        """
        if session_id in self._in_flight or session_id in self._pacing:
            return False

        session = self.store.get_session(session_id)
        if (
            session is None
            or session.status != SessionStatus.IN_PROGRESS
            or session.current_question_index != question_index
        ):
            return False

        remaining = session.time_remaining
        if remaining is None:
            remaining = session.current_question.time_limit
        session.time_remaining = max(0, remaining - 1)
        self.store.save_session(session)

        if session.time_remaining > 0:
            return True

        logger.info(f"Time expired on question {question_index + 1} of session {session_id}")
        await self.submit_answer(session_id, self._drafts.get(session_id, ""), expired=True)
        return False

    async def shutdown(self) -> None:
        tasks = list(self._timers.values())
        self._timers.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


_engine: Optional[InterviewEngine] = None

def get_engine() -> InterviewEngine:
    global _engine
    if _engine is None:
        _engine = InterviewEngine(
            store=get_store(),
            scorer=get_scorer(),
            question_bank=QuestionBank(settings.QUESTION_SEED),
            tick_seconds=settings.TIMER_TICK_SECONDS,
            next_question_delay=settings.NEXT_QUESTION_DELAY_SECONDS,
        )
    return _engine
