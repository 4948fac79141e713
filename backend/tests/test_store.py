from interview_assistant.models.database import SessionStore
from interview_assistant.models.schemas import (
    Answer,
    CandidateInfo,
    ChatMessage,
    InterviewSession,
    MessageMetadata,
    MessageType,
    SessionStatus,
)
from interview_assistant.services.questions import QuestionBank


def make_session(status=SessionStatus.IN_PROGRESS, answered=2):
    questions = QuestionBank(seed=5).generate()
    answers = [
        Answer(question_id=q.id, text=f"answer {i}", time_taken=10 + i, score=6 + i, feedback="ok")
        for i, q in enumerate(questions[:answered])
    ]
    return InterviewSession(
        candidate_info=CandidateInfo(name="Jane Doe", email="jane@doe.dev", phone="+1 555 123 4567"),
        questions=questions,
        answers=answers,
        current_question_index=answered,
        status=status,
        time_remaining=45,
    )


def test_session_round_trip(store):
    session = make_session()
    store.save_session(session)

    loaded = store.get_session(session.id)
    assert loaded == session
    assert [a.question_id for a in loaded.answers] == ["q_0", "q_1"]


def test_save_replaces_whole_aggregate(store):
    session = make_session()
    store.save_session(session)

    session.status = SessionStatus.PAUSED
    session.time_remaining = 12
    store.save_session(session)

    loaded = store.get_session(session.id)
    assert loaded.status == SessionStatus.PAUSED
    assert loaded.time_remaining == 12
    assert len(store.list_sessions()) == 1


def test_unknown_session_is_none(store):
    assert store.get_session("missing") is None


def test_messages_are_kept_in_append_order(store):
    session = make_session()
    store.save_session(session)
    first = ChatMessage(type=MessageType.SYSTEM, content="first")
    second = ChatMessage(
        type=MessageType.ASSISTANT,
        content="second",
        metadata=MessageMetadata(is_question=True, question_id="q_0"),
    )
    store.append_message(session.id, first)
    store.append_message(session.id, second)
    store.append_message("other-session", ChatMessage(type=MessageType.USER, content="elsewhere"))

    assert store.get_messages(session.id) == [first, second]


def test_active_session_pointer(store):
    assert store.get_active_session_id() is None
    store.set_active_session_id("abc")
    assert store.get_active_session_id() == "abc"
    store.set_active_session_id(None)
    assert store.get_active_session_id() is None


def test_list_resumable_excludes_completed(store):
    unfinished = [
        make_session(SessionStatus.COLLECTING_INFO, answered=0),
        make_session(SessionStatus.IN_PROGRESS),
        make_session(SessionStatus.PAUSED),
    ]
    for session in unfinished:
        store.save_session(session)
    store.save_session(make_session(SessionStatus.COMPLETED, answered=6))

    resumable = store.list_resumable()
    assert {s.id for s in resumable} == {s.id for s in unfinished}
    # the store reports sessions as they were left
    assert {s.status for s in resumable} == {
        SessionStatus.COLLECTING_INFO, SessionStatus.IN_PROGRESS, SessionStatus.PAUSED,
    }


def test_sessions_survive_reopening(tmp_path):
    url = f"sqlite:///{tmp_path / 'sessions.db'}"
    session = make_session()

    SessionStore(url).save_session(session)
    reopened = SessionStore(url)

    assert reopened.get_session(session.id) == session
    assert [s.id for s in reopened.list_resumable()] == [session.id]
