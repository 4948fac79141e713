from interview_assistant.models.schemas import Difficulty
from interview_assistant.services.questions import QUESTION_POOLS, QuestionBank


def test_generate_has_fixed_shape():
    questions = QuestionBank(seed=1).generate()

    assert [q.difficulty for q in questions] == [
        Difficulty.EASY, Difficulty.EASY,
        Difficulty.MEDIUM, Difficulty.MEDIUM,
        Difficulty.HARD, Difficulty.HARD,
    ]
    assert [q.time_limit for q in questions] == [20, 20, 60, 60, 120, 120]
    assert [q.order_index for q in questions] == list(range(6))
    assert len({q.id for q in questions}) == 6


def test_questions_come_from_their_difficulty_pool():
    for question in QuestionBank(seed=3).generate():
        assert question.text in QUESTION_POOLS[question.difficulty]


def test_same_seed_same_interview():
    first = QuestionBank(seed=42).generate()
    second = QuestionBank(seed=42).generate()
    assert [q.text for q in first] == [q.text for q in second]


def test_repeated_draws_vary_within_one_bank():
    bank = QuestionBank(seed=42)
    draws = {tuple(q.text for q in bank.generate()) for _ in range(20)}
    assert len(draws) > 1
