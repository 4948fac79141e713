import random
from typing import Dict, List, Optional

from interview_assistant.models.schemas import Difficulty, Question

QUESTIONS_PER_DIFFICULTY = 2

TIME_LIMITS: Dict[Difficulty, int] = {
    Difficulty.EASY: 20,
    Difficulty.MEDIUM: 60,
    Difficulty.HARD: 120,
}

QUESTION_POOLS: Dict[Difficulty, List[str]] = {
    Difficulty.EASY: [
        "What is React and what are its key features?",
        "Explain the difference between state and props in React.",
        "What is Node.js and why is it useful for backend development?",
        "Describe the purpose of package.json in a Node.js project.",
        "What are React hooks and name a few commonly used ones?",
        "Explain what JSX is in React.",
    ],
    Difficulty.MEDIUM: [
        "Explain the useEffect hook and its common use cases.",
        "How would you implement authentication in a Node.js Express application?",
        "What is the Virtual DOM and how does React use it?",
        "Describe the event loop in Node.js.",
        "How do you handle state management in large React applications?",
        "Explain middleware in Express.js with examples.",
    ],
    Difficulty.HARD: [
        "How would you optimize a React application for performance?",
        "Design a scalable microservices architecture using Node.js.",
        "Explain React's reconciliation algorithm and fiber architecture.",
        "How would you implement server-side rendering with React and Node.js?",
        "Describe strategies for handling database transactions in Node.js.",
        "How would you implement real-time features using WebSockets in a full-stack application?",
    ],
}


class QuestionBank:
    """Draws the fixed easy/medium/hard interview from the template pools.

    Picks within a pool are independent, so the same template can appear
    twice in one interview.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def generate(self) -> List[Question]:
        questions = []
        order_index = 0
        for difficulty in (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD):
            pool = QUESTION_POOLS[difficulty]
            for _ in range(QUESTIONS_PER_DIFFICULTY):
                questions.append(Question(
                    id=f"q_{order_index}",
                    text=self._rng.choice(pool),
                    difficulty=difficulty,
                    time_limit=TIME_LIMITS[difficulty],
                    order_index=order_index,
                ))
                order_index += 1
        return questions
