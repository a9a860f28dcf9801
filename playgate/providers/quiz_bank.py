"""
Quiz Bank - default Quiz Question Provider backed by a JSON document.

File format:

    {
      "quizzes": [
        {
          "id": 5,
          "randomize_answers": true,
          "questions": [
            {
              "id": 101,
              "title": "Capitals",
              "text": "What is the capital of France?",
              "type": "single_choice",
              "points": 2,
              "difficulty": "easy",
              "answers": [{"text": "Paris", "correct": true}, {"text": "Rome"}]
            },
            {
              "id": 102,
              "text": "H2O is commonly called ____.",
              "type": "fill_blank",
              "accepted_answers": ["water"]
            }
          ]
        }
      ]
    }

Answer ids are the answer's position in the authored list, so they stay
stable when answers are shuffled for serving.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from playgate.engines.gate.types import AnswerOption, QuestionType, QuizQuestion
from playgate.logging_config import get_logger

logger = get_logger(__name__)

TEXT_TYPES = frozenset((QuestionType.FREE_TEXT, QuestionType.FILL_BLANK))


SAMPLE_QUIZZES: Dict[str, Any] = {
    "quizzes": [
        {
            "id": 1,
            "randomize_answers": False,
            "questions": [
                {
                    "id": 1,
                    "title": "Primary colours",
                    "text": "Which of these is a primary colour?",
                    "type": "single_choice",
                    "points": 1,
                    "difficulty": "easy",
                    "answers": [
                        {"text": "Green"},
                        {"text": "Red", "correct": True},
                        {"text": "Purple"},
                    ],
                },
                {
                    "id": 2,
                    "title": "Even numbers",
                    "text": "Select every even number.",
                    "type": "multiple_choice",
                    "points": 2,
                    "difficulty": "medium",
                    "answers": [
                        {"text": "3"},
                        {"text": "4", "correct": True},
                        {"text": "7"},
                        {"text": "10", "correct": True},
                    ],
                },
                {
                    "id": 3,
                    "title": "Planets",
                    "text": "Which planet is known as the red planet?",
                    "type": "free_text",
                    "points": 1,
                    "difficulty": "easy",
                    "accepted_answers": ["Mars"],
                },
            ],
        },
    ],
}


class QuizBank:
    """In-memory quiz store implementing QuizQuestionProvider."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._quiz_questions: Dict[int, List[int]] = {}
        self._randomized: Dict[int, bool] = {}
        self._questions: Dict[int, QuizQuestion] = {}
        self.load(data if data is not None else {"quizzes": []})

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "QuizBank":
        """Load a bank from JSON; a missing or unreadable file yields an empty bank."""
        path = Path(path)
        if not path.exists():
            logger.warning("Quiz bank file %s not found, starting empty", path)
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.error("Could not read quiz bank %s: %s", path, exc)
            return cls()
        if not isinstance(data, dict):
            logger.error("Quiz bank %s is not a JSON object", path)
            return cls()
        return cls(data)

    @classmethod
    def sample(cls) -> "QuizBank":
        return cls(SAMPLE_QUIZZES)

    def load(self, data: Dict[str, Any]) -> None:
        for quiz in data.get("quizzes", []):
            try:
                quiz_id = int(quiz["id"])
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping quiz without a valid id: %r", quiz)
                continue
            self._randomized[quiz_id] = bool(quiz.get("randomize_answers", False))
            ids = self._quiz_questions.setdefault(quiz_id, [])
            for d in quiz.get("questions", []):
                question = self._parse_question_dict(d, quiz_id)
                if question is None:
                    logger.warning("Skipping invalid question in quiz %s: %r", quiz_id, d)
                    continue
                self._questions[question.id] = question
                if question.id not in ids:
                    ids.append(question.id)

    @staticmethod
    def _parse_question_dict(d: dict, quiz_id: int) -> Optional[QuizQuestion]:
        """Convert a JSON dict to QuizQuestion; returns None if invalid."""
        try:
            question_type = QuestionType(d.get("type", QuestionType.SINGLE_CHOICE.value))
            raw_answers = d.get("answers") or []
            answers = [
                AnswerOption(id=i, text=str(a.get("text", "")), html=bool(a.get("html", False)))
                for i, a in enumerate(raw_answers)
            ]
            if question_type in TEXT_TYPES:
                accepted = d.get("accepted_answers")
                if accepted is None:
                    accepted = [a.get("text", "") for a in raw_answers if a.get("correct")]
                correct: List[Union[int, str]] = [str(a) for a in accepted]
                answers = []
            else:
                correct = [i for i, a in enumerate(raw_answers) if a.get("correct")]
            return QuizQuestion(
                id=int(d["id"]),
                quiz_id=quiz_id,
                title=str(d.get("title", "")),
                text=str(d["text"]),
                type=question_type,
                points=int(d.get("points", 1)),
                answers=answers,
                correct_answer=correct,
                difficulty=str(d["difficulty"]) if d.get("difficulty") is not None else None,
            )
        except (ValueError, KeyError, TypeError, AttributeError):
            return None

    async def get_question_ids(self, quiz_id: int) -> List[int]:
        return list(self._quiz_questions.get(quiz_id, []))

    async def get_question(self, question_id: int) -> Optional[QuizQuestion]:
        return self._questions.get(question_id)

    async def answers_randomized(self, quiz_id: int) -> bool:
        return self._randomized.get(quiz_id, False)
