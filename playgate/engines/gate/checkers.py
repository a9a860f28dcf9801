"""
Answer checkers by question type.

A checker is a callable (submitted, correct_answer) -> bool. It raises
InvalidAnswerError when the submitted value has the wrong shape for the
type, e.g. a scalar where a list of ids is expected.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from playgate.engines.gate.types import QuestionType
from playgate.logging_config import get_logger

logger = get_logger(__name__)

AnswerChecker = Callable[[Any, Sequence[Union[int, str]]], bool]


class InvalidAnswerError(ValueError):
    """Submitted answer does not have the shape the question type requires."""


def _to_id(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidAnswerError("Boolean is not an answer id")
    if isinstance(value, float) and not value.is_integer():
        raise InvalidAnswerError(f"Not an answer id: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidAnswerError(f"Not an answer id: {value!r}") from None


def _correct_ids(correct: Sequence[Union[int, str]]) -> List[int]:
    """Stored correct ids; malformed entries are logged and dropped, so they never match."""
    ids = []
    for c in correct:
        try:
            if isinstance(c, bool):
                raise TypeError("boolean id")
            ids.append(int(c))
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric correct answer id %r", c)
    return ids


def check_single_choice(submitted: Any, correct: Sequence[Union[int, str]]) -> bool:
    if isinstance(submitted, (list, tuple, set, dict)):
        raise InvalidAnswerError("single_choice expects one answer id")
    return _to_id(submitted) in _correct_ids(correct)


def check_multiple_choice(submitted: Any, correct: Sequence[Union[int, str]]) -> bool:
    """Exact set match after sorting both sides. No partial credit."""
    if not isinstance(submitted, (list, tuple, set)):
        raise InvalidAnswerError("multiple_choice expects a list of answer ids")
    answer = sorted(_to_id(s) for s in submitted)
    expected = _correct_ids(correct)
    if len(expected) != len(correct):
        return False
    return answer == sorted(expected)


def check_text(submitted: Any, accepted: Sequence[Union[int, str]]) -> bool:
    """Trimmed, case-insensitive match against any accepted string."""
    if isinstance(submitted, bool) or not isinstance(submitted, (str, int, float)):
        raise InvalidAnswerError("text answers must be a string")
    answer = str(submitted).strip().casefold()
    return any(answer == str(a).strip().casefold() for a in accepted)


class AnswerCheckerRegistry:
    """Map of question type -> checker. Types without a checker grade as incorrect."""

    def __init__(self, checkers: Optional[Mapping[str, AnswerChecker]] = None):
        self._checkers: Dict[str, AnswerChecker] = dict(checkers or {})

    @classmethod
    def with_builtin_checkers(cls) -> "AnswerCheckerRegistry":
        return cls({
            QuestionType.SINGLE_CHOICE.value: check_single_choice,
            QuestionType.MULTIPLE_CHOICE.value: check_multiple_choice,
            QuestionType.FREE_TEXT.value: check_text,
            QuestionType.FILL_BLANK.value: check_text,
        })

    def register(self, question_type: Union[QuestionType, str], checker: AnswerChecker) -> None:
        self._checkers[_type_key(question_type)] = checker

    def get(self, question_type: Union[QuestionType, str]) -> Optional[AnswerChecker]:
        return self._checkers.get(_type_key(question_type))


def _type_key(question_type: Union[QuestionType, str]) -> str:
    return question_type.value if isinstance(question_type, QuestionType) else str(question_type)
