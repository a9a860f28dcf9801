"""
Question Selector - picks one question from a quiz pool and caches its answer.
"""

import random
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from playgate.engines.gate.cache import QuestionCache, QuestionCacheKey
from playgate.engines.gate.types import CachedQuestionRecord, Question, QuizQuestion
from playgate.logging_config import get_logger

if TYPE_CHECKING:
    from playgate.providers.base import QuizQuestionProvider

logger = get_logger(__name__)


class QuestionSelector:
    """
    Serves sanitized questions.

    Pool = quiz question ids - exclude, narrowed by difficulty when given.
    A requested question_id is used if it survives the filters; otherwise
    one id is drawn uniformly at random. The chosen record is cached with
    its correct answer under (question_id, user_id) before the sanitized
    copy is returned.
    """

    def __init__(
        self,
        provider: "QuizQuestionProvider",
        cache: QuestionCache,
        rng: Optional[random.Random] = None,
    ):
        self.provider = provider
        self.cache = cache
        self.rng = rng or random.Random()

    async def _filter_by_difficulty(
        self,
        candidate_ids: List[int],
        difficulty: str,
        fetched: Dict[int, QuizQuestion],
    ) -> List[int]:
        kept = []
        for qid in candidate_ids:
            record = await self.provider.get_question(qid)
            if record is None:
                continue
            fetched[qid] = record
            if record.difficulty == difficulty:
                kept.append(qid)
        return kept

    async def select(
        self,
        quiz_id: int,
        user_id: int,
        exclude: Optional[Iterable[int]] = None,
        difficulty: Optional[str] = None,
        question_id: Optional[int] = None,
    ) -> Optional[Question]:
        """Return a sanitized question, or None when no question is available."""
        excluded = {int(q) for q in (exclude or ())}
        candidates = [
            qid for qid in await self.provider.get_question_ids(quiz_id)
            if qid not in excluded
        ]

        fetched: Dict[int, QuizQuestion] = {}
        if difficulty:
            candidates = await self._filter_by_difficulty(candidates, difficulty, fetched)

        if not candidates:
            logger.info(
                "No questions available",
                extra={"quiz_id": quiz_id, "user_id": user_id, "excluded": len(excluded)},
            )
            return None

        if question_id is not None and question_id in candidates:
            chosen_id = question_id
        else:
            chosen_id = self.rng.choice(candidates)

        record = fetched.get(chosen_id) or await self.provider.get_question(chosen_id)
        if record is None:
            logger.warning("Quiz %s lists question %s but it could not be loaded", quiz_id, chosen_id)
            return None

        answers = list(record.answers)
        if await self.provider.answers_randomized(quiz_id):
            self.rng.shuffle(answers)

        cached = CachedQuestionRecord(
            **record.model_dump(exclude={"answers", "quiz_id", "user_id"}),
            answers=answers,
            quiz_id=quiz_id,
            user_id=user_id,
        )
        self.cache.put(QuestionCacheKey(cached.id, user_id), cached)
        logger.debug("Question %s served to user %s", cached.id, user_id)

        return cached.to_public()
