"""
Question Cache - TTL store linking a served question to its correct answer.

Entries are keyed by (question_id, user_id) so different learners and
different questions never share an entry.
"""

import time
from typing import Callable, Dict, NamedTuple, Optional, Protocol, Tuple

from playgate.engines.gate.types import CachedQuestionRecord

DEFAULT_TTL_SECONDS = 300


class QuestionCacheKey(NamedTuple):
    question_id: int
    user_id: int


class QuestionCache(Protocol):
    def put(self, key: QuestionCacheKey, record: CachedQuestionRecord) -> None:
        ...

    def get(self, key: QuestionCacheKey) -> Optional[CachedQuestionRecord]:
        ...

    def delete(self, key: QuestionCacheKey) -> bool:
        ...


class InMemoryQuestionCache:
    """
    Process-local TTL map. Key -> (record, expires_at).

    Single instance only. Replicated deployments need a shared TTL store
    behind the same interface or validation stops being at-most-once.
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._data: Dict[QuestionCacheKey, Tuple[CachedQuestionRecord, float]] = {}

    def put(self, key: QuestionCacheKey, record: CachedQuestionRecord) -> None:
        """Write (or overwrite) an entry with a fresh TTL."""
        self._data[key] = (record, self._clock() + self.ttl_seconds)

    def get(self, key: QuestionCacheKey) -> Optional[CachedQuestionRecord]:
        """Live entry or None. Expired entries are dropped on read."""
        entry = self._data.get(key)
        if entry is None:
            return None
        record, expires_at = entry
        if self._clock() >= expires_at:
            self._data.pop(key, None)
            return None
        return record

    def delete(self, key: QuestionCacheKey) -> bool:
        return self._data.pop(key, None) is not None

    def cleanup_expired(self) -> int:
        """Remove expired entries to avoid unbounded growth. Returns count removed."""
        now = self._clock()
        expired = [k for k, (_, expires_at) in self._data.items() if now >= expires_at]
        for k in expired:
            self._data.pop(k, None)
        return len(expired)

    def __len__(self) -> int:
        return len(self._data)
