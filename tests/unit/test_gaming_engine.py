"""Unit tests for GamingEngine wiring, the quiz bank and lesson activity."""

import json
import random
from datetime import datetime, timedelta, timezone

import pytest

from playgate.engines.gaming_engine import GamingEngine
from playgate.engines.gate.cache import InMemoryQuestionCache
from playgate.engines.gate.types import QuestionType, ValidationStatus
from playgate.engines.policy.context_builder import ContextBuilder
from playgate.engines.policy.store import DEFAULT_POLICIES
from playgate.providers.base import (
    AttemptSink,
    CourseProgressProvider,
    LessonActivityProvider,
    QuizQuestionProvider,
)
from playgate.providers.lessons import InMemoryLessonActivity
from playgate.providers.quiz_bank import QuizBank

NOW = datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def lessons():
    return InMemoryLessonActivity()


@pytest.fixture
def make_engine(quiz_bank, clock, attempt_sink, lessons, policy_store_factory):
    def _make(policies):
        builder = ContextBuilder(
            course_progress_provider=lessons,
            lesson_activity_provider=lessons,
            clock=lambda: NOW,
        )
        return GamingEngine(
            policy_store=policy_store_factory(policies),
            context_builder=builder,
            quiz_provider=quiz_bank,
            question_cache=InMemoryQuestionCache(clock=clock),
            attempt_sink=attempt_sink,
            rng=random.Random(0),
        )
    return _make


class TestGamingEngine:
    @pytest.mark.asyncio
    async def test_can_user_play_without_policies(self, make_engine):
        decision = await make_engine([]).can_user_play(42, 7)
        assert decision.can_play is True
        assert decision.reason is None

    @pytest.mark.asyncio
    async def test_study_first_uses_lesson_activity(self, make_engine, lessons, policy_factory):
        engine = make_engine([
            policy_factory(1, "study_first", {"require_lesson_view": True, "minimum_time": 600}),
        ])

        blocked = await engine.can_user_play(42, 7)
        assert blocked.can_play is False
        assert blocked.rule_type == "study_first"

        lessons.record_view(42, 7, viewed_at=NOW - timedelta(minutes=5))
        still_blocked = await engine.can_user_play(42, 7)
        assert still_blocked.reason == "Please study for 5 more minutes before playing games."

        lessons.record_view(42, 7, viewed_at=NOW - timedelta(minutes=20))
        # older view does not replace the newer one
        assert (await engine.can_user_play(42, 7)).can_play is False

    @pytest.mark.asyncio
    async def test_course_progress_from_lesson_activity(self, make_engine, lessons, policy_factory):
        engine = make_engine([policy_factory(1, "course_specific", {"minimum_progress": 80})])
        assert (await engine.can_user_play(42, 7)).can_play is True

        lessons.record_view(42, 7, progress_pct=79)
        decision = await engine.can_user_play(42, 7)
        assert decision.can_play is False
        assert "80%" in decision.reason

        lessons.record_view(42, 7, progress_pct=80)
        assert (await engine.can_user_play(42, 7)).can_play is True

    @pytest.mark.asyncio
    async def test_question_round_trip(self, make_engine, attempt_sink):
        engine = make_engine([])
        question = await engine.get_question(5, 42, question_id=502)
        assert question.type == QuestionType.MULTIPLE_CHOICE

        result = await engine.validate_answer(question.id, 42, [3, 1], session_id=8)
        assert result.correct is True
        assert result.points == 3
        assert attempt_sink.attempts[0].points_earned == 3

        again = await engine.validate_answer(question.id, 42, [3, 1], session_id=8)
        assert again.status == ValidationStatus.EXPIRED
        assert len(attempt_sink.attempts) == 1

    @pytest.mark.asyncio
    async def test_default_policies_shape(self, make_engine, policy_factory):
        policies = [
            policy_factory(i, p["rule_type"], p["conditions"], p["actions"], p["priority"], p["active"], p["name"])
            for i, p in enumerate(DEFAULT_POLICIES, start=1)
        ]
        decision = await make_engine(policies).can_user_play(42, 7)
        assert decision.can_play is False
        assert decision.policy == "Study First"
        assert decision.reason == "Please complete the lesson before playing games."


class TestQuizBank:
    @pytest.mark.asyncio
    async def test_answer_ids_and_correct_answers(self, quiz_bank):
        question = await quiz_bank.get_question(501)
        assert [a.id for a in question.answers] == [0, 1, 2]
        assert question.correct_answer == [1]
        assert question.difficulty == "easy"

    @pytest.mark.asyncio
    async def test_text_question_keeps_accepted_strings(self, quiz_bank):
        question = await quiz_bank.get_question(503)
        assert question.answers == []
        assert question.correct_answer == ["zero", "0"]

    @pytest.mark.asyncio
    async def test_quiz_lookup(self, quiz_bank):
        assert await quiz_bank.get_question_ids(5) == [501, 502, 503, 504]
        assert await quiz_bank.get_question_ids(404) == []
        assert await quiz_bank.answers_randomized(6) is True
        assert await quiz_bank.answers_randomized(5) is False

    @pytest.mark.asyncio
    async def test_invalid_questions_are_skipped(self):
        bank = QuizBank({"quizzes": [{"id": 1, "questions": [
            {"id": 1, "text": "ok", "type": "single_choice"},
            {"id": 2, "text": "bad type", "type": "crossword"},
            {"text": "no id"},
        ]}]})
        assert await bank.get_question_ids(1) == [1]

    @pytest.mark.asyncio
    async def test_from_file(self, tmp_path):
        path = tmp_path / "bank.json"
        path.write_text(json.dumps({"quizzes": [{"id": 3, "questions": [
            {"id": 31, "text": "2 + 2?", "type": "free_text", "accepted_answers": ["4", "four"]},
        ]}]}))
        bank = QuizBank.from_file(path)
        assert await bank.get_question_ids(3) == [31]

    @pytest.mark.asyncio
    async def test_missing_file_gives_empty_bank(self, tmp_path):
        bank = QuizBank.from_file(tmp_path / "missing.json")
        assert await bank.get_question_ids(1) == []

    @pytest.mark.asyncio
    async def test_sample_bank(self):
        bank = QuizBank.sample()
        assert await bank.get_question_ids(1) == [1, 2, 3]


class TestProviderContracts:
    def test_default_providers_satisfy_protocols(self, quiz_bank, lessons, attempt_sink):
        assert isinstance(quiz_bank, QuizQuestionProvider)
        assert isinstance(lessons, LessonActivityProvider)
        assert isinstance(lessons, CourseProgressProvider)
        assert isinstance(attempt_sink, AttemptSink)
