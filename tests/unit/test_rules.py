"""Unit tests for rule-type handlers and clock windows."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from playgate.engines.policy.rules import (
    CourseSpecificRule,
    DailyLimitRule,
    FreePlayRule,
    ParentControlRule,
    QuietHoursRule,
    StudyFirstRule,
)
from playgate.engines.policy.time_windows import is_in_window, is_time_between, parse_clock
from playgate.engines.policy.types import ParentControls, TimeWindow


class TestTimeWindows:
    def test_parse_clock_variants(self):
        assert parse_clock("7:05").hour == 7
        assert parse_clock("22:00:30").second == 30

    @pytest.mark.parametrize("value", ["", "noon", "25", "12-00", "ab:cd"])
    def test_parse_clock_rejects_garbage(self, value):
        with pytest.raises(ValueError):
            parse_clock(value)

    def test_is_time_between_is_inclusive_without_wrap(self):
        assert is_time_between("08:00", "08:00", "18:00")
        assert is_time_between("18:00", "08:00", "18:00")
        assert not is_time_between("23:00", "22:00", "07:00")

    def test_is_in_window_wraps_midnight(self):
        assert is_in_window("23:30", "22:00", "07:00")
        assert is_in_window("00:00", "22:00", "07:00")
        assert not is_in_window("07:01", "22:00", "07:00")


class TestQuietHours:
    conditions = {"start_time": "22:00", "end_time": "07:00"}

    @pytest.mark.parametrize("current,blocked", [
        ("23:30", True),
        ("06:00", True),
        ("22:00", True),
        ("07:00", True),
        ("12:00", False),
    ])
    def test_overnight_window(self, context_factory, current, blocked):
        result = QuietHoursRule().evaluate(self.conditions, {}, context_factory(current))
        assert result.block is blocked

    def test_daytime_window(self, context_factory):
        rule = QuietHoursRule()
        conditions = {"start_time": "13:00", "end_time": "14:00"}
        assert rule.evaluate(conditions, {}, context_factory("13:30")).block
        assert not rule.evaluate(conditions, {}, context_factory("14:30")).block

    def test_message_from_actions(self, context_factory):
        result = QuietHoursRule().evaluate(
            self.conditions, {"message": "Bed time!"}, context_factory("23:00")
        )
        assert result.message == "Bed time!"

    def test_default_message(self, context_factory):
        result = QuietHoursRule().evaluate(self.conditions, {}, context_factory("23:00"))
        assert "quiet hours" in result.message

    def test_missing_conditions_raise_validation_error(self, context_factory):
        with pytest.raises(ValidationError):
            QuietHoursRule().evaluate({"start_time": "22:00"}, {}, context_factory())


class TestFreePlay:
    conditions = {"start_time": "15:00", "end_time": "17:00", "days": ["mon", "wed", "fri"]}
    actions = {"allow_free_play": True, "no_tickets_required": True}

    def test_never_blocks_and_annotates_inside_window(self, context_factory):
        result = FreePlayRule().evaluate(self.conditions, self.actions, context_factory("16:00"))
        assert result.block is False
        assert result.actions == self.actions

    def test_outside_window_has_no_actions(self, context_factory):
        result = FreePlayRule().evaluate(self.conditions, self.actions, context_factory("18:00"))
        assert result.block is False
        assert result.actions == {}

    def test_wrong_day_has_no_actions(self, context_factory):
        ctx = context_factory("16:00", current_day="tue")
        result = FreePlayRule().evaluate(self.conditions, self.actions, ctx)
        assert result.actions == {}

    def test_day_names_are_normalized(self, context_factory):
        conditions = dict(self.conditions, days=["Wednesday"])
        result = FreePlayRule().evaluate(conditions, self.actions, context_factory("16:00"))
        assert result.actions == self.actions


class TestStudyFirst:
    def test_blocks_without_lesson_view(self, context_factory):
        result = StudyFirstRule().evaluate({"require_lesson_view": True}, {}, context_factory())
        assert result.block
        assert "lesson" in result.message

    def test_allows_without_course(self, context_factory):
        result = StudyFirstRule().evaluate({}, {}, context_factory(course_id=None))
        assert not result.block

    def test_remaining_minutes_rounded_up(self, context_factory):
        ctx = context_factory("12:00")
        ctx = context_factory("12:00", last_lesson_viewed_at=ctx.now - timedelta(seconds=61))
        result = StudyFirstRule().evaluate({"minimum_time": 600}, {}, ctx)
        # 539 seconds left
        assert result.block
        assert result.message == "Please study for 9 more minutes before playing games."

    def test_allows_after_minimum_time(self, context_factory):
        base = context_factory("12:00").now
        ctx = context_factory("12:00", last_lesson_viewed_at=base - timedelta(minutes=11))
        assert not StudyFirstRule().evaluate({"minimum_time_seconds": 600}, {}, ctx).block

    def test_view_in_the_future_asks_for_full_minimum(self, context_factory):
        base = context_factory("12:00").now
        ctx = context_factory("12:00", last_lesson_viewed_at=base + timedelta(minutes=30))
        result = StudyFirstRule().evaluate({"minimum_time": 600}, {}, ctx)
        assert result.block
        assert result.message == "Please study for 10 more minutes before playing games."

    def test_recent_view_without_minimum_allows(self, context_factory):
        base = context_factory("12:00").now
        ctx = context_factory("12:00", last_lesson_viewed_at=base)
        assert not StudyFirstRule().evaluate({}, {}, ctx).block


class TestParentControl:
    def test_games_blocked(self, context_factory):
        ctx = context_factory(parent_controls=ParentControls(games_blocked=True))
        result = ParentControlRule().evaluate({}, {}, ctx)
        assert result.block
        assert "parent/guardian" in result.message

    def test_outside_allow_window_blocks(self, context_factory):
        controls = ParentControls(time_restrictions=TimeWindow(start="15:00", end="19:00"))
        result = ParentControlRule().evaluate({}, {}, context_factory("12:00", parent_controls=controls))
        assert result.block
        assert result.message == "Games are only available between 15:00 and 19:00."

    def test_inside_allow_window_allows(self, context_factory):
        controls = ParentControls(time_restrictions=TimeWindow(start="15:00", end="19:00"))
        assert not ParentControlRule().evaluate({}, {}, context_factory("19:00", parent_controls=controls)).block

    def test_allow_window_does_not_wrap(self, context_factory):
        controls = ParentControls(time_restrictions=TimeWindow(start="20:00", end="06:00"))
        assert ParentControlRule().evaluate({}, {}, context_factory("23:00", parent_controls=controls)).block

    @pytest.mark.parametrize("balance,blocked", [(None, True), (0, True), (-1, True), (1, False)])
    def test_tickets(self, context_factory, balance, blocked):
        ctx = context_factory(
            parent_controls=ParentControls(require_tickets=True),
            ticket_balance=balance,
        )
        assert ParentControlRule().evaluate({}, {}, ctx).block is blocked

    def test_neutral_defaults_allow(self, context_factory):
        assert not ParentControlRule().evaluate({}, {}, context_factory()).block


class TestDailyLimit:
    def test_games_limit(self, context_factory):
        rule = DailyLimitRule()
        conditions = {"max_games_per_day": 10}
        assert rule.evaluate(conditions, {}, context_factory(games_played=10)).block
        assert not rule.evaluate(conditions, {}, context_factory(games_played=9)).block

    def test_time_limit(self, context_factory):
        rule = DailyLimitRule()
        conditions = {"max_time_per_day": 3600}
        result = rule.evaluate(conditions, {}, context_factory(time_played_seconds=3600))
        assert result.block
        assert "play time" in result.message

    def test_zero_limit_is_not_configured(self, context_factory):
        result = DailyLimitRule().evaluate({"max_games_per_day": 0}, {}, context_factory(games_played=50))
        assert not result.block


class TestCourseSpecific:
    def test_minimum_progress(self, context_factory):
        rule = CourseSpecificRule()
        conditions = {"minimum_progress": 80}
        result = rule.evaluate(conditions, {}, context_factory(course_progress_pct=79))
        assert result.block
        assert "80%" in result.message
        assert not rule.evaluate(conditions, {}, context_factory(course_progress_pct=80)).block

    def test_unknown_progress_skips_check(self, context_factory):
        result = CourseSpecificRule().evaluate({"minimum_progress": 80}, {}, context_factory())
        assert not result.block

    def test_blocked_course(self, context_factory):
        result = CourseSpecificRule().evaluate({"blocked_courses": [3, 7]}, {}, context_factory(course_id=7))
        assert result.block
        assert result.message == "Games are not available for this course."

    def test_no_course_allows(self, context_factory):
        result = CourseSpecificRule().evaluate(
            {"blocked_courses": [7], "minimum_progress": 50}, {}, context_factory(course_id=None)
        )
        assert not result.block
