"""Tests for tracker state transitions and the HabitTracker service."""

from __future__ import annotations

import logging
from datetime import date

import pytest

from habitlens.domain.habits import InvalidHabitName
from habitlens.domain.periods import TimePeriod
from habitlens.domain.repositories.habit import HabitStoreError
from habitlens.domain.selection import ALL, SpecificHabits, select_only
from habitlens.services import tracker as tracker_module
from habitlens.services.tracker import HabitTracker, TrackerState


class FlakyRepository:
    """Wraps a real repository and fails completion writes on demand."""

    def __init__(self, inner):
        self.inner = inner
        self.fail_writes = False
        self.writes: list[tuple[str, str, bool]] = []

    def list_habits(self):
        return self.inner.list_habits()

    def get(self, habit_id):
        return self.inner.get(habit_id)

    def create(self, habit):
        return self.inner.create(habit)

    def update(self, habit):
        if self.fail_writes:
            raise HabitStoreError("disk full")
        return self.inner.update(habit)

    def delete(self, habit_id):
        return self.inner.delete(habit_id)

    def set_completion(self, habit_id, day_key, completed):
        self.writes.append((habit_id, day_key, completed))
        if self.fail_writes:
            raise HabitStoreError("disk full")
        return self.inner.set_completion(habit_id, day_key, completed)


class TestPureTransitions:
    def test_toggle_unknown_habit_returns_same_state(self, empty_state, utc_settings):
        assert tracker_module.toggle_completion(empty_state, "ghost", date(2024, 1, 1), utc_settings) is empty_state

    def test_remove_drops_habit_from_selection(self, empty_state, habit_factory):
        a, b = habit_factory("A", habit_id="a"), habit_factory("B", habit_id="b")
        state = tracker_module.add_habit(tracker_module.add_habit(empty_state, a), b)
        state = tracker_module.select_only_habit(state, "a")

        state = tracker_module.remove_habit(state, "a")
        assert [h.id for h in state.habits] == ["b"]
        assert state.selection == ALL

    def test_remove_unknown_is_noop(self, empty_state):
        assert tracker_module.remove_habit(empty_state, "ghost") is empty_state

    def test_add_keeps_oldest_first(self, empty_state, habit_factory):
        older, newer = habit_factory("Old"), habit_factory("New")
        state = tracker_module.add_habit(tracker_module.add_habit(empty_state, newer), older)
        assert [h.name for h in state.habits] == ["Old", "New"]

    def test_toggling_each_habit_on_converges_to_all(self, empty_state, habit_factory):
        state = empty_state
        for name in ("a", "b", "c"):
            state = tracker_module.add_habit(state, habit_factory(name, habit_id=name))

        state = tracker_module.toggle_selected(state, "a")
        assert state.selection == SpecificHabits(frozenset({"b", "c"}))
        state = tracker_module.toggle_selected(state, "a")
        assert state.selection == ALL

    def test_navigate_and_reset(self, empty_state):
        state = tracker_module.set_period(empty_state, TimePeriod.MONTH)
        state = tracker_module.navigate(state, -1)
        assert state.reference == date(2023, 12, 3)
        state = tracker_module.reset_reference(state, date(2024, 6, 1))
        assert state.reference == date(2024, 6, 1)

    def test_select_only_unknown_is_noop(self, empty_state):
        assert tracker_module.select_only_habit(empty_state, "ghost") is empty_state

    def test_toggle_selected_unknown_is_noop(self, empty_state, habit_factory):
        state = empty_state
        for name in ("a", "b"):
            state = tracker_module.add_habit(state, habit_factory(name, habit_id=name))
        state = tracker_module.select_only_habit(state, "a")

        assert tracker_module.toggle_selected(state, "ghost") is state
        state = tracker_module.toggle_selected(state, "b")
        assert state.selection == ALL


class TestHabitTracker:
    def test_add_persists_and_tracks(self, tracker, habit_repo):
        habit = tracker.add_habit("  Meditate ", "#34c759")
        assert habit.name == "Meditate"
        assert tracker.habits == (habit,)
        assert habit_repo.get(habit.id) == habit

    def test_add_blank_name_stores_nothing(self, tracker, habit_repo):
        with pytest.raises(InvalidHabitName):
            tracker.add_habit("   ")
        assert tracker.habits == ()
        assert habit_repo.list_habits() == []

    def test_toggle_round_trips_through_store(self, tracker, habit_repo):
        habit = tracker.add_habit("Run")
        assert tracker.toggle_completion(habit.id, date(2024, 1, 3))
        assert habit_repo.get(habit.id).completions == frozenset({"2024-01-03"})

        assert tracker.toggle_completion(habit.id, date(2024, 1, 3))
        assert habit_repo.get(habit.id).completions == frozenset()

    def test_toggle_unknown_id_is_noop(self, tracker):
        before = tracker.state
        assert tracker.toggle_completion("ghost", date(2024, 1, 3)) is False
        assert tracker.state is before
        assert tracker.last_error is None

    def test_failed_write_rolls_back(self, habit_repo, utc_settings, caplog):
        flaky = FlakyRepository(habit_repo)
        tracker = HabitTracker(flaky, utc_settings)
        habit = tracker.add_habit("Read")
        tracker.toggle_completion(habit.id, date(2024, 1, 1))
        before = tracker.state.find(habit.id)

        flaky.fail_writes = True
        with caplog.at_level(logging.WARNING, logger="habitlens"):
            assert tracker.toggle_completion(habit.id, date(2024, 1, 2)) is False

        assert tracker.state.find(habit.id) == before
        assert tracker.last_error == "disk full"
        assert flaky.writes[-1] == (habit.id, "2024-01-02", True)
        assert "rolled back" in caplog.text

        flaky.fail_writes = False
        assert tracker.toggle_completion(habit.id, date(2024, 1, 2))
        assert tracker.last_error is None

    def test_remove_clears_selection_and_store(self, tracker, habit_repo):
        keep = tracker.add_habit("Keep")
        gone = tracker.add_habit("Gone")
        tracker.select_only(gone.id)

        assert tracker.remove_habit(gone.id)
        assert tracker.state.selection == ALL
        assert [h.id for h in habit_repo.list_habits()] == [keep.id]
        assert tracker.remove_habit(gone.id) is False

    def test_load_prunes_selection_of_missing_habits(self, tracker, habit_repo):
        a = tracker.add_habit("A")
        b = tracker.add_habit("B")
        tracker.select_only(a.id)
        habit_repo.delete(a.id)

        tracker.load()
        assert [h.id for h in tracker.habits] == [b.id]
        assert tracker.state.selection == ALL

    def test_derived_views_follow_state(self, tracker):
        run = tracker.add_habit("Run")
        read = tracker.add_habit("Read")
        tracker.toggle_completion(run.id, date(2024, 1, 1))
        tracker.toggle_completion(run.id, date(2024, 1, 3))

        records = {r.habit.name: r for r in tracker.chart_records()}
        assert (records["Run"].completed_days, records["Run"].total_days) == (2, 7)
        assert records["Read"].completed_days == 0

        tracker.select_only(run.id)
        summary = tracker.pie_summary()
        assert summary.selected_habits == ["Run"]
        assert (summary.completed_days, summary.total_days) == (2, 7)

        tracker.toggle_selection(read.id)
        assert tracker.state.selection == ALL
        assert tracker.pie_summary().total_days == 14

    def test_period_navigation(self, tracker):
        assert tracker.period_label() == "Jan 1 - Jan 7"
        tracker.set_period(TimePeriod.MONTH)
        assert tracker.next_period() == date(2024, 2, 3)
        assert tracker.period_label() == "February 2024"
        assert tracker.previous_period() == date(2024, 1, 3)

    def test_select_all_and_only(self, tracker):
        a = tracker.add_habit("A")
        tracker.add_habit("B")
        assert tracker.select_only(a.id) == select_only(a.id)
        assert tracker.select_all() == ALL

    def test_initial_state(self, habit_repo, utc_settings):
        tracker = HabitTracker(habit_repo, utc_settings, period=TimePeriod.DAY)
        assert isinstance(tracker.state, TrackerState)
        assert tracker.state.period is TimePeriod.DAY
        assert tracker.today_completion_rate() == 0.0

    def test_toggle_selection_unknown_id_keeps_selection(self, tracker):
        a = tracker.add_habit("A")
        b = tracker.add_habit("B")
        tracker.select_only(a.id)

        assert tracker.toggle_selection("ghost") == select_only(a.id)
        assert tracker.toggle_selection(b.id) == ALL

    def test_update_habit_persists_name_and_color(self, tracker, habit_repo):
        habit = tracker.add_habit("Run", "#007AFF")
        tracker.toggle_completion(habit.id, date(2024, 1, 3))

        updated = tracker.update_habit(habit.id, "  Jog  ", "#34c759")
        assert (updated.name, updated.color) == ("Jog", "#34C759")
        assert tracker.state.find(habit.id) == updated
        assert updated.completions == frozenset({"2024-01-03"})
        stored = habit_repo.get(habit.id)
        assert (stored.name, stored.color) == ("Jog", "#34C759")
        assert stored.completions == frozenset({"2024-01-03"})

    def test_update_habit_blank_name_changes_nothing(self, tracker, habit_repo):
        habit = tracker.add_habit("Run")
        with pytest.raises(InvalidHabitName):
            tracker.update_habit(habit.id, "   ")
        assert tracker.state.find(habit.id).name == "Run"
        assert habit_repo.get(habit.id).name == "Run"

    def test_update_habit_unknown_id_is_noop(self, tracker):
        before = tracker.state
        assert tracker.update_habit("ghost", "Anything") is None
        assert tracker.state is before

    def test_update_habit_store_failure_keeps_state(self, habit_repo, utc_settings):
        flaky = FlakyRepository(habit_repo)
        tracker = HabitTracker(flaky, utc_settings)
        habit = tracker.add_habit("Read")

        flaky.fail_writes = True
        with pytest.raises(HabitStoreError):
            tracker.update_habit(habit.id, "Study")
        assert tracker.state.find(habit.id).name == "Read"
