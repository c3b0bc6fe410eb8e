"""Unit tests for the tracker service used by the presentation layer."""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch
from uuid import uuid4

from pydantic import ValidationError

from forge_tracker.core.enums import SessionStatus
from forge_tracker.services.schemas import OverviewView
from forge_tracker.services.tracker import TickClock

from tests.helpers.clock import START


def _at(seconds: int) -> datetime:
    return START + timedelta(seconds=seconds)


@pytest.mark.unit
class TestTickClock:
    """Test the tick-driven clock."""

    def test_samples_source_once_and_holds_it_until_a_tick(self):
        readings = iter([START, _at(60), _at(120)])
        clock = TickClock(lambda: next(readings))

        assert clock() == START
        assert clock() == START

        clock.tick(_at(5))
        assert clock() == _at(5)

    def test_reports_latest_tick(self):
        clock = TickClock(lambda: START)
        clock.tick(_at(10))

        assert clock() == _at(10)

    def test_never_moves_backwards(self):
        clock = TickClock(lambda: START)
        clock.tick(_at(100))
        clock.tick(_at(50))

        assert clock() == _at(100)

    def test_naive_ticks_treated_as_utc(self):
        clock = TickClock(lambda: START)
        clock.tick(datetime(2024, 1, 1, 9, 0, 30))

        assert clock() == _at(30)


@pytest.mark.unit
class TestIntents:
    """Test user intents forwarded by the presentation layer."""

    def test_start_stop_cycle(self, tracker):
        selected = tracker.store.selected_domain_id

        tracker.on_tick(_at(0))
        assert tracker.on_start_stop() == SessionStatus.RUNNING
        tracker.on_tick(_at(90))
        assert tracker.on_start_stop() == SessionStatus.IDLE

        assert tracker.store.get_domain(selected).total_seconds == 90

    def test_select_accepts_string_ids(self, tracker):
        target = tracker.store.domains[2].id

        assert tracker.on_select_domain(str(target)) is True
        assert tracker.store.selected_domain_id == target

    def test_select_rejects_garbage_ids(self, tracker):
        previous = tracker.store.selected_domain_id

        assert tracker.on_select_domain("not-a-uuid") is False
        assert tracker.on_select_domain(uuid4()) is False
        assert tracker.store.selected_domain_id == previous

    def test_select_while_running_commits(self, tracker):
        previous = tracker.store.selected_domain_id
        target = tracker.store.domains[1].id

        tracker.on_tick(_at(0))
        tracker.on_start_stop()
        tracker.on_tick(_at(200))
        tracker.on_select_domain(target)

        assert tracker.store.get_domain(previous).total_seconds == 200
        assert tracker.session_view().status == SessionStatus.IDLE

    def test_add_domain(self, tracker):
        assert tracker.on_add_domain("   ") is None

        domain = tracker.on_add_domain("Piano")

        assert [v.name for v in tracker.domain_views()][-1] == "Piano"
        assert domain.total_seconds == 0

    def test_rename_and_remove(self, tracker):
        target = tracker.store.domains[0].id

        assert tracker.on_rename_domain(str(target), "Algorithms") is True
        assert tracker.on_rename_domain("bad", "Algorithms") is False
        assert tracker.domain_views()[0].name == "Algorithms"

        assert tracker.on_remove_domain(target) is True
        assert tracker.on_remove_domain("bad") is False
        assert len(tracker.domain_views()) == 5


@pytest.mark.unit
class TestViews:
    """Test the read side recomputed on every call."""

    def test_initial_views(self, tracker):
        views = tracker.domain_views()
        overview = tracker.overview()
        session = tracker.session_view()

        assert len(views) == 6
        assert all(v.level == 1 and v.xp == 0 for v in views)
        assert sum(v.is_selected for v in views) == 1
        assert overview == OverviewView(total_xp=0, level=1, progress=0.0)
        assert session.status == SessionStatus.IDLE
        assert session.domain_name == "LeetCode"
        assert session.elapsed_display == "00:00:00"

    def test_live_session_reflected_in_views(self, tracker):
        selected = tracker.store.selected_domain_id

        tracker.on_tick(_at(0))
        tracker.on_start_stop()
        tracker.on_tick(_at(15 * 60))

        views = {v.id: v for v in tracker.domain_views()}
        assert views[selected].total_seconds == 900
        assert views[selected].xp == 15
        assert views[selected].progress == 0.5

        overview = tracker.overview()
        assert overview.total_xp == 15
        assert overview.progress == 0.5

        session = tracker.session_view()
        assert session.status == SessionStatus.RUNNING
        assert session.elapsed_seconds == 900
        assert session.elapsed_display == "00:15:00"
        assert session.session_xp == 15

        # Nothing persisted yet
        assert tracker.store.get_domain(selected).total_seconds == 0

    def test_overall_level_sums_seconds_across_domains(self, tracker):
        first, second = tracker.store.domains[:2]
        tracker.store.commit_seconds(first.id, 40)
        tracker.store.commit_seconds(second.id, 40)

        assert tracker.overview().total_xp == 1
        assert [v.xp for v in tracker.domain_views()[:2]] == [0, 0]

    def test_level_up_after_session(self, tracker):
        tracker.on_tick(_at(0))
        tracker.on_start_stop()
        tracker.on_tick(_at(30 * 60))
        tracker.on_start_stop()

        overview = tracker.overview()
        assert overview.level == 2
        assert overview.progress == 0.0

    def test_session_view_without_selection(self, tracker):
        tracker.store.clear_selection()

        session = tracker.session_view()

        assert session.domain_id is None
        assert session.domain_name is None
        assert tracker.on_start_stop() == SessionStatus.IDLE

    def test_views_are_immutable(self, tracker):
        view = tracker.domain_views()[0]

        with pytest.raises(ValidationError):
            view.name = "Changed"

    def test_tick_without_clock_is_ignored(self, domain_store):
        from forge_tracker.services.tracker import TrackerService
        from forge_tracker.session.controller import SessionController

        service = TrackerService(domain_store, SessionController(domain_store))
        service.on_tick(datetime.now(timezone.utc))

        assert service.session_view().status == SessionStatus.IDLE

    def test_close_releases_storage(self, tracker, memory_storage):
        with patch.object(memory_storage, "close") as close:
            tracker.close()

        close.assert_called_once_with()

    def test_close_leaves_running_session_uncommitted(self, tracker):
        tracker.on_start_stop()
        tracker.on_tick(_at(600))

        tracker.close()

        assert all(d.total_seconds == 0 for d in tracker.store.domains)
