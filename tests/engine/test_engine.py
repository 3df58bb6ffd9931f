"""
tests/engine/test_engine.py

Covers:
  - ScheduleSnapshot construction, ordering, lookups, refresh
  - Facade delegation (window, projection, validation, lanes)
  - Default durations from the snapshot
  - Down-machine warnings and rejection logging
  - Stale snapshot detection at the commit boundary
"""

import logging
from datetime import date, datetime, timedelta, timezone

import pytest

from standsched import StaleWriteConflict
from standsched.conflicts import Placement, RejectionReason
from standsched.engine import ScheduleSnapshot, SchedulingEngine
from standsched.model import Job, Machine, TestType
from standsched.settings import SchedulerSettings
from standsched.window import ViewMode

UTC = timezone.utc


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def machines():
    return [
        Machine(id="ett2", name="ETT2", machine_group="ETT", capacity=2, display_order=2),
        Machine(id="fct1", name="FCT1", machine_group="FCT", capacity=1, display_order=1),
        Machine(
            id="fct2", name="FCT2", machine_group="FCT", capacity=1, display_order=3,
            is_down=True, down_note="fixture broken",
        ),
    ]


@pytest.fixture
def test_types():
    return [
        TestType(id="burn", name="Burn-in", default_duration_hours=8.0,
                 concurrent_duration_hours=6.0),
        TestType(id="func", name="Functional", default_duration_hours=1.5),
    ]


@pytest.fixture
def jobs():
    return [
        Job(id="a", serial_number="SN-A", test_type_id="burn", machine_id="ett2",
            lane_index=0, start_datetime=at(8), duration_hours=4.0),
        Job(id="b", serial_number="SN-B", test_type_id="func", machine_id="fct1",
            start_datetime=at(8), duration_hours=2.0),
    ]


@pytest.fixture
def snapshot(machines, test_types, jobs):
    return ScheduleSnapshot(machines, test_types, jobs, version=7)


@pytest.fixture
def engine():
    return SchedulingEngine(SchedulerSettings())


# ── Helpers ───────────────────────────────────────────────────────────────────

def at(h, m=0, d=10):
    return datetime(2024, 1, d, h, m, tzinfo=UTC)


# ── Snapshot ──────────────────────────────────────────────────────────────────

class TestSnapshot:

    def test_machines_in_display_order(self, snapshot):
        assert list(snapshot.machines) == ["fct1", "ett2", "fct2"]

    def test_lookups(self, snapshot):
        assert snapshot.machine("ett2").capacity == 2
        assert snapshot.machine("nope") is None
        assert snapshot.test_type("burn").name == "Burn-in"
        assert snapshot.test_type("nope") is None

    def test_jobs_and_table(self, snapshot, jobs):
        assert snapshot.jobs == tuple(jobs)
        assert len(snapshot.table) == 2

    def test_refreshed_bumps_version(self, snapshot):
        newer = snapshot.refreshed([])
        assert newer.version == 8
        assert newer.jobs == ()
        assert list(newer.machines) == list(snapshot.machines)
        assert snapshot.version == 7

    def test_refreshed_with_explicit_version(self, snapshot):
        assert snapshot.refreshed(snapshot.jobs, version=42).version == 42

    def test_negative_version(self, machines):
        with pytest.raises(ValueError):
            ScheduleSnapshot(machines, version=-1)

    def test_machines_copy_is_detached(self, snapshot):
        snapshot.machines.clear()
        assert snapshot.machine("fct1") is not None

    def test_repr(self, snapshot):
        assert repr(snapshot) == (
            "ScheduleSnapshot(version=7, machines=3, test_types=2, jobs=2)"
        )


# ── Facade ────────────────────────────────────────────────────────────────────

class TestWindowAndProjection:

    def test_default_mode_is_shift(self, engine):
        w = engine.compute_window(date(2024, 1, 10))
        assert w.mode is ViewMode.SHIFT
        assert w.start == at(6)
        assert w.end == at(6, d=11)

    def test_configured_default_mode(self):
        engine = SchedulingEngine(SchedulerSettings(default_view_mode="calendar"))
        assert engine.compute_window(date(2024, 1, 10)).start == at(0)

    def test_explicit_mode_wins(self, engine):
        assert engine.compute_window(date(2024, 1, 10), "calendar").mode is ViewMode.CALENDAR

    def test_project_job(self, engine, jobs):
        w = engine.compute_window(date(2024, 1, 10), "calendar")
        p = engine.project_job(jobs[0], w)
        assert p.segments[0].left_percent == pytest.approx(100 / 3)
        assert p.segments[0].width_percent == pytest.approx(100 / 6)

    def test_project_job_on_naive_anchor_window(self, engine, jobs):
        w = engine.compute_window(datetime(2024, 1, 10, 12), "shift")
        assert w.start == at(6)
        p = engine.project_job(jobs[0], w)
        assert p.segments[0].left_percent == pytest.approx(100 / 12)


class TestValidatePlacement:

    def test_accepts_free_lane(self, engine, snapshot):
        p = Placement(machine_id="ett2", lane_index=1, start=at(8), duration_hours=4.0)
        assert engine.validate_placement(p, snapshot).ok

    def test_rejects_and_logs(self, engine, snapshot, caplog):
        p = Placement(machine_id="fct1", start=at(9), duration_hours=1.0)
        with caplog.at_level(logging.INFO, logger="standsched"):
            v = engine.validate_placement(p, snapshot)
        assert v.reason is RejectionReason.SINGLE_CAPACITY_OVERLAP
        assert "SingleCapacityOverlap" in caplog.text

    def test_down_machine_accepted_with_warning(self, engine, snapshot, caplog):
        p = Placement(machine_id="fct2", start=at(9), duration_hours=1.0)
        with caplog.at_level(logging.WARNING, logger="standsched"):
            v = engine.validate_placement(p, snapshot)
        assert v.ok
        assert "fixture broken" in caplog.text

    def test_unknown_machine(self, engine, snapshot):
        p = Placement(machine_id="nope", start=at(9), duration_hours=1.0)
        assert engine.validate_placement(p, snapshot).reason is RejectionReason.MACHINE_NOT_FOUND


class TestAllocateLane:

    def test_second_lane(self, engine, snapshot):
        assert engine.allocate_lane("ett2", at(8), 4.0, snapshot) == 1

    def test_none_when_busy(self, engine, snapshot):
        assert engine.allocate_lane("fct1", at(9), 1.0, snapshot) is None

    def test_move_within_own_slot(self, engine, snapshot):
        assert engine.allocate_lane("fct1", at(9), 1.0, snapshot, exclude_job_id="b") == 0


class TestDefaultDuration:

    def test_concurrent_on_dual(self, engine, snapshot):
        assert engine.default_duration("burn", "ett2", snapshot) == 6.0

    def test_default_on_single(self, engine, snapshot):
        assert engine.default_duration("burn", "fct1", snapshot) == 8.0

    def test_unknown_machine_treated_as_single(self, engine, snapshot):
        assert engine.default_duration("burn", "nope", snapshot) == 8.0

    def test_unknown_test_type(self, engine, snapshot):
        assert engine.default_duration("nope", "ett2", snapshot) is None


# ── Commit boundary ───────────────────────────────────────────────────────────

class TestCommitBoundary:

    def test_fresh_snapshot_passes(self, engine, snapshot):
        engine.ensure_fresh(snapshot, 7)

    def test_stale_snapshot_raises(self, engine, snapshot, caplog):
        with caplog.at_level(logging.WARNING, logger="standsched"):
            with pytest.raises(StaleWriteConflict) as exc_info:
                engine.ensure_fresh(snapshot, 9)
        assert exc_info.value.snapshot_version == 7
        assert exc_info.value.current_version == 9
        assert "Stale snapshot" in caplog.text

    def test_revalidate_stale(self, engine, snapshot):
        p = Placement(machine_id="fct1", start=at(12), duration_hours=1.0)
        with pytest.raises(StaleWriteConflict):
            engine.revalidate_for_commit(p, snapshot, 8)

    def test_revalidate_after_refresh_sees_new_job(self, engine, snapshot):
        p = Placement(machine_id="fct1", start=at(12), duration_hours=1.0)
        assert engine.revalidate_for_commit(p, snapshot, 7).ok

        intruder = Job(id="c", serial_number="SN-C", test_type_id="func", machine_id="fct1",
                       start_datetime=at(11, 30), duration_hours=1.0)
        newer = snapshot.refreshed([*snapshot.jobs, intruder])
        v = engine.revalidate_for_commit(p, newer, 8)
        assert not v.ok
        assert [j.id for j in v.blocking_jobs] == ["c"]


class TestEngine:

    def test_repr(self, engine):
        assert repr(engine) == "SchedulingEngine(default_view_mode='shift', shift_start_hour=6)"

    def test_settings_default(self):
        assert SchedulingEngine().settings.shift_start_hour == 6

    def test_window_length(self, engine):
        w = engine.compute_window(datetime(2024, 3, 31, 12, tzinfo=UTC))
        assert w.end - w.start == timedelta(hours=24)
