from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable

from standsched._exceptions import StaleWriteConflict
from standsched.conflicts import JobTable, Placement, Verdict, validate
from standsched.lanes import allocate_lane
from standsched.model import Job, Machine, TestType, default_duration
from standsched.projection import Projection, project
from standsched.settings import SchedulerSettings, get_settings
from standsched.window import TimeWindow, ViewMode, compute_window

logger = logging.getLogger(__name__)


class ScheduleSnapshot:
    """
    Immutable machine / test-type / job set as last loaded by the caller,
    tagged with the store version it was read at.

    The engine trusts whatever snapshot it is handed; freshness is checked
    only by :meth:`SchedulingEngine.ensure_fresh`.
    """

    def __init__(
        self,
        machines: Iterable[Machine],
        test_types: Iterable[TestType] = (),
        jobs: Iterable[Job] = (),
        version: int = 0,
    ) -> None:
        if version < 0:
            raise ValueError("Snapshot version must be non-negative.")
        self._machines: dict[str, Machine] = {
            m.id: m for m in sorted(machines, key=lambda m: (m.display_order, m.name))
        }
        self._test_types: dict[str, TestType] = {t.id: t for t in test_types}
        self._table = JobTable(jobs)
        self._version = version

    def refreshed(
        self,
        jobs: Iterable[Job],
        machines: Iterable[Machine] | None = None,
        version: int | None = None,
    ) -> ScheduleSnapshot:
        """New snapshot after a change notification; bumps the version."""
        return ScheduleSnapshot(
            machines=self._machines.values() if machines is None else machines,
            test_types=self._test_types.values(),
            jobs=jobs,
            version=self._version + 1 if version is None else version,
        )

    # ── lookups ──────────────────────────────────────────────────────────

    def machine(self, machine_id: str) -> Machine | None:
        return self._machines.get(machine_id)

    def test_type(self, test_type_id: str) -> TestType | None:
        return self._test_types.get(test_type_id)

    # ── properties / repr ────────────────────────────────────────────────

    @property
    def machines(self) -> dict[str, Machine]:
        return dict(self._machines)

    @property
    def jobs(self) -> tuple[Job, ...]:
        return self._table.jobs

    @property
    def table(self) -> JobTable:
        return self._table

    @property
    def version(self) -> int:
        return self._version

    def __repr__(self) -> str:
        return (
            f"ScheduleSnapshot(version={self._version}, "
            f"machines={len(self._machines)}, "
            f"test_types={len(self._test_types)}, "
            f"jobs={len(self._table)})"
        )


class SchedulingEngine:
    """Stateless facade over the window, projection, conflict and lane engines."""

    def __init__(self, settings: SchedulerSettings | None = None) -> None:
        self._settings = settings or get_settings()

    def compute_window(
        self, anchor: datetime | date, mode: ViewMode | str | None = None
    ) -> TimeWindow:
        return compute_window(
            anchor, mode or self._settings.default_view_mode, self._settings
        )

    def project_job(self, job: Job, window: TimeWindow) -> Projection:
        return project(job.start_datetime, job.duration_hours, window)

    def validate_placement(
        self, placement: Placement, snapshot: ScheduleSnapshot
    ) -> Verdict:
        machine = snapshot.machine(placement.machine_id)
        if machine is not None and machine.is_down:
            logger.warning(
                "Placing onto %s while it is down (%s)",
                machine.name,
                machine.down_note or "no note",
            )

        verdict = validate(placement, snapshot.table, snapshot.machines)
        if not verdict.ok:
            logger.info(
                "Rejected placement on %s lane %d: %s",
                placement.machine_id,
                placement.lane_index,
                verdict.reason.value,
            )
        return verdict

    def allocate_lane(
        self,
        machine_id: str,
        start: datetime,
        duration_hours: float,
        snapshot: ScheduleSnapshot,
        exclude_job_id: str | None = None,
    ) -> int | None:
        lane = allocate_lane(
            machine_id,
            start,
            duration_hours,
            snapshot.table,
            snapshot.machines,
            exclude_job_id,
        )
        if lane is None:
            logger.debug("No free lane on %s at %s", machine_id, start.isoformat())
        return lane

    def default_duration(
        self, test_type_id: str, machine_id: str, snapshot: ScheduleSnapshot
    ) -> float | None:
        test_type = snapshot.test_type(test_type_id)
        if test_type is None:
            return None
        machine = snapshot.machine(machine_id)
        return default_duration(test_type, machine is not None and machine.is_dual_capacity)

    # ── commit boundary ──────────────────────────────────────────────────

    def ensure_fresh(self, snapshot: ScheduleSnapshot, current_version: int) -> None:
        if snapshot.version != current_version:
            logger.warning(
                "Stale snapshot v%d against store v%d", snapshot.version, current_version
            )
            raise StaleWriteConflict(snapshot.version, current_version)

    def revalidate_for_commit(
        self,
        placement: Placement,
        snapshot: ScheduleSnapshot,
        current_version: int,
    ) -> Verdict:
        self.ensure_fresh(snapshot, current_version)
        return self.validate_placement(placement, snapshot)

    @property
    def settings(self) -> SchedulerSettings:
        return self._settings

    def __repr__(self) -> str:
        return (
            f"SchedulingEngine(default_view_mode={self._settings.default_view_mode!r}, "
            f"shift_start_hour={self._settings.shift_start_hour})"
        )
