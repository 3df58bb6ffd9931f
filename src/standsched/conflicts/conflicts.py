from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, Mapping, Sequence, Union

import numpy as np
from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from standsched.model import Job, Machine, add_elapsed

logger = logging.getLogger(__name__)


class RejectionReason(str, Enum):
    MACHINE_NOT_FOUND = "MachineNotFound"
    SINGLE_CAPACITY_OVERLAP = "SingleCapacityOverlap"
    LANE_OVERLAP = "LaneOverlap"
    MACHINE_SATURATED = "MachineSaturated"


class Placement(BaseModel):
    """
    A proposed (machine, lane, interval) for a new or moved job.

    ``lane_index`` only matters on dual-capacity machines.  On a single
    lane machine any value is checked against the whole machine, and the
    board folds the job into lane 0.
    """

    model_config = ConfigDict(frozen=True)

    machine_id: str
    lane_index: int = Field(default=0, ge=0, le=1)
    start: AwareDatetime
    duration_hours: float = Field(gt=0, le=720)
    exclude_job_id: str | None = None

    @property
    def end(self) -> datetime:
        return add_elapsed(self.start, timedelta(hours=self.duration_hours))

    def on_lane(self, lane_index: int) -> Placement:
        return self.model_copy(update={"lane_index": lane_index})


@dataclass(frozen=True, slots=True)
class Verdict:
    ok: bool
    reason: RejectionReason | None = None
    blocking_jobs: tuple[Job, ...] = field(default_factory=tuple)
    message: str | None = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def accept(cls) -> Verdict:
        return cls(ok=True)

    @classmethod
    def reject(
        cls, reason: RejectionReason, blocking: Sequence[Job], message: str
    ) -> Verdict:
        return cls(ok=False, reason=reason, blocking_jobs=tuple(blocking), message=message)


class JobTable:
    """
    Columnar view over a job set: one NumPy array per field the overlap
    test needs.  Build once per snapshot and reuse for every validation.
    """

    def __init__(self, jobs: Iterable[Job]) -> None:
        self._jobs: tuple[Job, ...] = tuple(jobs)
        n = len(self._jobs)
        self._ids = np.array([j.id for j in self._jobs], dtype=object)
        self._machine_ids = np.array([j.machine_id for j in self._jobs], dtype=object)
        self._lanes = np.fromiter((j.lane_index for j in self._jobs), dtype=np.int8, count=n)
        self._starts = np.fromiter(
            (j.start_datetime.timestamp() for j in self._jobs), dtype=np.float64, count=n
        )
        # Same add_elapsed path as Placement.end, so abutting jobs compare equal.
        self._ends = np.fromiter(
            (j.end_datetime.timestamp() for j in self._jobs), dtype=np.float64, count=n
        )
        self._active = np.fromiter((j.is_active for j in self._jobs), dtype=bool, count=n)

    # ── queries ──────────────────────────────────────────────────────────

    def overlapping(
        self,
        machine_id: str,
        start: datetime,
        end: datetime,
        exclude_job_id: str | None = None,
    ) -> np.ndarray:
        """Boolean mask of active jobs on ``machine_id`` intersecting [start, end)."""
        mask = (
            self._active
            & (self._machine_ids == machine_id)
            & (self._starts < end.timestamp())
            & (self._ends > start.timestamp())
        )
        if exclude_job_id is not None:
            mask &= self._ids != exclude_job_id
        return mask

    def in_lane(self, lane_index: int) -> np.ndarray:
        return self._lanes == lane_index

    def select(self, mask: np.ndarray) -> list[Job]:
        return [self._jobs[i] for i in np.flatnonzero(mask)]

    # ── properties / repr ────────────────────────────────────────────────

    @property
    def jobs(self) -> tuple[Job, ...]:
        return self._jobs

    def __len__(self) -> int:
        return len(self._jobs)

    def __repr__(self) -> str:
        return f"JobTable(jobs={len(self)}, active={int(self._active.sum())})"


JobsLike = Union[JobTable, Iterable[Job]]
MachinesLike = Union[Mapping[str, Machine], Iterable[Machine]]


def as_table(jobs: JobsLike) -> JobTable:
    return jobs if isinstance(jobs, JobTable) else JobTable(jobs)


def machine_index(machines: MachinesLike) -> Mapping[str, Machine]:
    if isinstance(machines, Mapping):
        return machines
    return {m.id: m for m in machines}


def _serials(jobs: Sequence[Job]) -> str:
    return ", ".join(j.serial_number for j in jobs)


def validate(placement: Placement, jobs: JobsLike, machines: MachinesLike) -> Verdict:
    """
    Decide whether ``placement`` may be committed next to ``jobs``.

    Intervals are half-open, so a job ending exactly when another starts
    does not conflict.  Completed and cancelled jobs never block.  The
    check is independent of any board window.
    """
    machine = machine_index(machines).get(placement.machine_id)
    if machine is None:
        return Verdict.reject(
            RejectionReason.MACHINE_NOT_FOUND, (), "Machine not found"
        )

    table = as_table(jobs)
    overlaps = table.overlapping(
        machine.id, placement.start, placement.end, placement.exclude_job_id
    )

    if machine.capacity == 1:
        blocking = table.select(overlaps)
        if blocking:
            return Verdict.reject(
                RejectionReason.SINGLE_CAPACITY_OVERLAP,
                blocking,
                f"{machine.name} can only run one job at a time. "
                f"Conflicts with: {_serials(blocking)}",
            )
        return Verdict.accept()

    lane_blocking = table.select(overlaps & table.in_lane(placement.lane_index))
    if lane_blocking:
        return Verdict.reject(
            RejectionReason.LANE_OVERLAP,
            lane_blocking,
            f"Lane {placement.lane_index + 1} already has a job during this time. "
            f"Conflicts with: {_serials(lane_blocking)}",
        )

    # Lane bookkeeping can be wrong; the machine-wide count is the real limit.
    blocking = table.select(overlaps)
    if len(blocking) >= machine.capacity:
        logger.debug(
            "%s saturated by jobs on other lanes: %s", machine.name, _serials(blocking)
        )
        return Verdict.reject(
            RejectionReason.MACHINE_SATURATED,
            blocking,
            f"{machine.name} can only run {machine.capacity} jobs concurrently. "
            "Both lanes are occupied.",
        )
    return Verdict.accept()
