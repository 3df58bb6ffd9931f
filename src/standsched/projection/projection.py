from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Sequence, Union

import numpy as np

from standsched.model import Job, Machine, add_elapsed
from standsched.window import TimeWindow

ArrayLike = Union[float, "np.ndarray"]


@dataclass(frozen=True, slots=True)
class Segment:
    left_percent: float
    width_percent: float


@dataclass(frozen=True, slots=True)
class Projection:
    segments: tuple[Segment, ...]
    is_wrapped: bool = False

    @property
    def total_width(self) -> float:
        return sum(s.width_percent for s in self.segments)


@dataclass(frozen=True, slots=True)
class BatchProjection:
    """Column-wise projection of many jobs; ``tail_width`` is 0 unless wrapped."""

    left: np.ndarray
    width: np.ndarray
    tail_width: np.ndarray
    is_wrapped: np.ndarray

    def __len__(self) -> int:
        return len(self.left)

    def row(self, i: int) -> Projection:
        head = Segment(float(self.left[i]), float(self.width[i]))
        if self.is_wrapped[i]:
            return Projection((head, Segment(0.0, float(self.tail_width[i]))), True)
        return Projection((head,), False)


def _utc(instant: datetime) -> datetime:
    return instant.astimezone(timezone.utc)


def _offset_minutes(instant: datetime, window: TimeWindow) -> float:
    return (_utc(instant) - _utc(window.start)).total_seconds() / 60.0


def project(job_start: datetime, duration_hours: float, window: TimeWindow) -> Projection:
    """
    Map ``[job_start, job_start + duration)`` onto percentage offsets of
    ``window``.  A job running past the window end is split in two: the
    part up to 100 % and the overflow drawn again from 0 %.
    """
    w = window.minutes
    start = _offset_minutes(job_start, window)
    duration = duration_hours * 60.0
    end = start + duration

    if start < 0:
        visible = max(0.0, min(end, w))
        return Projection((Segment(0.0, visible / w * 100.0),))

    if end > w:
        head = Segment(start / w * 100.0, (w - start) / w * 100.0)
        tail = Segment(0.0, min((end - w) / w * 100.0, 100.0))
        return Projection((head, tail), is_wrapped=True)

    return Projection((Segment(start / w * 100.0, duration / w * 100.0),))


def project_many(
    starts: Sequence[datetime],
    duration_hours: ArrayLike | Sequence[float],
    window: TimeWindow,
) -> BatchProjection:
    """Vectorised :func:`project` for a whole board row."""
    w = window.minutes
    s = np.fromiter(
        (_offset_minutes(t, window) for t in starts), dtype=np.float64, count=len(starts)
    )
    d = np.asarray(duration_hours, dtype=np.float64) * 60.0
    s, d = np.broadcast_arrays(s, d)
    e = s + d

    before = s < 0
    wrapped = ~before & (e > w)

    left = np.where(before, 0.0, s / w * 100.0)
    width = np.where(
        before,
        np.clip(e, 0.0, w) / w * 100.0,
        np.where(wrapped, (w - s) / w * 100.0, d / w * 100.0),
    )
    tail = np.where(wrapped, np.minimum((e - w) / w * 100.0, 100.0), 0.0)
    return BatchProjection(left=left, width=width, tail_width=tail, is_wrapped=wrapped)


def time_from_position(percent: float, window: TimeWindow) -> datetime:
    """Instant at ``percent`` of the way across ``window`` (drop targets)."""
    return add_elapsed(window.start, timedelta(minutes=percent / 100.0 * window.minutes))


def current_time_position(now: datetime, window: TimeWindow) -> float | None:
    """Percent offset for the "now" marker, or None when off the board."""
    offset = _offset_minutes(now, window)
    if offset < 0 or offset > window.minutes:
        return None
    return offset / window.minutes * 100.0


def visible_jobs(jobs: Iterable[Job], window: TimeWindow) -> list[Job]:
    start, end = _utc(window.start), _utc(window.end)
    return [
        job for job in jobs
        if _utc(job.end_datetime) > start and _utc(job.start_datetime) < end
    ]


def split_lanes(jobs: Iterable[Job], machine: Machine) -> dict[int, list[Job]]:
    lanes: dict[int, list[Job]] = {lane: [] for lane in machine.lanes}
    for job in jobs:
        if job.machine_id != machine.id:
            continue
        lane = job.lane_index if machine.is_dual_capacity else 0
        lanes.setdefault(lane, []).append(job)
    return lanes
