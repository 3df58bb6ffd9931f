"""
standsched
~~~~~~~~~~

Placement engine for test-stand scheduling: board windows, bar projection,
lane conflicts and lane allocation.  Pure functions over caller-supplied
data; no I/O.
"""

from __future__ import annotations

import logging

from standsched._exceptions import SchedulerError, StaleWriteConflict, UnknownViewMode
from standsched.conflicts import Placement, RejectionReason, Verdict, validate
from standsched.engine import ScheduleSnapshot, SchedulingEngine
from standsched.lanes import allocate_lane
from standsched.model import Job, JobStatus, Machine, TestType, default_duration
from standsched.projection import project
from standsched.window import TimeWindow, ViewMode, compute_window

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Job",
    "JobStatus",
    "Machine",
    "Placement",
    "RejectionReason",
    "ScheduleSnapshot",
    "SchedulerError",
    "SchedulingEngine",
    "StaleWriteConflict",
    "TestType",
    "TimeWindow",
    "UnknownViewMode",
    "Verdict",
    "ViewMode",
    "allocate_lane",
    "compute_window",
    "default_duration",
    "project",
    "validate",
]
