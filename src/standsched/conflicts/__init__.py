"""
standsched.conflicts
~~~~~~~~~~~~~~~~~~~~

Accept/reject decisions for placing a job on a machine lane.

Basic usage::

    from standsched.conflicts import Placement, validate

    verdict = validate(
        Placement(machine_id="m-fct1", start=start, duration_hours=2.0),
        active_jobs,
        machines,
    )
    if not verdict:
        show(verdict.message, verdict.blocking_jobs)

Rejections are ordinary return values, never exceptions.  When the same job
set is checked repeatedly, wrap it once in a :class:`JobTable`.

Public API
----------
Placement        Proposed machine / lane / interval.
Verdict          ``ok`` plus reason, blocking jobs and message.
RejectionReason  MachineNotFound, SingleCapacityOverlap, LaneOverlap,
                 MachineSaturated.
JobTable         Columnar NumPy view over a job set.
validate         The conflict check.
JobsLike         A JobTable or any iterable of jobs.
MachinesLike     A mapping of id to Machine or any iterable of machines.
"""

from __future__ import annotations

from standsched.conflicts.conflicts import (
    JobsLike,
    JobTable,
    MachinesLike,
    Placement,
    RejectionReason,
    Verdict,
    as_table,
    machine_index,
    validate,
)

__all__ = [
    "JobTable",
    "JobsLike",
    "MachinesLike",
    "Placement",
    "RejectionReason",
    "Verdict",
    "as_table",
    "machine_index",
    "validate",
]
