"""
standsched.engine
~~~~~~~~~~~~~~~~~

Facade for callers that own persistence.  The caller holds a versioned
:class:`ScheduleSnapshot`, asks the engine for window geometry or a
verdict, and re-checks freshness right before it commits.

Basic usage::

    from standsched.conflicts import Placement
    from standsched.engine import ScheduleSnapshot, SchedulingEngine

    engine = SchedulingEngine()
    snap = ScheduleSnapshot(machines, test_types, jobs, version=store.version)

    window = engine.compute_window(today)
    lane = engine.allocate_lane("m-ett2", start, 4.0, snap)

    verdict = engine.revalidate_for_commit(placement, snap, store.version)
    if verdict:
        store.insert(...)

Public API
----------
ScheduleSnapshot  Versioned, immutable input data set.
SchedulingEngine  compute_window, project_job, validate_placement,
                  allocate_lane, default_duration, ensure_fresh,
                  revalidate_for_commit.
"""

from __future__ import annotations

from standsched.engine.engine import ScheduleSnapshot, SchedulingEngine

__all__ = ["ScheduleSnapshot", "SchedulingEngine"]
