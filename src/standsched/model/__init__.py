"""
standsched.model
~~~~~~~~~~~~~~~~

Validated, immutable input records for the scheduling engine.  The engine
only reads these; creating and persisting them is the caller's business.

Basic usage::

    from datetime import datetime, timezone
    from standsched.model import Job, Machine

    ett2 = Machine(id="m-ett2", name="ETT2", machine_group="ETT", capacity=2)
    job = Job(
        id="j-1",
        serial_number="SN-0042",
        test_type_id="t-burn-in",
        machine_id=ett2.id,
        lane_index=1,
        start_datetime=datetime(2024, 1, 10, 8, tzinfo=timezone.utc),
        duration_hours=4,
    )
    job.end_datetime   # → 2024-01-10 12:00 UTC

Public API
----------
Machine           A test stand with ``capacity`` lanes (1 or 2).
TestType          Reference data with default / concurrent durations.
Job               A scheduled test run on a machine lane.
JobStatus         scheduled → running → completed, or → cancelled.
default_duration  Duration to pre-fill for a test type on a machine.
add_elapsed       Add a duration in elapsed time (DST-safe).
"""

from __future__ import annotations

from standsched.model.model import (
    Job,
    JobStatus,
    Machine,
    TestType,
    add_elapsed,
    default_duration,
)

__all__ = [
    "Job",
    "JobStatus",
    "Machine",
    "TestType",
    "add_elapsed",
    "default_duration",
]
