from __future__ import annotations

from datetime import datetime

from standsched.conflicts import (
    JobsLike,
    MachinesLike,
    Placement,
    as_table,
    machine_index,
    validate,
)


def allocate_lane(
    machine_id: str,
    start: datetime,
    duration_hours: float,
    jobs: JobsLike,
    machines: MachinesLike,
    exclude_job_id: str | None = None,
) -> int | None:
    """
    First lane on ``machine_id`` that accepts the interval, or None.

    Lanes are tried in index order, so identical inputs always give the
    same answer.
    """
    index = machine_index(machines)
    machine = index.get(machine_id)
    if machine is None:
        return None

    table = as_table(jobs)
    placement = Placement(
        machine_id=machine_id,
        start=start,
        duration_hours=duration_hours,
        exclude_job_id=exclude_job_id,
    )
    for lane in machine.lanes:
        if validate(placement.on_lane(lane), table, index):
            return lane
    return None
