"""
standsched.projection
~~~~~~~~~~~~~~~~~~~~~

Projects job intervals onto a board window as percentage offsets.

Basic usage::

    from standsched.projection import project

    p = project(job.start_datetime, job.duration_hours, window)
    for seg in p.segments:
        draw(seg.left_percent, seg.width_percent)

A job that runs past the window end comes back as two segments with
``is_wrapped`` set.  A job that began before the window is clipped to a
single segment starting at 0 %.

Whole rows can be projected at once::

    batch = project_many([j.start_datetime for j in jobs],
                         [j.duration_hours for j in jobs], window)

Public API
----------
Segment                One drawable bar piece.
Projection             Segments for one job plus the wrap flag.
BatchProjection        Column arrays returned by ``project_many``.
project                Project one job.
project_many           Project many jobs with NumPy.
time_from_position     Inverse mapping, percent → instant.
current_time_position  Percent offset of "now", or None.
visible_jobs           Jobs intersecting a window.
split_lanes            Group a machine's jobs by lane.
"""

from __future__ import annotations

from standsched.projection.projection import (
    BatchProjection,
    Projection,
    Segment,
    current_time_position,
    project,
    project_many,
    split_lanes,
    time_from_position,
    visible_jobs,
)

__all__ = [
    "BatchProjection",
    "Projection",
    "Segment",
    "current_time_position",
    "project",
    "project_many",
    "split_lanes",
    "time_from_position",
    "visible_jobs",
]
