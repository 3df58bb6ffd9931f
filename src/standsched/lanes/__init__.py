"""
standsched.lanes
~~~~~~~~~~~~~~~~

Picks a free lane for a desired interval.  Lane 0 is always preferred, so
repeated calls with the same inputs agree.

Basic usage::

    from standsched.lanes import allocate_lane

    lane = allocate_lane("m-ett2", start, 4.0, active_jobs, machines)
    if lane is None:
        ...  # both lanes busy

Public API
----------
allocate_lane  First accepting lane index, or None.
"""

from __future__ import annotations

from standsched.lanes.lanes import allocate_lane

__all__ = ["allocate_lane"]
