"""
standsched.window
~~~~~~~~~~~~~~~~~

Board time windows.  A window is always exactly 24 hours long and starts
either at the shift change (06:00 by default) or at midnight of the anchor
day.

Basic usage::

    from datetime import date
    from standsched.window import compute_window

    w = compute_window(date(2024, 1, 10), "shift")
    w.start, w.end     # → 2024-01-10 06:00, 2024-01-11 06:00
    w.hours            # → [6, 7, ..., 23, 0, ..., 5]

Public API
----------
TimeWindow      Frozen [start, end) interval with its hour sequence.
ViewMode        ``shift`` or ``calendar``.
compute_window  Window for an anchor date and view mode.
hours_for_mode  Displayed hour sequence for a view mode.
format_hour     12-hour header label.
fetch_range     Widened range of start times to load for a window.
"""

from __future__ import annotations

from standsched.window.window import (
    WINDOW_MINUTES,
    TimeWindow,
    ViewMode,
    compute_window,
    fetch_range,
    format_hour,
    hours_for_mode,
)

__all__ = [
    "WINDOW_MINUTES",
    "TimeWindow",
    "ViewMode",
    "compute_window",
    "fetch_range",
    "format_hour",
    "hours_for_mode",
]
