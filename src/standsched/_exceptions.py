class SchedulerError(Exception):
    """Base exception for all standsched errors."""


class UnknownViewMode(SchedulerError, ValueError):
    """Raised when a view mode other than ``shift`` or ``calendar`` is requested."""


class StaleWriteConflict(SchedulerError):
    """
    The caller's snapshot is older than the store's current job set.

    Raised at the commit boundary only.  The caller must refresh its snapshot
    and re-prompt the operator; never retry against the stale data.
    """

    def __init__(self, snapshot_version: int, current_version: int) -> None:
        super().__init__(
            f"Snapshot version {snapshot_version} is stale; "
            f"current version is {current_version}."
        )
        self.snapshot_version = snapshot_version
        self.current_version = current_version
