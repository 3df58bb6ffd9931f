from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator


def add_elapsed(instant: datetime, delta: timedelta) -> datetime:
    """
    ``instant + delta`` in elapsed time, expressed in ``instant``'s zone.

    Plain ``+`` on a zone-aware datetime moves the wall clock, so across a
    daylight-saving change it lands an hour early or late.
    """
    return (instant.astimezone(timezone.utc) + delta).astimezone(instant.tzinfo)


class JobStatus(str, Enum):
    SCHEDULED = "scheduled"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        """Scheduled and running jobs occupy their lane; the rest are inert."""
        return self in (JobStatus.SCHEDULED, JobStatus.RUNNING)

    @property
    def is_terminal(self) -> bool:
        return not self.is_active

    def can_transition_to(self, other: JobStatus) -> bool:
        # Advisory only; callers own the business-rule layer.
        return other in _TRANSITIONS[self]


_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.SCHEDULED: frozenset({JobStatus.RUNNING, JobStatus.CANCELLED}),
    JobStatus.RUNNING: frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.CANCELLED: frozenset(),
}


class Machine(BaseModel):
    """A physical test stand with one or two independent lanes."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    machine_group: str = ""
    capacity: int = Field(default=1, ge=1, le=2)
    is_down: bool = False
    down_note: str | None = None
    down_eta: datetime | None = None
    display_order: int = 0

    @property
    def is_dual_capacity(self) -> bool:
        return self.capacity == 2

    @property
    def lanes(self) -> range:
        return range(self.capacity)


class TestType(BaseModel):
    """Reference data for a kind of test.

    Attributes
    ----------
    default_duration_hours:
        Duration used for a single run.
    concurrent_duration_hours:
        Optional duration used when the job lands on a dual-capacity machine.
    requires_manual_duration:
        Hint for the caller's form not to pre-fill a duration.
    """

    __test__ = False  # not a pytest test class

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    slug: str = ""
    color: str = ""
    default_duration_hours: float = Field(gt=0)
    concurrent_duration_hours: float | None = Field(default=None, gt=0)
    requires_manual_duration: bool = False


class Job(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    serial_number: str = Field(min_length=1, max_length=100)
    test_type_id: str
    machine_id: str
    lane_index: int = Field(default=0, ge=0, le=1)
    start_datetime: AwareDatetime
    duration_hours: float = Field(gt=0, le=720)
    status: JobStatus = JobStatus.SCHEDULED
    notes: str | None = Field(default=None, max_length=1000)
    created_by: str | None = None

    @field_validator("serial_number", mode="before")
    @classmethod
    def _strip_serial(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("notes", mode="before")
    @classmethod
    def _blank_notes_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @property
    def end_datetime(self) -> datetime:
        return add_elapsed(self.start_datetime, timedelta(hours=self.duration_hours))

    @property
    def is_active(self) -> bool:
        return self.status.is_active


def default_duration(test_type: TestType, is_dual_capacity: bool) -> float:
    """Hours to pre-fill for a new job of ``test_type``.

    Two simultaneous runs on a dual-capacity stand complete faster per unit,
    so the concurrent duration wins there when the test type defines one.
    """
    if is_dual_capacity and test_type.concurrent_duration_hours:
        return test_type.concurrent_duration_hours
    return test_type.default_duration_hours
