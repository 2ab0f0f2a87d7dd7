# ==== RECURRING SCHEDULE VALUE OBJECT ==== #

"""
Recurring schedule value object for repeating verification requests.

This module provides calendar arithmetic for daily, weekly and monthly
recurrence, the per-occurrence record, and the immutable schedule that
generates occurrence dates and reports completion progress.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .errors import ScheduleValidationError
from .statuses import OccurrenceStatus, RecurringFrequency


MIN_OCCURRENCES = 1
MAX_OCCURRENCES = 365

DateLike = Union[date, datetime]


# ==== CALENDAR ARITHMETIC ==== #


def add_months(value: DateLike, months: int) -> DateLike:
    """
    Advance a date by calendar months.

    The day of month is kept and overflows into the following month when the
    target month is shorter (Jan 31 + 1 month is Mar 2 in a leap year).
    Time of day is preserved for datetimes.

    Args:
        value (DateLike): Date or datetime to advance
        months (int): Number of months to add

    Returns:
        DateLike: Advanced value of the same type
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    first_of_month = value.replace(year=year, month=month, day=1)
    return first_of_month + timedelta(days=value.day - 1)


def advance(value: DateLike, frequency: RecurringFrequency, periods: int = 1) -> DateLike:
    """Advance a date by a number of recurrence periods."""
    frequency = RecurringFrequency(frequency)
    if frequency is RecurringFrequency.DAILY:
        return value + timedelta(days=periods)
    if frequency is RecurringFrequency.WEEKLY:
        return value + timedelta(days=7 * periods)
    return add_months(value, periods)


# ==== OCCURRENCE RECORD ==== #


@dataclass(frozen=True)
class RecurringOccurrence:
    """One scheduled instance of a recurring request."""
    occurrence_number: int
    scheduled_date: DateLike
    status: OccurrenceStatus = OccurrenceStatus.PENDING
    agent_id: Optional[str] = None
    completed_at: Optional[datetime] = None
    deliverable_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "occurrence_number": self.occurrence_number,
            "scheduled_date": self.scheduled_date.isoformat(),
            "status": OccurrenceStatus(self.status).value,
            "agent_id": self.agent_id,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "deliverable_id": self.deliverable_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RecurringOccurrence":
        missing = [key for key in ("occurrence_number", "scheduled_date") if data.get(key) is None]
        if missing:
            raise ScheduleValidationError(f"Occurrence is missing {', '.join(missing)}")

        completed_at = data.get("completed_at")
        if isinstance(completed_at, str):
            completed_at = datetime.fromisoformat(completed_at)
        return cls(
            occurrence_number=data["occurrence_number"],
            scheduled_date=_parse_date(data["scheduled_date"]),
            status=OccurrenceStatus(data.get("status", OccurrenceStatus.PENDING)),
            agent_id=data.get("agent_id"),
            completed_at=completed_at,
            deliverable_id=data.get("deliverable_id"),
        )


OccurrenceInput = Union[RecurringOccurrence, Mapping[str, Any]]


# ==== RECURRING SCHEDULE ==== #


class RecurringSchedule:
    """
    Immutable recurring schedule.

    Validates frequency, start date and occurrence count at construction; an
    invalid schedule is never produced. The end date is derived from the
    frequency and count. The occurrence snapshot is a read-only tuple and
    every update returns a new schedule.

    The occurrence list is assumed to be in temporal order; schedules built
    with ``generate`` always are.
    """

    __slots__ = ("_frequency", "_start_date", "_end_date", "_total_occurrences", "_occurrences")

    def __init__(
        self,
        frequency: Union[RecurringFrequency, str],
        start_date: DateLike,
        total_occurrences: int,
        occurrences: Iterable[OccurrenceInput] = (),
        *,
        today: Optional[date] = None
    ):
        frequency = self._validate(frequency, start_date, total_occurrences, today)
        self._assign(frequency, start_date, total_occurrences, occurrences)

    @classmethod
    def generate(
        cls,
        frequency: Union[RecurringFrequency, str],
        start_date: DateLike,
        total_occurrences: int,
        *,
        today: Optional[date] = None
    ) -> "RecurringSchedule":
        """
        Build a schedule with one PENDING occurrence per generated date.

        Args:
            frequency: DAILY, WEEKLY or MONTHLY
            start_date: First occurrence date, not before today
            total_occurrences: Number of occurrences, 1 to 365
            today: Reference date for the start date check (defaults to today)

        Returns:
            RecurringSchedule: Schedule with occurrences numbered from 1
        """
        schedule = cls(frequency, start_date, total_occurrences, today=today)
        occurrences = [
            RecurringOccurrence(occurrence_number=number, scheduled_date=scheduled)
            for number, scheduled in enumerate(schedule.generate_occurrence_dates(), start=1)
        ]
        return schedule._with_occurrences(occurrences)

    # ==== ACCESSORS ==== #

    @property
    def frequency(self) -> RecurringFrequency:
        return self._frequency

    @property
    def start_date(self) -> DateLike:
        return self._start_date

    @property
    def end_date(self) -> DateLike:
        return self._end_date

    @property
    def total_occurrences(self) -> int:
        return self._total_occurrences

    @property
    def occurrences(self) -> Tuple[RecurringOccurrence, ...]:
        return self._occurrences

    # ==== PROGRESS TRACKING ==== #

    def get_completed_count(self) -> int:
        return self._count(OccurrenceStatus.COMPLETED)

    def get_pending_count(self) -> int:
        return self._count(OccurrenceStatus.PENDING)

    def get_next_scheduled_date(self) -> Optional[DateLike]:
        """Scheduled date of the first PENDING occurrence in list order."""
        for occurrence in self._occurrences:
            if occurrence.status == OccurrenceStatus.PENDING:
                return occurrence.scheduled_date
        return None

    def is_complete(self) -> bool:
        return self.get_completed_count() == self._total_occurrences

    def get_completion_percentage(self) -> float:
        return self.get_completed_count() / self._total_occurrences * 100

    def get_breakdown(self) -> str:
        frequency = self._frequency.value.capitalize()
        return f"{frequency} schedule: {self.get_completed_count()}/{self._total_occurrences} completed"

    # ==== DATE GENERATION ==== #

    def generate_occurrence_dates(self) -> List[DateLike]:
        """
        Generate every occurrence date.

        The first date is the start date; each following date is one period
        after the previous one.

        Returns:
            List[DateLike]: ``total_occurrences`` dates in order
        """
        dates = []
        current = self._start_date
        for _ in range(self._total_occurrences):
            dates.append(current)
            current = advance(current, self._frequency)
        return dates

    # ==== UPDATES ==== #

    def with_occurrence(self, occurrence_number: int, **changes: Any) -> "RecurringSchedule":
        """
        Return a new schedule with one occurrence updated.

        Args:
            occurrence_number (int): 1-based number of the occurrence to update
            **changes: Fields to replace (status, agent_id, completed_at, ...)

        Returns:
            RecurringSchedule: New schedule; this one is left unchanged

        Raises:
            ScheduleValidationError: If no occurrence has that number
        """
        if "status" in changes:
            changes["status"] = OccurrenceStatus(changes["status"])

        updated = list(self._occurrences)
        for index, occurrence in enumerate(updated):
            if occurrence.occurrence_number == occurrence_number:
                updated[index] = replace(occurrence, **changes)
                return self._with_occurrences(updated)

        raise ScheduleValidationError(f"Occurrence {occurrence_number} not found in schedule")

    # ==== SERIALIZATION ==== #

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frequency": self._frequency.value,
            "start_date": self._start_date.isoformat(),
            "end_date": self._end_date.isoformat(),
            "total_occurrences": self._total_occurrences,
            "occurrences": [occurrence.to_dict() for occurrence in self._occurrences],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, today: Optional[date] = None) -> "RecurringSchedule":
        """
        Rebuild a schedule from a plain mapping.

        Construction rules apply again, including the start date check
        against ``today``.
        """
        start_date = data.get("start_date")
        if isinstance(start_date, str):
            start_date = _parse_date(start_date)
        return cls(
            data.get("frequency"),
            start_date,
            data.get("total_occurrences"),
            data.get("occurrences") or (),
            today=today,
        )

    # ==== INTERNALS ==== #

    def _assign(self, frequency, start_date, total_occurrences, occurrences) -> None:
        self._frequency = frequency
        self._start_date = start_date
        self._total_occurrences = total_occurrences
        self._end_date = advance(start_date, frequency, total_occurrences - 1)
        self._occurrences = tuple(_coerce_occurrence(occurrence) for occurrence in occurrences)

    def _with_occurrences(self, occurrences: Iterable[OccurrenceInput]) -> "RecurringSchedule":
        # Already validated; skip the start date check so past schedules stay updatable
        schedule = object.__new__(type(self))
        schedule._assign(self._frequency, self._start_date, self._total_occurrences, occurrences)
        return schedule

    def _count(self, status: OccurrenceStatus) -> int:
        return sum(1 for occurrence in self._occurrences if occurrence.status == status)

    @staticmethod
    def _validate(frequency, start_date, total_occurrences, today) -> RecurringFrequency:
        if not frequency:
            raise ScheduleValidationError("Frequency is required")
        try:
            frequency = RecurringFrequency(frequency)
        except ValueError:
            raise ScheduleValidationError(f"Unsupported frequency: {frequency}")

        if not isinstance(start_date, date):
            raise ScheduleValidationError("Invalid start date")

        if isinstance(total_occurrences, bool) or not isinstance(total_occurrences, int):
            raise ScheduleValidationError("Total occurrences must be an integer")
        if total_occurrences < MIN_OCCURRENCES:
            raise ScheduleValidationError(f"Total occurrences must be at least {MIN_OCCURRENCES}")
        if total_occurrences > MAX_OCCURRENCES:
            raise ScheduleValidationError(f"Total occurrences cannot exceed {MAX_OCCURRENCES}")

        # Same-day starts are allowed
        reference = today or date.today()
        if _as_date(start_date) < _as_date(reference):
            raise ScheduleValidationError("Start date cannot be in the past")

        return frequency

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecurringSchedule):
            return NotImplemented
        return (
            self._frequency == other._frequency
            and self._start_date == other._start_date
            and self._total_occurrences == other._total_occurrences
            and self._occurrences == other._occurrences
        )

    def __hash__(self) -> int:
        return hash((self._frequency, self._start_date, self._total_occurrences, self._occurrences))

    def __repr__(self) -> str:
        return (
            f"RecurringSchedule(frequency={self._frequency.value}, "
            f"start_date={self._start_date.isoformat()}, "
            f"total_occurrences={self._total_occurrences})"
        )


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def _parse_date(value: Union[str, DateLike]) -> DateLike:
    if not isinstance(value, str):
        return value
    if "T" in value or " " in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return date.fromisoformat(value)


def _coerce_occurrence(occurrence: OccurrenceInput) -> RecurringOccurrence:
    if isinstance(occurrence, RecurringOccurrence):
        return occurrence
    return RecurringOccurrence.from_dict(occurrence)
