"""Single-step recurrence helper used outside the full schedule generator."""

from typing import Union

from request_lifecycle.business.recurring_schedule import DateLike, advance
from request_lifecycle.business.statuses import RecurringFrequency


def calculate_next_occurrence(
    scheduled_for: DateLike,
    frequency: Union[RecurringFrequency, str]
) -> DateLike:
    """
    Calculate the next occurrence after ``scheduled_for``.

    Adds one day, seven days or one calendar month. Month addition keeps the
    day of month and overflows past short months, so Jan 31 becomes Mar 2 or
    Mar 3.

    Args:
        scheduled_for (DateLike): Current occurrence date or datetime
        frequency: DAILY, WEEKLY or MONTHLY

    Returns:
        DateLike: Next occurrence, same type as the input
    """
    return advance(scheduled_for, RecurringFrequency(frequency))
