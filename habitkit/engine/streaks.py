from typing import TYPE_CHECKING, Iterable, Optional

from habitkit.engine.dates import normalize_day, previous_day, today_id

if TYPE_CHECKING:
    from habitkit.schemas.habit import HabitRecord


def compute_streak(completed_day_ids: Iterable[str], today: str) -> int:
    """Consecutive completed days ending on the most recent completion.

    The run only counts while its newest day is today or yesterday; any
    older most-recent completion means the streak is broken.
    """
    done = {normalize_day(d) for d in completed_day_ids}
    if not done:
        return 0

    today = normalize_day(today)
    yesterday = previous_day(today)
    most_recent = max(done)
    if most_recent != today and most_recent != yesterday:
        return 0

    streak = 0
    current = most_recent
    while current in done:
        streak += 1
        current = previous_day(current)
    return streak


def refresh_streak(record: "HabitRecord", today: Optional[str] = None) -> "HabitRecord":
    record.streak = compute_streak(record.completed_dates, today or today_id())
    return record
