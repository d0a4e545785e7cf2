"""Date assignment for converted workout cards.

A forward calendar walk, not a scheduler: starting at the start date, every
day whose weekday is selected goes to the next undated card in list order.
The walk stops once every card is dated or after ``card_limit * 60`` days;
cards still undated at that point stay undated.

Weekdays use 0=Sunday .. 6=Saturday.
"""
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from armpal_api.utils import to_number

logger = logging.getLogger(__name__)

ASSIGNED_TIME = "09:00"
SAFETY_DAYS_PER_CARD = 60


@dataclass(frozen=True)
class Schedule:
    """Validated scheduling input; its existence means dated mode."""
    start: date
    weekdays: FrozenSet[int]


def sunday_based_weekday(day: date) -> int:
    """0=Sunday .. 6=Saturday."""
    return (day.weekday() + 1) % 7


def format_assigned_date(day: date) -> str:
    return f"{day.isoformat()}T{ASSIGNED_TIME}"


def _parse_weekdays(training_days: Optional[Iterable[Any]]) -> FrozenSet[int]:
    if not training_days:
        return frozenset()
    weekdays = set()
    for value in training_days:
        number = to_number(value)
        if number is not None and number.is_integer() and 0 <= number <= 6:
            weekdays.add(int(number))
    return frozenset(weekdays)


def resolve_schedule(start_date: Any, training_days: Any) -> Optional[Schedule]:
    """Decide between dated and dateless mode.

    Returns None (dateless) when the start date is missing or not a
    ``YYYY-MM-DD`` string, when training_days is not a list, or when no
    valid weekday was selected.
    """
    if not start_date or not training_days:
        return None
    if not isinstance(start_date, str) or not isinstance(training_days, list):
        logger.warning(
            f"Ignoring malformed schedule (start_date={start_date!r}, training_days={training_days!r}); "
            "cards stay undated"
        )
        return None

    try:
        start = date.fromisoformat(start_date.strip()[:10])
    except ValueError:
        logger.warning(f"Ignoring unparsable start_date {start_date!r}; cards stay undated")
        return None

    weekdays = _parse_weekdays(training_days)
    if not weekdays:
        return None
    return Schedule(start=start, weekdays=weekdays)


def assign_dates(
    cards: List[Dict[str, Any]],
    start_date: Any,
    training_days: Any,
    card_limit: int,
) -> List[Dict[str, Any]]:
    """
    Stamp ``assigned_date`` onto leading cards following the weekday walk.

    Args:
        cards: Dateless cards in chronological order
        start_date: "YYYY-MM-DD" or None
        training_days: Selected weekdays (0=Sunday) or None
        card_limit: Clamped card limit; bounds the walk at card_limit * 60 days

    Returns:
        New list of card dicts; the input list is not modified
    """
    schedule = resolve_schedule(start_date, training_days)
    if schedule is None:
        return [dict(card) for card in cards]
    return walk_schedule(cards, schedule, card_limit * SAFETY_DAYS_PER_CARD)


def walk_schedule(cards: List[Dict[str, Any]], schedule: Schedule, max_days: int) -> List[Dict[str, Any]]:
    dated = [dict(card) for card in cards]
    current = schedule.start
    index = 0
    days_walked = 0

    while index < len(dated) and days_walked < max_days:
        if sunday_based_weekday(current) in schedule.weekdays:
            dated[index]["assigned_date"] = format_assigned_date(current)
            index += 1
        days_walked += 1
        if current == date.max:
            break
        current += timedelta(days=1)

    if index < len(dated):
        logger.info(f"Date walk stopped after {days_walked} days; {len(dated) - index} cards left undated")
    return dated
