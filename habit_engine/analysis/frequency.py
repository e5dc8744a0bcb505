"""
Hour-of-day Frequency Analysis

Turns historical session hours into a small, spaced-out set of candidate
hours for notifications and restriction windows.

Selection steps:
1. Count sessions per hour
2. Rank hours by descending frequency (ties: earliest hour first)
3. Greedily accept hours at least `min_gap` apart, up to `max_count`
4. Sort ascending and drop hours outside the waking range [8, 22]
5. Top up with default hours, first-match insertion, until `max_count`
6. Deduplicate, cap, sort

This is a heuristic, not an optimal cover. The tie order and the first-match
insertion policy decide which hours survive, so changing either changes the
schedule users see.
"""

import logging
from collections import Counter
from typing import Iterable, List, Optional, Sequence, Tuple

from habit_engine.exceptions import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MIN_GAP = 2
DEFAULT_MAX_COUNT = 4

# Hours outside this range are never used for interventions
EARLIEST_HOUR = 8
LATEST_HOUR = 22


def hour_frequencies(hours: Iterable[int]) -> Counter:
    """
    Count how often each hour occurs.

    Example:
        >>> hour_frequencies([9, 10, 11, 9, 10])
        Counter({9: 2, 10: 2, 11: 1})
    """
    return Counter(hours)


def rank_hours(frequencies: Counter) -> List[Tuple[int, int]]:
    """
    Sort (hour, count) pairs by descending count, then ascending hour.

    Example:
        >>> rank_hours(Counter({11: 1, 10: 2, 9: 2}))
        [(9, 2), (10, 2), (11, 1)]
    """
    return sorted(frequencies.items(), key=lambda item: (-item[1], item[0]))


def select_spaced_hours(
    ranked_hours: Sequence[Tuple[int, int]],
    min_gap: int = DEFAULT_MIN_GAP,
    max_count: int = DEFAULT_MAX_COUNT
) -> List[int]:
    """
    Greedily pick hours in ranked order, skipping any hour closer than
    `min_gap` to an hour already accepted.

    Returns:
        Accepted hours in acceptance order (most frequent first)
    """
    selected: List[int] = []

    for hour, _count in ranked_hours:
        if len(selected) >= max_count:
            break
        if all(abs(hour - accepted) >= min_gap for accepted in selected):
            selected.append(hour)

    return selected


def find_insertion_index(times: Sequence[int], hour: int, min_gap: int) -> Optional[int]:
    """
    Index of the first entry at least `min_gap` away from `hour`.

    First match wins; this is not a search for the best slot.

    Example:
        >>> find_insertion_index([9, 14, 18], 12, 2)
        0
        >>> find_insertion_index([9], 10, 2) is None
        True
    """
    for index, time in enumerate(times):
        if abs(time - hour) >= min_gap:
            return index
    return None


def add_default_hours(
    hours: Sequence[int],
    default_hours: Sequence[int],
    min_gap: int = DEFAULT_MIN_GAP,
    max_count: int = DEFAULT_MAX_COUNT
) -> List[int]:
    """
    Merge default hours into a selection until it holds `max_count` entries.

    A default is skipped when it is already present or would sit closer than
    `min_gap` to any selected hour; otherwise it goes in at the first-match
    insertion index.

    Example:
        >>> add_default_hours([9, 14, 18], [8, 10, 12, 16, 20])
        [9, 12, 14, 18]
    """
    updated = sorted(hours)

    for default_hour in default_hours:
        if len(updated) >= max_count:
            break
        if default_hour in updated:
            continue
        if any(abs(existing - default_hour) < min_gap for existing in updated):
            continue

        index = find_insertion_index(updated, default_hour, min_gap)
        if index is not None:
            updated.insert(index, default_hour)

    return sorted(updated)


def select_hours(
    hours: Iterable[int],
    default_hours: Sequence[int],
    min_gap: int = DEFAULT_MIN_GAP,
    max_count: int = DEFAULT_MAX_COUNT
) -> List[int]:
    """
    Pick up to `max_count` intervention hours from historical session hours.

    Args:
        hours: One observed hour (0-23) per historical session
        default_hours: Fallback hours, returned unchanged when history is
            empty or yields no hour inside the waking range
        min_gap: Minimum distance in hours between two selected hours
        max_count: Maximum number of hours returned

    Returns:
        Selected hours, ascending

    Raises:
        ValidationError: If an observed hour is outside 0-23

    Example:
        >>> select_hours([], [8, 10, 12, 16, 20])
        [8, 10, 12, 16, 20]
        >>> select_hours([9, 9, 14, 18], [8, 10, 12, 16, 20])
        [9, 12, 14, 18]
    """
    observed = list(hours)
    invalid = [h for h in observed if not 0 <= h <= 23]
    if invalid:
        raise ValidationError(
            f"Hours must be between 0 and 23, got {invalid}",
            field="hours",
            value=invalid,
            operation="select_hours",
        )

    if not observed:
        logger.debug("No historical hours, using default hours")
        return list(default_hours)

    ranked = rank_hours(hour_frequencies(observed))
    selected = sorted(select_spaced_hours(ranked, min_gap=min_gap, max_count=max_count))
    selected = [h for h in selected if EARLIEST_HOUR <= h <= LATEST_HOUR]

    if not selected:
        logger.debug("No historical hours inside the waking range, using default hours")
        return list(default_hours)

    if len(selected) < max_count:
        selected = add_default_hours(selected, default_hours, min_gap=min_gap, max_count=max_count)

    result = sorted(set(selected))[:max_count]
    logger.debug(f"Selected hours {result} from {len(observed)} observations")
    return result


def most_frequent_hour(hours: Iterable[int]) -> Optional[int]:
    """Most common hour (earliest on ties), or None without data"""
    ranked = rank_hours(hour_frequencies(hours))
    return ranked[0][0] if ranked else None
