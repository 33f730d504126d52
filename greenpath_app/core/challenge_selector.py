"""Deterministic selection of the day's eco challenges.

Every caller on the same calendar day gets the same challenges without any
stored state: the day of the year seeds a cheap reorder of the catalog, then a
category rotation picks one challenge per category before the remaining slots
are filled in reordered catalog order.
"""

from __future__ import annotations

from datetime import date
from typing import Sequence

from greenpath_app.constants.challenge_constants import CHALLENGE_CATEGORIES
from greenpath_app.core.models import Challenge


def day_of_year(day: date) -> int:
    """Return the 0-based day index within the year (January 1st is 0)."""
    return day.timetuple().tm_yday - 1


def shuffle_key(challenge: Challenge, day_index: int) -> int:
    """Weak reproducible reorder key; not meant to be random."""
    first_char = ord(challenge.id[0]) if challenge.id else 0
    return (first_char * day_index) % 100


def select_daily(
    day: date,
    catalog: Sequence[Challenge],
    count: int,
    categories: Sequence[str] = CHALLENGE_CATEGORIES,
) -> list[Challenge]:
    """Return ``min(count, len(catalog))`` challenges for ``day``.

    The catalog is never mutated. An empty catalog or a non-positive count
    yields an empty list. Entries sharing an id are picked at most once.
    """
    if count <= 0 or not catalog:
        return []

    day_index = day_of_year(day)
    # sorted() is stable, so equal keys keep catalog order.
    shuffled = sorted(catalog, key=lambda challenge: shuffle_key(challenge, day_index))

    selected: list[Challenge] = []
    taken: set[str] = set()

    if categories:
        for step in range(count):
            category = categories[(day_index + step) % len(categories)]
            challenge = _first_untaken(shuffled, taken, category)
            if challenge is not None:
                taken.add(challenge.id)
                selected.append(challenge)

    while len(selected) < count:
        challenge = _first_untaken(shuffled, taken)
        if challenge is None:
            break
        taken.add(challenge.id)
        selected.append(challenge)

    return selected


def _first_untaken(
    shuffled: Sequence[Challenge],
    taken: set[str],
    category: str | None = None,
) -> Challenge | None:
    for challenge in shuffled:
        if challenge.id in taken:
            continue
        if category is None or challenge.category == category:
            return challenge
    return None
