"""Rounding that matches how scores are shown to students."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (12.5 -> 13).

    The builtin ``round`` uses banker's rounding, which would turn a 37.5 XP
    partial reward into 38 but a 12.5% score into 12.
    """
    return math.floor(value + 0.5)
