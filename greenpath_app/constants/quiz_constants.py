"""Quiz-related constants shared across core and server layers."""

OPTIONS_PER_QUESTION: int = 4
PARTIAL_CREDIT_FRACTION: float = 0.25
COUNTDOWN_TICK_SECONDS: float = 1.0
XP_PER_LEVEL: int = 500
PERFECT_SCORE: int = 100
