"""Daily challenge constants."""

# Rotation order used by the daily selector; changing it changes every day's picks.
CHALLENGE_CATEGORIES: tuple[str, ...] = (
    "water",
    "energy",
    "waste",
    "transport",
    "food",
    "lifestyle",
)
CHALLENGE_DIFFICULTIES: tuple[str, ...] = ("easy", "medium", "hard")
DAILY_CHALLENGE_COUNT: int = 3
DAILY_BONUS_XP: int = 50
