"""Badge definitions and progress evaluation."""

from __future__ import annotations

from dataclasses import dataclass

from greenpath_app.core.models import StudentProfile


@dataclass(frozen=True, slots=True)
class Achievement:
    id: str
    name: str
    description: str
    category: str  # quiz | xp | streak | special
    tier: str  # bronze | silver | gold | platinum
    requirement_type: str
    requirement_value: int
    xp_reward: int
    module_id: int | None = None


@dataclass(frozen=True, slots=True)
class AchievementProgress:
    achievement: Achievement
    current: int
    target: int
    percentage: float
    unlocked: bool


@dataclass(frozen=True, slots=True)
class AchievementSummary:
    total: int
    unlocked: int
    xp_from_badges: int


CATEGORY_LABELS: dict[str, str] = {
    "quiz": "Quiz Mastery",
    "xp": "Experience",
    "streak": "Consistency",
    "special": "Special",
}

ACHIEVEMENTS: tuple[Achievement, ...] = (
    Achievement("first_quiz", "First Steps", "Complete your first quiz", "quiz", "bronze", "quizzes_completed", 1, 25),
    Achievement("quiz_explorer", "Quiz Explorer", "Complete 3 different quizzes", "quiz", "bronze", "quizzes_completed", 3, 50),
    Achievement("knowledge_seeker", "Knowledge Seeker", "Complete 5 different quizzes", "quiz", "silver", "quizzes_completed", 5, 100),
    Achievement("eco_scholar", "Eco Scholar", "Complete all 8 quizzes", "quiz", "gold", "quizzes_completed", 8, 250),
    Achievement("perfectionist", "Perfectionist", "Get a perfect score on any quiz", "quiz", "silver", "perfect_score", 1, 75),
    Achievement("flawless_five", "Flawless Five", "Get perfect scores on 5 quizzes", "quiz", "gold", "perfect_score", 5, 200),
    Achievement("master_mind", "Master Mind", "Get perfect scores on all 8 quizzes", "quiz", "platinum", "perfect_score", 8, 500),
    Achievement("xp_starter", "Getting Started", "Earn 100 XP", "xp", "bronze", "total_xp", 100, 10),
    Achievement("xp_rising", "Rising Star", "Earn 500 XP", "xp", "bronze", "total_xp", 500, 25),
    Achievement("xp_dedicated", "Dedicated Learner", "Earn 1,000 XP", "xp", "silver", "total_xp", 1000, 50),
    Achievement("xp_champion", "Eco Champion", "Earn 2,500 XP", "xp", "gold", "total_xp", 2500, 100),
    Achievement("xp_legend", "Sustainability Legend", "Earn 5,000 XP", "xp", "platinum", "total_xp", 5000, 250),
    Achievement("streak_3", "Getting Consistent", "Maintain a 3-day learning streak", "streak", "bronze", "streak_days", 3, 30),
    Achievement("streak_7", "Week Warrior", "Maintain a 7-day learning streak", "streak", "silver", "streak_days", 7, 75),
    Achievement("streak_30", "Monthly Master", "Maintain a 30-day learning streak", "streak", "gold", "streak_days", 30, 200),
    Achievement("streak_100", "Unstoppable", "Maintain a 100-day learning streak", "streak", "platinum", "streak_days", 100, 500),
    Achievement("recycling_master", "Recycling Master", "Complete the Recycling Basics quiz with a perfect score", "special", "silver", "module_complete", 100, 50, module_id=1),
    Achievement("energy_expert", "Energy Expert", "Complete the Energy Efficiency quiz with a perfect score", "special", "silver", "module_complete", 100, 50, module_id=2),
    Achievement("water_guardian", "Water Guardian", "Complete the Water Conservation quiz with a perfect score", "special", "silver", "module_complete", 100, 50, module_id=4),
    Achievement("green_architect", "Green Architect", "Complete the Green Home quiz with a perfect score", "special", "silver", "module_complete", 100, 50, module_id=5),
    Achievement("eco_driver", "Eco Driver", "Complete the Eco Transportation quiz with a perfect score", "special", "silver", "module_complete", 100, 50, module_id=6),
    Achievement("conscious_eater", "Conscious Eater", "Complete the Sustainable Diet quiz with a perfect score", "special", "silver", "module_complete", 100, 50, module_id=7),
    Achievement("zero_waste_hero", "Zero Waste Hero", "Complete the Zero Waste Living quiz with a perfect score", "special", "gold", "module_complete", 100, 100, module_id=8),
    Achievement("planet_lover", "Planet Lover", "Earn all module-specific badges", "special", "platinum", "quizzes_completed", 8, 300),
)


def current_value(achievement: Achievement, profile: StudentProfile) -> int:
    kind = achievement.requirement_type
    if kind == "quizzes_completed":
        return profile.quizzes_completed
    if kind == "perfect_score":
        return profile.perfect_scores
    if kind == "total_xp":
        return profile.total_xp
    if kind == "streak_days":
        return profile.current_streak
    if kind == "module_complete" and achievement.module_id is not None:
        return profile.module_scores.get(achievement.module_id, 0)
    return 0


def evaluate_achievements(
    profile: StudentProfile,
    achievements: tuple[Achievement, ...] = ACHIEVEMENTS,
    category: str | None = None,
) -> list[AchievementProgress]:
    progress: list[AchievementProgress] = []
    for achievement in achievements:
        if category is not None and achievement.category != category:
            continue
        current = current_value(achievement, profile)
        target = achievement.requirement_value
        percentage = min(current / target * 100, 100.0) if target > 0 else 100.0
        progress.append(
            AchievementProgress(
                achievement=achievement,
                current=current,
                target=target,
                percentage=percentage,
                unlocked=current >= target,
            )
        )
    return progress


def summarize(progress: list[AchievementProgress]) -> AchievementSummary:
    unlocked = [p for p in progress if p.unlocked]
    return AchievementSummary(
        total=len(progress),
        unlocked=len(unlocked),
        xp_from_badges=sum(p.achievement.xp_reward for p in unlocked),
    )
