"""Static metadata describing GreenPath."""

APP_NAME = "GreenPath"
APP_VERSION = "0.1"
APP_ABOUT_TEXT = (
    "GreenPath is a gamified sustainability course: students take module quizzes and "
    "daily eco challenges to earn XP, badges and streaks, while faculty track "
    "attendance and set learning goals."
)
