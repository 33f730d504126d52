"""Service holding the read-only catalog of module quizzes."""

from __future__ import annotations

import logging
from pathlib import Path

from greenpath_app.constants.quiz_constants import OPTIONS_PER_QUESTION
from greenpath_app.core.models import ModuleQuiz, QuizQuestion
from greenpath_app.core.quiz_importer import load_quiz_from_file

logger = logging.getLogger(__name__)

DEFAULT_QUIZ_DIR = Path(__file__).resolve().parent.parent.parent / "data" / "quizzes"


class QuizCatalog:
    """Validated module quizzes, looked up by module id."""

    def __init__(self, quizzes: list[ModuleQuiz] | None = None) -> None:
        self._quizzes: dict[int, ModuleQuiz] = {}
        for quiz in quizzes or []:
            self.add_quiz(quiz)

    @classmethod
    def from_directory(cls, directory: Path = DEFAULT_QUIZ_DIR) -> "QuizCatalog":
        catalog = cls()
        for file_path in sorted(directory.glob("*.txt")):
            imported = load_quiz_from_file(file_path)
            catalog.add_quiz(imported.quiz)
        logger.info("Loaded %d module quizzes from %s", catalog.get_quiz_count(), directory)
        return catalog

    def add_quiz(self, quiz: ModuleQuiz) -> None:
        if quiz.module_id in self._quizzes:
            raise ValueError(f"Duplicate quiz for module {quiz.module_id}.")
        self._quizzes[quiz.module_id] = self._validate_quiz(quiz)

    def get_quiz(self, module_id: int) -> ModuleQuiz:
        try:
            return self._quizzes[module_id]
        except KeyError:
            raise KeyError(f"No quiz for module {module_id}") from None

    def has_quiz(self, module_id: int) -> bool:
        return module_id in self._quizzes

    def get_quizzes(self) -> list[ModuleQuiz]:
        """Return all quizzes ordered by module id."""
        return [self._quizzes[module_id] for module_id in sorted(self._quizzes)]

    def get_quiz_count(self) -> int:
        return len(self._quizzes)

    def _validate_quiz(self, quiz: ModuleQuiz) -> ModuleQuiz:
        if not quiz.questions:
            raise ValueError("Quiz must contain at least one question.")
        if not 0 <= quiz.passing_score <= 100:
            raise ValueError("Passing score must be between 0 and 100.")
        if quiz.xp_reward < 0:
            raise ValueError("XP reward cannot be negative.")
        if quiz.time_limit_seconds is not None and quiz.time_limit_seconds < 0:
            raise ValueError("Time limit cannot be negative.")
        for question in quiz.questions:
            self._validate_question(question)
        return quiz

    @staticmethod
    def _validate_question(question: QuizQuestion) -> None:
        if len(question.options) != OPTIONS_PER_QUESTION:
            raise ValueError("Each question must have exactly four options.")
        if any(not option.strip() for option in question.options):
            raise ValueError("Option text cannot be empty.")
        if not 0 <= question.correct_option_index < OPTIONS_PER_QUESTION:
            raise ValueError("Correct option index must be between 0 and 3.")
        if not question.prompt.strip():
            raise ValueError("Question text must not be empty.")
