"""Utilities for exporting module quizzes to the plain-text import format."""

from __future__ import annotations

from pathlib import Path

from greenpath_app.core.models import ModuleQuiz, QuizQuestion

_OPTION_LETTERS = ("A", "B", "C", "D")


def save_quiz_to_file(file_path: Path, quiz: ModuleQuiz) -> None:
    """Persist the quiz to disk in the text import format."""

    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(serialize_quiz(quiz), encoding="utf-8")


def serialize_quiz(quiz: ModuleQuiz) -> str:
    if not quiz.questions:
        raise ValueError("Cannot export an empty quiz.")
    blocks = [_serialize_header(quiz)]
    blocks.extend(_serialize_question(question) for question in quiz.questions)
    return "\n\n---\n\n".join(blocks) + "\n"


def _serialize_header(quiz: ModuleQuiz) -> str:
    lines = [
        f"MODULE: {quiz.module_id}",
        f"TITLE: {quiz.title}",
    ]
    if quiz.description:
        lines.append(f"DESCRIPTION: {quiz.description}")
    lines.append(f"XP: {quiz.xp_reward}")
    lines.append(f"PASSING: {quiz.passing_score}")
    if quiz.time_limit_seconds is not None:
        lines.append(f"TIMELIMIT: {quiz.time_limit_seconds}")
    return "\n".join(lines)


def _serialize_question(question: QuizQuestion) -> str:
    lines: list[str] = []

    prompt_lines = question.prompt.splitlines() or [question.prompt]
    lines.append(f"Q: {prompt_lines[0]}")
    lines.extend(prompt_lines[1:])

    for idx, letter in enumerate(_OPTION_LETTERS):
        option_text = question.options[idx] if idx < len(question.options) else ""
        option_lines = option_text.splitlines() or [option_text]
        lines.append(f"{letter}: {option_lines[0]}")
        lines.extend(option_lines[1:])

    lines.append(f"CORRECT: {_OPTION_LETTERS[question.correct_option_index]}")

    if question.explanation:
        explanation_lines = question.explanation.splitlines()
        lines.append(f"EXPLANATION: {explanation_lines[0]}")
        lines.extend(explanation_lines[1:])

    return "\n".join(lines)
