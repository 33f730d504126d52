"""Utilities for importing module quizzes from a human-friendly text file.

File format: a header block followed by question blocks, separated by blank
lines or '---':

    MODULE: 1
    TITLE: Recycling Basics Quiz
    DESCRIPTION: Test your knowledge on proper recycling practices
    XP: 100
    PASSING: 70
    TIMELIMIT: 300      (optional, seconds for the whole quiz)

    ---

    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.
    A: First option text
    B: Second option text
    C: Third option text
    D: Fourth option text
    CORRECT: A|B|C|D
    EXPLANATION: Shown after the student answers (optional, may span lines).

Architecture note:
    Quizzes ship with the application as text files so faculty can review and
    edit them without touching code. The parsing logic stays isolated here so
    a database-backed catalog can replace the files without touching the
    session or server code.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from greenpath_app.core.models import ModuleQuiz, QuizQuestion


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


@dataclass(slots=True)
class ImportedQuiz:
    """Container for an imported quiz and the file it came from."""

    source_path: Path | None
    quiz: ModuleQuiz


_OPTION_ORDER = ["A", "B", "C", "D"]
_HEADER_KEYS = ("MODULE", "TITLE", "DESCRIPTION", "XP", "PASSING", "TIMELIMIT")


def load_quiz_from_file(file_path: Path) -> ImportedQuiz:
    text = file_path.read_text(encoding="utf-8")
    try:
        quiz = parse_quiz_text(text)
    except QuizImportError as exc:
        raise QuizImportError(f"{file_path.name}: {exc}") from exc
    return ImportedQuiz(source_path=file_path, quiz=quiz)


def parse_quiz_text(text: str) -> ModuleQuiz:
    blocks = _split_blocks(text)
    if not blocks:
        raise QuizImportError("Quiz file is empty.")

    header = _parse_header(blocks[0])
    questions = [
        _parse_block(block, question_id=position)
        for position, block in enumerate(blocks[1:], start=1)
    ]
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")

    return ModuleQuiz(
        module_id=header["MODULE"],
        title=header["TITLE"],
        description=header.get("DESCRIPTION", ""),
        questions=questions,
        xp_reward=header["XP"],
        passing_score=header["PASSING"],
        time_limit_seconds=header.get("TIMELIMIT"),
    )


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            # Blank line encountered after content - finalize current block
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return [block for block in blocks if block]


def _parse_header(block: str) -> dict:
    values: dict = {}
    for raw_line in block.splitlines():
        line = raw_line.strip()
        key, separator, raw_value = line.partition(":")
        key = key.strip().upper()
        if not separator or key not in _HEADER_KEYS:
            raise QuizImportError(f"Unknown quiz header line: '{line}'.")
        raw_value = raw_value.strip()
        if key in ("TITLE", "DESCRIPTION"):
            values[key] = raw_value
        else:
            values[key] = _parse_int(key, raw_value)

    for required in ("MODULE", "TITLE", "XP", "PASSING"):
        if required not in values:
            raise QuizImportError(f"Quiz header is missing {required}.")
    if not values["TITLE"]:
        raise QuizImportError("TITLE cannot be empty.")
    if values["XP"] < 0:
        raise QuizImportError("XP cannot be negative.")
    if not 0 <= values["PASSING"] <= 100:
        raise QuizImportError("PASSING must be a percentage between 0 and 100.")
    if "TIMELIMIT" in values and values["TIMELIMIT"] < 0:
        raise QuizImportError("TIMELIMIT cannot be negative.")
    return values


def _parse_int(key: str, raw_value: str) -> int:
    if not raw_value:
        raise QuizImportError(f"{key} must include an integer value.")
    try:
        return int(raw_value)
    except ValueError as exc:
        raise QuizImportError(f"{key} must be an integer.") from exc


def _parse_block(block: str, question_id: int) -> QuizQuestion:
    question_lines: list[str] = []
    explanation_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if upper.startswith("EXPLANATION:"):
            explanation_lines = [line.split(":", 1)[1].strip()]
            current_section = "EXPLANATION"
            continue

        if len(line) > 2 and line[0].upper() in _OPTION_ORDER and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section == "EXPLANATION":
            explanation_lines.append(line)
        elif current_section in _OPTION_ORDER:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    if not question_lines:
        raise QuizImportError("Question text missing (Q: ...)")
    if len(options) != 4:
        raise QuizImportError("Each question must define exactly four options (A-D).")

    option_list = [options.get(letter, "").strip() for letter in _OPTION_ORDER]
    if any(not opt for opt in option_list):
        raise QuizImportError("Option text cannot be empty.")

    if correct_letter is None:
        raise QuizImportError("Each question needs a CORRECT line.")
    if correct_letter not in _OPTION_ORDER:
        raise QuizImportError("CORRECT must be one of A, B, C, or D.")

    prompt = "\n".join(question_lines).strip()
    if not prompt:
        raise QuizImportError("Question text cannot be empty.")

    return QuizQuestion(
        id=question_id,
        prompt=prompt,
        options=option_list,
        correct_option_index=_OPTION_ORDER.index(correct_letter),
        explanation="\n".join(explanation_lines).strip(),
    )
