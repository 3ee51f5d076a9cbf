"""Flat, id-deduplicated store of validation problems."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any, Optional, Union

from specedit.models import Selection, Severity, ValidationProblem, ValidationResult
from specedit.selection.problem_path import parse_problem_path

ProblemLike = Union[ValidationProblem, dict[str, Any]]


def _coerce(problem: ProblemLike) -> ValidationProblem:
    if isinstance(problem, ValidationProblem):
        return problem
    return ValidationProblem.model_validate(problem)


def problems_from_validation(result: ValidationResult) -> list[ValidationProblem]:
    """Turn minimal-validation messages into warning problems ``validation-{n}``.

    The structural checks do not report a location, so ``path`` is left
    empty.
    """
    return [
        ValidationProblem(id=f"validation-{index}", severity=Severity.WARNING, message=message)
        for index, message in enumerate(result.errors)
    ]


class ValidationStore:
    """Holds the problems reported for the current document.

    Problem ids are unique: adding a problem whose id is already present is
    a no-op. ``last_validated`` is stamped whenever a batch is added or the
    store is cleared.
    """

    def __init__(self) -> None:
        self._problems: list[ValidationProblem] = []
        self.is_validating: bool = False
        self.last_validated: Optional[datetime] = None

    @property
    def problems(self) -> tuple[ValidationProblem, ...]:
        return tuple(self._problems)

    def _ids(self) -> set[str]:
        return {problem.id for problem in self._problems}

    def add_problem(self, problem: ProblemLike) -> None:
        problem = _coerce(problem)
        if problem.id not in self._ids():
            self._problems.append(problem)

    def add_problems(self, problems: Iterable[ProblemLike]) -> None:
        seen = self._ids()
        for problem in map(_coerce, problems):
            if problem.id in seen:
                continue
            seen.add(problem.id)
            self._problems.append(problem)
        self.last_validated = datetime.now(timezone.utc)

    def remove_problem(self, problem_id: str) -> None:
        self._problems = [p for p in self._problems if p.id != problem_id]

    def clear_problems(self) -> None:
        self._problems = []
        self.last_validated = datetime.now(timezone.utc)

    def set_validating(self, is_validating: bool) -> None:
        self.is_validating = is_validating

    # --- Queries ---

    def problems_by_severity(self, severity: Severity) -> list[ValidationProblem]:
        return [p for p in self._problems if p.severity == severity]

    def problems_by_path(self, path: str) -> list[ValidationProblem]:
        return [p for p in self._problems if p.path == path]

    def error_count(self) -> int:
        return len(self.problems_by_severity(Severity.ERROR))

    def warning_count(self) -> int:
        return len(self.problems_by_severity(Severity.WARNING))

    def info_count(self) -> int:
        return len(self.problems_by_severity(Severity.INFO))

    def is_valid(self) -> bool:
        return self.error_count() == 0

    def selection_for_problem(self, problem: ValidationProblem) -> Selection:
        return parse_problem_path(problem.path)
