"""Editor focus: the selection store and the problem-path mapper."""

from specedit.selection.problem_path import parse_problem_path
from specedit.selection.store import SelectionStore

__all__ = ["SelectionStore", "parse_problem_path"]
