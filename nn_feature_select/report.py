"""
nn_feature_select.report
========================
Console progress report for a running search.

The line format is part of the program's observable output::

    On level 1 of the search tree
    --Considering adding the feature at index 2
    --Accuracy with feature 2: 0.7500
    On level 1, added feature 2 (Accuracy: 0.7500)

    Best set of selected features: 2
    Best accuracy achieved: 0.7500
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Optional, TextIO

from .candidates import FORWARD, Candidate

if TYPE_CHECKING:
    from .search import SearchResult


__all__ = ["ConsoleReporter", "format_feature_list"]


def format_feature_list(features) -> str:
    """``(3, 1, 4)`` -> ``"3, 1, 4"``."""
    return ", ".join(str(k) for k in features)


class ConsoleReporter:
    """Prints per-round diagnostics and the final summary.

    Parameters
    ----------
    stream : file-like, optional
        Where to write.  Defaults to ``sys.stdout`` at the time of writing.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def _print(self, text: str = "") -> None:
        print(text, file=self.stream if self.stream is not None else sys.stdout)

    def level_started(self, level: int) -> None:
        self._print(f"On level {level} of the search tree")

    def candidate_evaluated(self, candidate: Candidate, accuracy: float) -> None:
        k = candidate.feature
        if candidate.direction == FORWARD:
            self._print(f"--Considering adding the feature at index {k}")
            self._print(f"--Accuracy with feature {k}: {accuracy:.4f}")
        else:
            self._print(f"--Considering removing the feature at index {k}")
            self._print(f"--Accuracy without feature {k}: {accuracy:.4f}")

    def feature_chosen(self, level: int, candidate: Candidate, accuracy: float) -> None:
        verb = "added" if candidate.direction == FORWARD else "removed"
        self._print(
            f"On level {level}, {verb} feature {candidate.feature} "
            f"(Accuracy: {accuracy:.4f})"
        )

    def finished(self, result: "SearchResult") -> None:
        self._print()
        self._print(f"Best set of selected features: {format_feature_list(result.selected)}")
        self._print(f"Best accuracy achieved: {result.accuracy:.4f}")
