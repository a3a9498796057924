"""
nn_feature_select.search
========================
Greedy round-based feature subset search.

Forward selection starts from the empty subset and adds one feature per
round; backward elimination starts from all features and removes one per
round.  Both run exactly D rounds (D = number of features) and remember the
best subset seen in *any* round, not only the last one.

A round whose best candidate does not beat 0.0 leaves the current subset
as it is; the round still counts towards the D rounds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .candidates import BACKWARD, DIRECTIONS, FORWARD, generate_candidates
from .dispatch import DEFAULT_N_JOBS, RoundResult, evaluate_round
from .metric import loocv_accuracy
from .report import ConsoleReporter


__all__ = [
    "RoundRecord",
    "SearchResult",
    "backward_elimination",
    "forward_selection",
    "run_search",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundRecord:
    """What happened on one level of the search tree."""

    level: int
    feature: Optional[int]
    accuracy: float
    scores: list = field(default_factory=list)


@dataclass
class SearchResult:
    """Final outcome of a search.

    Attributes
    ----------
    direction : str
        ``"forward"`` or ``"backward"``.
    selected : tuple of int
        Best subset found, in insertion order (forward) or remaining
        original order (backward).
    accuracy : float
        LOOCV accuracy of ``selected``.
    rounds : list of RoundRecord
        One record per round, in execution order.
    best_level : int or None
        Level at which ``selected`` was reached; ``None`` when it is the
        starting subset.
    """

    direction: str
    selected: tuple[int, ...]
    accuracy: float
    rounds: list[RoundRecord] = field(default_factory=list)
    best_level: Optional[int] = None


class _SearchState:
    """Subset bookkeeping owned by the controller thread."""

    def __init__(self, current: tuple[int, ...], best_accuracy: float):
        self.current = current
        self.best = current
        self.best_accuracy = best_accuracy
        self.best_level = None

    def apply(self, level: int, result: RoundResult) -> bool:
        """Move to the round winner; return whether one existed."""
        if result.candidate is None:
            return False
        self.current = result.candidate.features
        if result.accuracy > self.best_accuracy:
            self.best_accuracy = result.accuracy
            self.best = self.current
            self.best_level = level
        return True


def _n_features(data: np.ndarray) -> int:
    if data.ndim != 2 or data.shape[0] == 0:
        raise ValueError("data must be a non-empty 2-D array (label column first).")
    return data.shape[1] - 1


def _run_rounds(
    data: np.ndarray,
    state: _SearchState,
    direction: str,
    levels,
    n_jobs: int,
    tie_break: str,
    reporter: Optional[ConsoleReporter],
) -> SearchResult:
    n_features = _n_features(data)
    callback = reporter.candidate_evaluated if reporter is not None else None
    rounds = []

    for level in levels:
        if reporter is not None:
            reporter.level_started(level)

        candidates = generate_candidates(state.current, n_features, direction)
        result = evaluate_round(
            data, candidates, n_jobs, tie_break=tie_break, callback=callback,
        )

        if result.candidate is not None and reporter is not None:
            reporter.feature_chosen(level, result.candidate, result.accuracy)
        if not state.apply(level, result):
            logger.info("Level %d: no candidate scored above 0.0, subset unchanged", level)

        rounds.append(RoundRecord(level, result.feature, result.accuracy, result.scores))

    search_result = SearchResult(
        direction, state.best, state.best_accuracy, rounds, state.best_level,
    )
    if reporter is not None:
        reporter.finished(search_result)
    return search_result


def forward_selection(
    data: np.ndarray,
    *,
    n_jobs: int = DEFAULT_N_JOBS,
    tie_break: str = "first_come",
    reporter: Optional[ConsoleReporter] = None,
) -> SearchResult:
    """Greedy forward selection over the feature columns of ``data``.

    Parameters
    ----------
    data : array-like, shape (n_samples, n_features + 1)
        Dataset with the class label in column 0.
    n_jobs : int, default=4
        Worker threads per round.
    tie_break : {"first_come", "first_candidate"}
        See :func:`~nn_feature_select.dispatch.evaluate_round`.
    reporter : ConsoleReporter, optional
        Receives per-round progress and the final summary.

    Returns
    -------
    SearchResult
    """
    data_arr = np.asarray(data, dtype=float)
    n_features = _n_features(data_arr)
    logger.info(
        "Forward selection on %d samples, %d features", len(data_arr), n_features,
    )

    state = _SearchState((), 0.0)
    return _run_rounds(
        data_arr, state, FORWARD, range(1, n_features + 1),
        n_jobs, tie_break, reporter,
    )


def backward_elimination(
    data: np.ndarray,
    *,
    n_jobs: int = DEFAULT_N_JOBS,
    tie_break: str = "first_come",
    reporter: Optional[ConsoleReporter] = None,
) -> SearchResult:
    """Greedy backward elimination over the feature columns of ``data``.

    The best-so-far accuracy starts at the accuracy of the full feature set.
    Levels are numbered from D down to 1.  Parameters are the same as for
    :func:`forward_selection`.
    """
    data_arr = np.asarray(data, dtype=float)
    n_features = _n_features(data_arr)
    full_set = tuple(range(1, n_features + 1))
    full_accuracy = loocv_accuracy(data_arr, full_set)
    logger.info(
        "Backward elimination on %d samples, %d features (full set accuracy %.4f)",
        len(data_arr), n_features, full_accuracy,
    )

    state = _SearchState(full_set, full_accuracy)
    return _run_rounds(
        data_arr, state, BACKWARD, range(n_features, 0, -1),
        n_jobs, tie_break, reporter,
    )


def run_search(
    data: np.ndarray,
    direction: str = FORWARD,
    **kwargs,
) -> SearchResult:
    """Run :func:`forward_selection` or :func:`backward_elimination`."""
    if direction == FORWARD:
        return forward_selection(data, **kwargs)
    if direction == BACKWARD:
        return backward_elimination(data, **kwargs)
    raise ValueError(f"direction must be one of {DIRECTIONS}, got {direction!r}.")
