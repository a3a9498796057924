"""
nn_feature_select.dispatch
==========================
Parallel evaluation of one search round.

All candidates of a round go into a work queue up front.  A pool of worker
threads, created for this round only, drains it: a worker pops the next
candidate under the queue lock, scores it with
:func:`~nn_feature_select.metric.loocv_accuracy`, then takes the result
lock to record the score and to replace the round best when the new
accuracy is strictly greater.  A worker stops as soon as it sees the queue
empty.  The pool is joined before the :class:`RoundResult` is returned.

Tie resolution
--------------
``tie_break="first_come"``
    Candidates with the same maximal accuracy are decided by which worker
    reached the result lock first.  This depends on thread scheduling and
    is not reproducible between runs.
``tie_break="first_candidate"``
    After the pool is joined the recorded scores are reduced sequentially in
    candidate order, so the earliest enumerated candidate wins a tie.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

import numpy as np
from joblib import Parallel, delayed

from .candidates import Candidate
from .metric import loocv_accuracy


__all__ = [
    "DEFAULT_N_JOBS",
    "RoundResult",
    "TIE_BREAKS",
    "evaluate_round",
]

logger = logging.getLogger(__name__)

DEFAULT_N_JOBS = 4
TIE_BREAKS = ("first_come", "first_candidate")

Callback = Callable[[Candidate, float], None]


@dataclass(frozen=True)
class RoundResult:
    """Outcome of one round.

    Attributes
    ----------
    accuracy : float
        Best accuracy seen in the round, 0.0 if no candidate beat 0.0.
    candidate : Candidate or None
        The winning candidate, ``None`` if no candidate beat 0.0.
    scores : list of (Candidate, float)
        Every candidate with its accuracy, in evaluation order.
    """

    accuracy: float = 0.0
    candidate: Optional[Candidate] = None
    scores: list[tuple[Candidate, float]] = field(default_factory=list)

    @property
    def feature(self) -> Optional[int]:
        """Feature added or removed by the winner, if any."""
        return None if self.candidate is None else self.candidate.feature


class _RoundBest:
    """Round-level best record guarded by its own lock."""

    def __init__(self, callback: Optional[Callback] = None):
        self._lock = threading.Lock()
        self._callback = callback
        self.accuracy = 0.0
        self.candidate: Optional[Candidate] = None
        self.scores: list[tuple[Candidate, float]] = []

    def record(self, candidate: Candidate, accuracy: float) -> None:
        with self._lock:
            self.scores.append((candidate, accuracy))
            if self._callback is not None:
                self._callback(candidate, accuracy)
            if accuracy > self.accuracy:
                self.accuracy = accuracy
                self.candidate = candidate


def _drain(
    data: np.ndarray,
    queue: deque,
    queue_lock: threading.Lock,
    best: _RoundBest,
) -> int:
    """Worker body: evaluate queued candidates until the queue is empty."""
    n_done = 0
    while True:
        with queue_lock:
            if not queue:
                break
            candidate = queue.popleft()
        accuracy = loocv_accuracy(data, candidate.features)
        best.record(candidate, accuracy)
        n_done += 1
    return n_done


def evaluate_round(
    data: np.ndarray,
    candidates: Sequence[Candidate],
    n_jobs: int = DEFAULT_N_JOBS,
    *,
    tie_break: str = "first_come",
    callback: Optional[Callback] = None,
) -> RoundResult:
    """Evaluate every candidate of a round in parallel and keep the best.

    Parameters
    ----------
    data : array-like, shape (n_samples, n_features + 1)
        Dataset with the class label in column 0.  Shared read-only by all
        workers.
    candidates : sequence of Candidate
        The round's candidates.  Each one is evaluated exactly once.
    n_jobs : int, default=4
        Number of worker threads in the round's pool.
    tie_break : {"first_come", "first_candidate"}, default="first_come"
        How equal maximal accuracies are resolved (see module docstring).
    callback : callable, optional
        ``callback(candidate, accuracy)`` is invoked for every evaluated
        candidate while the result lock is held, so calls never overlap.

    Returns
    -------
    RoundResult
    """
    if n_jobs < 1:
        raise ValueError(f"n_jobs must be >= 1, got {n_jobs}.")
    if tie_break not in TIE_BREAKS:
        raise ValueError(f"tie_break must be one of {TIE_BREAKS}, got {tie_break!r}.")

    data_arr = np.asarray(data, dtype=float)
    candidates = list(candidates)
    queue = deque(candidates)
    queue_lock = threading.Lock()
    best = _RoundBest(callback)

    n_workers = min(n_jobs, len(queue))
    if n_workers == 0:
        return RoundResult()

    start = time.perf_counter()
    Parallel(n_jobs=n_workers, backend="threading")(
        delayed(_drain)(data_arr, queue, queue_lock, best)
        for _ in range(n_workers)
    )
    logger.debug(
        "Evaluated %d candidates with %d workers in %.3fs",
        len(best.scores), n_workers, time.perf_counter() - start,
    )

    if tie_break == "first_candidate":
        return _reduce_in_order(candidates, best.scores)
    return RoundResult(best.accuracy, best.candidate, list(best.scores))


def _reduce_in_order(
    candidates: Sequence[Candidate],
    scores: list[tuple[Candidate, float]],
) -> RoundResult:
    """Sequential reduction: first candidate with a strictly greater score wins."""
    by_candidate = dict(scores)
    best_accuracy = 0.0
    best_candidate = None
    for candidate in candidates:
        accuracy = by_candidate[candidate]
        if accuracy > best_accuracy:
            best_accuracy = accuracy
            best_candidate = candidate
    return RoundResult(best_accuracy, best_candidate, list(scores))
