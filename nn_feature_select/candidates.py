"""
nn_feature_select.candidates
============================
Enumeration of the candidate feature subsets examined in one search round.
"""

from __future__ import annotations

from dataclasses import dataclass


__all__ = [
    "BACKWARD",
    "Candidate",
    "DIRECTIONS",
    "FORWARD",
    "backward_candidates",
    "forward_candidates",
    "generate_candidates",
]


FORWARD = "forward"
BACKWARD = "backward"
DIRECTIONS = (FORWARD, BACKWARD)


@dataclass(frozen=True)
class Candidate:
    """A feature subset proposed for evaluation.

    Attributes
    ----------
    features : tuple of int
        The subset to evaluate.
    feature : int
        Feature added to (forward) or removed from (backward) the current
        subset to obtain ``features``.
    direction : str
        ``"forward"`` or ``"backward"``.
    """

    features: tuple[int, ...]
    feature: int
    direction: str = FORWARD


def forward_candidates(current: tuple[int, ...], n_features: int) -> list[Candidate]:
    """One candidate per feature in ``[1, n_features]`` not already in ``current``."""
    present = set(current)
    return [
        Candidate(tuple(current) + (k,), k, FORWARD)
        for k in range(1, n_features + 1)
        if k not in present
    ]


def backward_candidates(current: tuple[int, ...]) -> list[Candidate]:
    """One candidate per position in ``current``, with that feature dropped."""
    current = tuple(current)
    return [
        Candidate(current[:pos] + current[pos + 1:], k, BACKWARD)
        for pos, k in enumerate(current)
    ]


def generate_candidates(
    current: tuple[int, ...],
    n_features: int,
    direction: str,
) -> list[Candidate]:
    """Candidates for the next round in the given search direction."""
    if direction == FORWARD:
        return forward_candidates(current, n_features)
    if direction == BACKWARD:
        return backward_candidates(current)
    raise ValueError(
        f"direction must be one of {DIRECTIONS}, got {direction!r}."
    )
