"""
nn_feature_select.plot
======================
Visualization helpers for a finished search.
"""

from __future__ import annotations

from typing import Optional

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches

from .candidates import FORWARD
from .search import RoundRecord, SearchResult


__all__ = ["plot_round_scores", "plot_search_trace"]


def plot_search_trace(
    result: SearchResult,
    *,
    title: Optional[str] = None,
    ax: Optional[plt.Axes] = None,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Line chart of each round's best accuracy, in execution order.

    Every candidate of a round is drawn as a faint dot behind the line, and
    the round that produced the best-so-far accuracy is marked in red.

    Parameters
    ----------
    result : SearchResult
        Output of :func:`~nn_feature_select.forward_selection` or
        :func:`~nn_feature_select.backward_elimination`.
    title : str, optional
    ax : matplotlib Axes, optional
    save_path : str, optional

    Returns
    -------
    matplotlib.figure.Figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 4))
    else:
        fig = ax.get_figure()

    steps = list(range(1, len(result.rounds) + 1))
    best_acc = [r.accuracy for r in result.rounds]

    for step, record in zip(steps, result.rounds):
        scores = [acc for _, acc in record.scores]
        ax.scatter([step] * len(scores), scores, color="#4C72B0",
                   alpha=0.25, s=14, zorder=2)

    ax.plot(steps, best_acc, color="#4C72B0", marker="o", linewidth=1.5, zorder=3)

    best_step = None
    for step, record in zip(steps, result.rounds):
        if record.level == result.best_level:
            best_step = step
    if best_step is not None:
        ax.scatter([best_step], [result.accuracy], color="#C44E52", s=70, zorder=4)

    verb = "added" if result.direction == FORWARD else "removed"
    ax.set_xticks(steps)
    ax.set_xticklabels(
        [f"L{r.level}\n{'-' if r.feature is None else r.feature}" for r in result.rounds],
        fontsize=8,
    )
    ax.set_xlabel(f"Level / feature {verb}", fontsize=11)
    ax.set_ylabel("LOOCV accuracy", fontsize=11)
    ax.set_ylim(0, 1.05)
    ax.set_title(title or f"{result.direction.capitalize()} search trace", fontsize=13)

    patch = mpatches.Patch(
        color="#C44E52",
        label=f"Best: {', '.join(map(str, result.selected))} ({result.accuracy:.4f})",
    )
    ax.legend(handles=[patch], fontsize=9, loc="lower right")

    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    return fig


def plot_round_scores(
    record: RoundRecord,
    *,
    title: Optional[str] = None,
    ax: Optional[plt.Axes] = None,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Bar chart of the candidate accuracies of one round.

    Bars are ordered by feature index; the chosen feature is drawn in red.

    Returns
    -------
    matplotlib.figure.Figure
    """
    scored = sorted(((c.feature, acc) for c, acc in record.scores))
    labels = [str(k) for k, _ in scored]
    scores = [acc for _, acc in scored]
    colors = ["#C44E52" if k == record.feature else "#4C72B0" for k, _ in scored]

    if ax is None:
        fig, ax = plt.subplots(figsize=(max(6, len(scored) * 0.5), 4))
    else:
        fig = ax.get_figure()

    bars = ax.bar(range(len(scored)), scores, color=colors, edgecolor="white", linewidth=0.5)
    ax.set_xticks(range(len(scored)))
    ax.set_xticklabels(labels, fontsize=8)
    ax.set_xlabel("Feature", fontsize=11)
    ax.set_ylabel("LOOCV accuracy", fontsize=11)
    ax.set_title(title or f"Level {record.level} candidates", fontsize=13)
    ax.set_ylim(0, 1.05)

    for bar, score in zip(bars, scores):
        ax.text(
            bar.get_x() + bar.get_width() / 2,
            bar.get_height() + 0.01,
            f"{score:.3f}",
            ha="center", va="bottom", fontsize=7,
        )

    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    return fig
