"""
nn_feature_select.metric
========================
Leave-one-out accuracy of a 1-nearest-neighbor classifier on a feature
subset.

A dataset is a 2-D array whose column 0 holds the class label and whose
columns 1..D hold feature values.  For a subset S of those feature columns
each sample i is classified by the label of its nearest other sample::

    pred(i) = label(argmin_{k != i} ||x_i[S] - x_k[S]||_2)

    acc(S)  = (1 / n) * Σ_i 1[ pred(i) == label(i) ]

Computational notes
-------------------
* Pairwise distances come from SciPy's ``cdist`` in one call, O(n² |S|).
* Ties are broken towards the lowest row index: ``np.argmin`` returns the
  first occurrence of the minimum, which is what a scan over k that only
  accepts a new minimum on strict ``<`` would choose.
* Labels are compared as integers (truncated toward zero).
* Only finite distances count.  A sample whose distances to all others
  overflow (or a lone sample) has no neighbor and is misclassified.
* With an empty subset every distance is 0, so each sample takes the label
  of the first other row.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.spatial.distance import cdist


__all__ = ["loocv_accuracy", "nearest_neighbor_labels"]


LABEL_COLUMN = 0
NO_NEIGHBOR = -1


# ---------------------------------------------------------------------------
# Public functions
# ---------------------------------------------------------------------------

def loocv_accuracy(
    data: np.ndarray,
    feature_indices: Sequence[int] = (),
) -> float:
    """Leave-one-out 1-NN accuracy restricted to ``feature_indices``.

    Parameters
    ----------
    data : array-like, shape (n_samples, n_features + 1)
        Dataset with the class label in column 0.
    feature_indices : sequence of int
        Feature columns (1-based, i.e. columns of ``data``) to measure
        distance on.  Order is irrelevant.

    Returns
    -------
    float
        Accuracy in [0, 1].  A sample without any other sample at a finite
        distance counts as misclassified.

    Raises
    ------
    ValueError
        If ``data`` has no samples.

    Examples
    --------
    >>> import numpy as np
    >>> from nn_feature_select import loocv_accuracy
    >>> data = np.array([[0, 0.], [1, 10.], [0, 1.], [1, 9.]])
    >>> loocv_accuracy(data, [1])
    1.0
    """
    data_arr = np.asarray(data, dtype=float)
    n_samples = len(data_arr)
    if n_samples == 0:
        raise ValueError("Cannot compute accuracy on a dataset with no samples.")

    labels = data_arr[:, LABEL_COLUMN].astype(int)
    nearest, found = _nearest_rows(data_arr, feature_indices)
    correct = found & (labels[nearest] == labels)
    return float(np.count_nonzero(correct)) / n_samples


def nearest_neighbor_labels(
    data: np.ndarray,
    feature_indices: Sequence[int] = (),
) -> np.ndarray:
    """Label of each sample's nearest other sample.

    Parameters
    ----------
    data : array-like, shape (n_samples, n_features + 1)
        Dataset with the class label in column 0.
    feature_indices : sequence of int
        Feature columns to measure distance on.

    Returns
    -------
    predicted : np.ndarray of int, shape (n_samples,)
        ``NO_NEIGHBOR`` (-1) for a sample with no other sample at a finite
        distance, e.g. a lone sample or one whose distances overflow.
    """
    data_arr = np.asarray(data, dtype=float)
    labels = data_arr[:, LABEL_COLUMN].astype(int)
    nearest, found = _nearest_rows(data_arr, feature_indices)
    return np.where(found, labels[nearest], NO_NEIGHBOR)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _pairwise_distances(data: np.ndarray, feature_indices: Sequence[int]) -> np.ndarray:
    """Euclidean distance matrix over the selected columns."""
    columns = list(feature_indices)
    n_samples = len(data)
    if not columns:
        return np.zeros((n_samples, n_samples), dtype=float)

    X_sub = data[:, columns]
    return cdist(X_sub, X_sub, metric="euclidean")


def _nearest_rows(
    data: np.ndarray,
    feature_indices: Sequence[int],
) -> tuple[np.ndarray, np.ndarray]:
    """Row index of each sample's nearest other sample, and whether it exists.

    The sample itself never qualifies, and neither does a row at infinite
    or undefined distance.
    """
    n_samples = len(data)
    if n_samples < 2:
        return np.zeros(n_samples, dtype=int), np.zeros(n_samples, dtype=bool)

    distances = _pairwise_distances(data, feature_indices)
    distances[~np.isfinite(distances)] = np.inf
    np.fill_diagonal(distances, np.inf)
    nearest = np.argmin(distances, axis=1)
    found = np.isfinite(distances[np.arange(n_samples), nearest])
    return nearest, found
