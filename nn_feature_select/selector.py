"""
nn_feature_select.selector
==========================
Scikit-learn compatible estimator around the greedy nearest-neighbor search.

The estimator follows the standard sklearn API:

    selector = NearestNeighborFeatureSelector(direction="forward", n_jobs=4)
    selector.fit(X_train, y_train)
    X_reduced = selector.transform(X_train)

Column indices exposed by the estimator are 0-based columns of ``X``; the
underlying :class:`~nn_feature_select.search.SearchResult` keeps the 1-based
feature numbering used in the console report.
"""

from __future__ import annotations

import numpy as np
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.preprocessing import LabelEncoder
from sklearn.utils.validation import check_is_fitted

from .candidates import DIRECTIONS
from .dispatch import DEFAULT_N_JOBS, TIE_BREAKS
from .report import ConsoleReporter
from .search import run_search


__all__ = ["NearestNeighborFeatureSelector"]


class NearestNeighborFeatureSelector(TransformerMixin, BaseEstimator):
    """Wrapper feature selector scored by leave-one-out 1-NN accuracy.

    Each round evaluates every one-feature extension (forward) or
    one-feature reduction (backward) of the current subset in parallel and
    moves to the most accurate one.  After as many rounds as there are
    features the best subset seen in any round is selected.

    Parameters
    ----------
    direction : {"forward", "backward"}, default="forward"
        Search strategy.
    n_jobs : int, default=4
        Worker threads used to evaluate the candidates of a round.
    tie_break : {"first_come", "first_candidate"}, default="first_come"
        ``"first_come"`` keeps whichever tied candidate finished first
        (scheduling dependent); ``"first_candidate"`` keeps the earliest
        enumerated one.
    verbose : int, default=0
        Verbosity level (0 = silent, 1 = per-round console report).

    Attributes
    ----------
    selected_features_ : tuple of int
        0-based columns of ``X`` in the selected subset, in selection order.
    accuracy_ : float
        LOOCV 1-NN accuracy of the selected subset.
    search_result_ : SearchResult
        Full round-by-round record of the search.
    n_features_in_ : int
        Number of features seen during fit.
    classes_ : np.ndarray
        Class labels seen during fit.

    Examples
    --------
    >>> from sklearn.datasets import load_iris
    >>> from nn_feature_select import NearestNeighborFeatureSelector
    >>>
    >>> X, y = load_iris(return_X_y=True)
    >>> selector = NearestNeighborFeatureSelector(tie_break="first_candidate")
    >>> selector.fit(X, y)
    NearestNeighborFeatureSelector(...)
    >>> selector.transform(X).shape[0]
    150
    """

    def __init__(
        self,
        direction: str = "forward",
        n_jobs: int = DEFAULT_N_JOBS,
        tie_break: str = "first_come",
        verbose: int = 0,
    ):
        self.direction = direction
        self.n_jobs    = n_jobs
        self.tie_break = tie_break
        self.verbose   = verbose

    # ------------------------------------------------------------------
    # sklearn API
    # ------------------------------------------------------------------

    def fit(self, X: np.ndarray, y: np.ndarray) -> "NearestNeighborFeatureSelector":
        """Run the search on ``X`` with labels ``y``.

        Parameters
        ----------
        X : array-like, shape (n_samples, n_features)
            Training data.
        y : array-like, shape (n_samples,)
            Class labels of any type; they are encoded to integers.

        Returns
        -------
        self
        """
        X_arr = np.asarray(X, dtype=float)
        y_arr = np.asarray(y)
        self._validate_params(X_arr, y_arr)
        self.n_features_in_ = X_arr.shape[1]

        encoder = LabelEncoder()
        y_codes = encoder.fit_transform(y_arr)
        self.classes_ = encoder.classes_

        data = np.column_stack([y_codes.astype(float), X_arr])
        reporter = ConsoleReporter() if self.verbose >= 1 else None
        result = run_search(
            data,
            self.direction,
            n_jobs=self.n_jobs,
            tie_break=self.tie_break,
            reporter=reporter,
        )

        self.search_result_     = result
        self.selected_features_ = tuple(k - 1 for k in result.selected)
        self.accuracy_          = result.accuracy
        return self

    def transform(self, X: np.ndarray) -> np.ndarray:
        """Project X onto the selected feature subset.

        Parameters
        ----------
        X : array-like, shape (n_samples, n_features)

        Returns
        -------
        X_reduced : np.ndarray, shape (n_samples, len(selected_features_))
        """
        check_is_fitted(self, "selected_features_")
        X_arr = np.asarray(X, dtype=float)
        return X_arr[:, list(self.selected_features_)]

    def get_support(self, indices: bool = False):
        """Return a mask or indices of the selected features.

        Parameters
        ----------
        indices : bool, default=False
            If ``True``, return indices; otherwise return a boolean mask.

        Returns
        -------
        mask : np.ndarray of bool, or np.ndarray of int
        """
        check_is_fitted(self, "selected_features_")
        mask = np.zeros(self.n_features_in_, dtype=bool)
        mask[list(self.selected_features_)] = True
        if indices:
            return np.where(mask)[0]
        return mask

    def get_feature_names_out(self, input_features=None):
        """Get feature names for the selected features, in selection order."""
        check_is_fitted(self, "selected_features_")
        if input_features is None:
            input_features = [f"x{i}" for i in range(self.n_features_in_)]
        return np.array([input_features[i] for i in self.selected_features_], dtype=object)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _validate_params(self, X: np.ndarray, y: np.ndarray):
        if X.ndim != 2:
            raise ValueError(f"X must be 2-D, got shape {X.shape}.")
        if len(X) == 0:
            raise ValueError("X must contain at least one sample.")
        if y.shape != (len(X),):
            raise ValueError(
                f"y must have shape ({len(X)},), got {y.shape}."
            )
        if self.direction not in DIRECTIONS:
            raise ValueError(f"direction must be one of {DIRECTIONS}.")
        if self.tie_break not in TIE_BREAKS:
            raise ValueError(f"tie_break must be one of {TIE_BREAKS}.")
        if self.n_jobs < 1:
            raise ValueError("n_jobs must be >= 1.")

    def summary(self) -> str:
        """Return a human-readable summary of the fitted selector."""
        check_is_fitted(self, "selected_features_")
        result = self.search_result_
        productive = sum(1 for r in result.rounds if r.feature is not None)
        lines = [
            "NearestNeighborFeatureSelector – fit summary",
            f"  n_features_in          : {self.n_features_in_}",
            f"  direction              : {self.direction}",
            f"  rounds (productive)    : {len(result.rounds)} ({productive})",
            f"  selected features      : {self.selected_features_}",
            f"  LOOCV 1-NN accuracy    : {self.accuracy_:.4f}",
        ]
        return "\n".join(lines)
