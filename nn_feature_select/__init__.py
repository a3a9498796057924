"""
nn_feature_select
=================
Wrapper feature subset selection driven by the leave-one-out accuracy of a
1-nearest-neighbor classifier.

Core idea
---------
**Evaluation**
    A feature subset S is scored by classifying every sample with the
    label of its nearest other sample (Euclidean distance over S) and
    counting how often that label is right::

        acc(S) = (number of correctly classified samples) / (total samples)

**Greedy search**
    Forward selection starts from no features and, in each of D rounds,
    adds the feature whose addition gives the highest accuracy.  Backward
    elimination starts from all D features and removes one per round.
    The best subset seen in any round is returned.

**Parallel rounds**
    All candidate subsets of a round are scored concurrently by a pool of
    worker threads created for that round.

Public API
----------
NearestNeighborFeatureSelector  – sklearn-compatible estimator
forward_selection               – forward search on a labeled data array
backward_elimination            – backward search on a labeled data array
run_search                      – either of the two, by direction
evaluate_round                  – score one round's candidates in parallel
loocv_accuracy                  – leave-one-out 1-NN accuracy of a subset
load_dataset, normalize_features – read and scale a data file
"""

from .candidates import Candidate, backward_candidates, forward_candidates, generate_candidates
from .data import load_dataset, normalize_features, parse_lines, read_data_file
from .dispatch import RoundResult, evaluate_round
from .exceptions import (
    CellParseWarning,
    EmptyDatasetError,
    FeatureSelectionError,
    FileOpenError,
    InvalidChoiceError,
    RaggedDatasetError,
)
from .metric import loocv_accuracy, nearest_neighbor_labels
from .report import ConsoleReporter
from .search import RoundRecord, SearchResult, backward_elimination, forward_selection, run_search
from .selector import NearestNeighborFeatureSelector

__all__ = [
    "Candidate",
    "CellParseWarning",
    "ConsoleReporter",
    "EmptyDatasetError",
    "FeatureSelectionError",
    "FileOpenError",
    "InvalidChoiceError",
    "NearestNeighborFeatureSelector",
    "RaggedDatasetError",
    "RoundRecord",
    "RoundResult",
    "SearchResult",
    "backward_candidates",
    "backward_elimination",
    "evaluate_round",
    "forward_candidates",
    "forward_selection",
    "generate_candidates",
    "load_dataset",
    "loocv_accuracy",
    "nearest_neighbor_labels",
    "normalize_features",
    "parse_lines",
    "read_data_file",
    "run_search",
]

__version__ = "0.1.0"
