"""
Example 1 – Iris (Forward Selection)
====================================
Runs greedy forward selection on the Iris data with a pure-noise column
appended, printing the round-by-round report.

Dataset : Iris (4 features + 1 noise feature, 3 classes, 150 samples)
Score   : leave-one-out 1-NN accuracy
"""

import numpy as np
from sklearn.datasets import load_iris

from nn_feature_select import ConsoleReporter, forward_selection, normalize_features
from nn_feature_select.plot import plot_round_scores, plot_search_trace

# ---------------------------------------------------------------------------
# 1. Build the labeled data array (label in column 0)
# ---------------------------------------------------------------------------
X, y = load_iris(return_X_y=True)
rng = np.random.default_rng(0)
noise = rng.normal(0, 1, (len(X), 1))

data = np.column_stack([y, X, noise])
normalize_features(data)

print(f"Dataset: {data.shape[0]} samples, {data.shape[1] - 1} features (feature 5 = noise)\n")

# ---------------------------------------------------------------------------
# 2. Forward selection
# ---------------------------------------------------------------------------
result = forward_selection(data, n_jobs=4, reporter=ConsoleReporter())

# ---------------------------------------------------------------------------
# 3. Visualise
# ---------------------------------------------------------------------------
plot_search_trace(result, title="Iris – forward selection", save_path="example1_trace.png")
plot_round_scores(result.rounds[0], save_path="example1_level1.png")

print("\nPlots saved: example1_trace.png, example1_level1.png")
