"""
Example 3 – Scoring Subsets Directly
====================================
Sometimes you just want the leave-one-out 1-NN accuracy of a few subsets,
or one round of parallel evaluation, without running a whole search.
"""

import numpy as np

from nn_feature_select import evaluate_round, forward_candidates, loocv_accuracy

# ---------------------------------------------------------------------------
# Synthetic dataset: 2 informative features + 2 noise features
# ---------------------------------------------------------------------------
rng = np.random.default_rng(0)
n   = 200

labels = np.array([0] * (n // 2) + [1] * (n // 2), dtype=float)
data = np.column_stack([
    labels,
    np.vstack([rng.normal([0, 0], 0.6, (n // 2, 2)),
               rng.normal([2, 2], 0.6, (n // 2, 2))]),   # informative
    rng.normal(0, 1, (n, 2)),                              # noise
])

print("Feature indices: 1,2 = informative | 3,4 = noise\n")

for subset in [(1, 2), (3, 4), (1, 3), (2, 4), (1, 2, 3, 4)]:
    print(f"  acc{subset} = {loocv_accuracy(data, subset):.4f}")

# ---------------------------------------------------------------------------
# One round of forward selection, evaluated in parallel
# ---------------------------------------------------------------------------
print("\nFirst forward round:")
result = evaluate_round(data, forward_candidates((), 4), n_jobs=4)
for cand, acc in sorted(result.scores, key=lambda t: t[0].feature):
    print(f"  feature {cand.feature}: {acc:.4f}")
print(f"Winner: feature {result.feature} ({result.accuracy:.4f})")
