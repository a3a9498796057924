"""
Example 2 – Backward Elimination & sklearn Pipeline
===================================================
Demonstrates:
  * Backward elimination through the sklearn-compatible estimator
  * Deterministic tie resolution with ``tie_break="first_candidate"``
  * Integration with a scikit-learn Pipeline
"""

from sklearn.datasets import load_wine
from sklearn.model_selection import cross_val_score
from sklearn.neighbors import KNeighborsClassifier
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from nn_feature_select import NearestNeighborFeatureSelector

# ---------------------------------------------------------------------------
# 1. Load data
# ---------------------------------------------------------------------------
X, y = load_wine(return_X_y=True)
feature_names = load_wine().feature_names

print(f"Dataset: {X.shape[0]} samples, {X.shape[1]} features, 3 classes\n")

# ---------------------------------------------------------------------------
# 2. Selector inside a Pipeline
# ---------------------------------------------------------------------------
pipe = Pipeline([
    ("scaler",   StandardScaler()),
    ("selector", NearestNeighborFeatureSelector(
        direction="backward",
        n_jobs=4,
        tie_break="first_candidate",
    )),
    ("clf",      KNeighborsClassifier(n_neighbors=1)),
])
pipe.fit(X, y)

selector = pipe.named_steps["selector"]
print(selector.summary())
print("Selected:", ", ".join(selector.get_feature_names_out(feature_names)))

# ---------------------------------------------------------------------------
# 3. Cross-validate the full pipeline
# ---------------------------------------------------------------------------
scores = cross_val_score(pipe, X, y, cv=5, scoring="accuracy")
print(f"\n5-fold CV accuracy (full pipeline): {scores.mean():.4f} ± {scores.std():.4f}")
