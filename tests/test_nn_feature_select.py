"""
Tests for nn_feature_select
"""

import numpy as np
import pytest
from sklearn.datasets import load_iris
from sklearn.neighbors import KNeighborsClassifier
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from nn_feature_select import (
    Candidate,
    ConsoleReporter,
    NearestNeighborFeatureSelector,
    RoundResult,
    backward_candidates,
    backward_elimination,
    evaluate_round,
    forward_candidates,
    forward_selection,
    generate_candidates,
    loocv_accuracy,
    nearest_neighbor_labels,
    run_search,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_example():
    """Four samples, one feature equal to roughly label * 10."""
    return np.array([[0, 0.], [1, 10.], [0, 1.], [1, 9.]])


def make_with_noise():
    """Feature 1 separates the classes, feature 2 is large-scale noise.

    {1} -> 1.0, {2} -> 0.25, {1, 2} -> 0.5, {} -> 0.25
    """
    return np.array([
        [0, 0.,  100.],
        [1, 10.,   0.],
        [0, 1., -100.],
        [1, 9.,   50.],
    ])


def make_hopeless(n_features=1):
    """Every sample's nearest neighbor has the other label, on any subset."""
    col = np.array([0., 0.5, 3., 3.5])
    labels = np.array([0., 1., 0., 1.])
    return np.column_stack([labels] + [col] * n_features)


def make_random(n=40, d=3, seed=0):
    rng = np.random.default_rng(seed)
    labels = rng.integers(0, 2, n).astype(float)
    return np.column_stack([labels, rng.normal(0, 1, (n, d))])


# ---------------------------------------------------------------------------
# Tests: loocv_accuracy
# ---------------------------------------------------------------------------

class TestLoocvAccuracy:
    def test_example_feature_is_perfect(self):
        assert loocv_accuracy(make_example(), [1]) == 1.0

    def test_range_0_1(self):
        data = make_random()
        for subset in [(), (1,), (2, 3), (1, 2, 3)]:
            score = loocv_accuracy(data, subset)
            assert 0.0 <= score <= 1.0

    def test_deterministic(self):
        data = make_random(seed=3)
        first = loocv_accuracy(data, (1, 3))
        for _ in range(5):
            assert loocv_accuracy(data, (1, 3)) == first

    def test_order_of_features_irrelevant(self):
        data = make_random(seed=5)
        assert loocv_accuracy(data, (1, 2, 3)) == loocv_accuracy(data, (3, 1, 2))

    def test_tie_goes_to_first_sample(self):
        # sample 0 is equidistant from samples 1 (label 1) and 2 (label 0)
        data = np.array([[0, 0.], [1, 1.], [0, -1.]])
        assert nearest_neighbor_labels(data, [1]).tolist() == [1, 0, 0]
        assert loocv_accuracy(data, [1]) == pytest.approx(1 / 3)

    def test_empty_subset_uses_first_other_sample(self):
        data = np.array([[0, 5.], [1, 6.], [1, 7.], [0, 8.]])
        assert nearest_neighbor_labels(data, []).tolist() == [1, 0, 0, 0]
        assert loocv_accuracy(data, []) == 0.25

    def test_labels_compared_as_integers(self):
        data = np.array([[1.2, 0.], [1.7, 0.1]])
        assert loocv_accuracy(data, [1]) == 1.0

    def test_overflowing_distances_never_match_self(self):
        data = np.array([[0, 1e200], [1, -1e200]])
        assert nearest_neighbor_labels(data, [1]).tolist() == [-1, -1]
        assert loocv_accuracy(data, [1]) == 0.0

    def test_lone_sample_has_no_neighbor(self):
        assert nearest_neighbor_labels(np.array([[1, 3.]]), [1]).tolist() == [-1]

    def test_single_sample_is_misclassified(self):
        assert loocv_accuracy(np.array([[1, 3.]]), [1]) == 0.0

    def test_no_samples_raises(self):
        with pytest.raises(ValueError, match="no samples"):
            loocv_accuracy(np.zeros((0, 3)), [1])

    def test_noise_scores(self):
        data = make_with_noise()
        assert loocv_accuracy(data, [2]) == 0.25
        assert loocv_accuracy(data, [1, 2]) == 0.5


# ---------------------------------------------------------------------------
# Tests: candidates
# ---------------------------------------------------------------------------

class TestCandidates:
    def test_forward_adds_missing_features(self):
        cands = forward_candidates((2,), 4)
        assert [c.features for c in cands] == [(2, 1), (2, 3), (2, 4)]
        assert [c.feature for c in cands] == [1, 3, 4]
        assert all(c.direction == "forward" for c in cands)

    def test_forward_size_and_no_repeats(self):
        current = (3, 1)
        for c in forward_candidates(current, 6):
            assert len(c.features) == len(current) + 1
            assert len(set(c.features)) == len(c.features)
            assert c.feature not in current

    def test_forward_from_full_set_is_empty(self):
        assert forward_candidates((1, 2, 3), 3) == []

    def test_backward_removes_each_position(self):
        cands = backward_candidates((3, 1, 4))
        assert [c.features for c in cands] == [(1, 4), (3, 4), (3, 1)]
        assert [c.feature for c in cands] == [3, 1, 4]
        assert all(c.direction == "backward" for c in cands)

    def test_backward_size(self):
        current = (1, 2, 3, 4, 5)
        for c in backward_candidates(current):
            assert len(c.features) == len(current) - 1
            assert c.feature not in c.features

    def test_no_duplicates_within_round(self):
        assert len(set(forward_candidates((), 5))) == 5
        assert len(set(backward_candidates((1, 2, 3)))) == 3

    def test_generate_dispatches(self):
        assert generate_candidates((1,), 2, "forward") == forward_candidates((1,), 2)
        assert generate_candidates((1,), 2, "backward") == backward_candidates((1,))

    def test_generate_unknown_direction(self):
        with pytest.raises(ValueError, match="direction"):
            generate_candidates((), 3, "sideways")


# ---------------------------------------------------------------------------
# Tests: evaluate_round
# ---------------------------------------------------------------------------

class TestEvaluateRound:
    def test_picks_best_candidate(self):
        data = make_with_noise()
        result = evaluate_round(data, forward_candidates((), 2), n_jobs=2)
        assert result.feature == 1
        assert result.accuracy == 1.0
        assert result.candidate == Candidate((1,), 1, "forward")

    def test_every_candidate_evaluated_once(self):
        data = make_random(d=6)
        cands = forward_candidates((), 6)
        result = evaluate_round(data, cands, n_jobs=4)
        evaluated = [c for c, _ in result.scores]
        assert len(evaluated) == len(cands)
        assert set(evaluated) == set(cands)

    def test_scores_match_sequential_accuracy(self):
        data = make_random(d=4, seed=11)
        result = evaluate_round(data, backward_candidates((1, 2, 3, 4)), n_jobs=3)
        for cand, acc in result.scores:
            assert acc == loocv_accuracy(data, cand.features)
        assert result.accuracy == max(acc for _, acc in result.scores)

    def test_callback_sees_every_candidate(self):
        data = make_random(d=5)
        seen = []
        evaluate_round(data, forward_candidates((), 5), n_jobs=4,
                       callback=lambda c, acc: seen.append((c.feature, acc)))
        assert sorted(k for k, _ in seen) == [1, 2, 3, 4, 5]

    def test_more_workers_than_candidates(self):
        data = make_example()
        result = evaluate_round(data, forward_candidates((), 1), n_jobs=16)
        assert result.feature == 1
        assert len(result.scores) == 1

    def test_no_candidates(self):
        result = evaluate_round(make_example(), [], n_jobs=4)
        assert result == RoundResult()
        assert result.feature is None

    def test_nothing_above_zero(self):
        data = make_hopeless(2)
        result = evaluate_round(data, forward_candidates((), 2), n_jobs=2)
        assert result.candidate is None
        assert result.accuracy == 0.0
        assert len(result.scores) == 2

    def test_first_candidate_tie_break_is_deterministic(self):
        col = make_example()[:, 1]
        data = np.column_stack([make_example()[:, 0], col, col, col])
        for _ in range(5):
            result = evaluate_round(data, forward_candidates((), 3), n_jobs=3,
                                    tie_break="first_candidate")
            assert result.feature == 1
            assert result.accuracy == 1.0

    def test_first_come_tie_picks_one_of_the_tied(self):
        col = make_example()[:, 1]
        data = np.column_stack([make_example()[:, 0], col, col])
        result = evaluate_round(data, forward_candidates((), 2), n_jobs=2)
        assert result.feature in (1, 2)
        assert result.accuracy == 1.0

    def test_invalid_n_jobs(self):
        with pytest.raises(ValueError, match="n_jobs"):
            evaluate_round(make_example(), forward_candidates((), 1), n_jobs=0)

    def test_invalid_tie_break(self):
        with pytest.raises(ValueError, match="tie_break"):
            evaluate_round(make_example(), forward_candidates((), 1), tie_break="random")


# ---------------------------------------------------------------------------
# Tests: forward_selection / backward_elimination
# ---------------------------------------------------------------------------

class TestForwardSelection:
    def test_example_selects_feature_1(self):
        result = forward_selection(make_example())
        assert result.selected == (1,)
        assert result.accuracy == 1.0
        assert result.best_level == 1

    def test_keeps_best_round_not_last(self):
        result = forward_selection(make_with_noise(), n_jobs=2)
        assert [r.feature for r in result.rounds] == [1, 2]
        assert [r.accuracy for r in result.rounds] == [1.0, 0.5]
        assert result.selected == (1,)
        assert result.accuracy == 1.0

    def test_runs_one_round_per_feature(self):
        data = make_random(d=4)
        result = forward_selection(data, tie_break="first_candidate")
        assert [r.level for r in result.rounds] == [1, 2, 3, 4]
        assert all(r.feature is not None for r in result.rounds)
        chosen = [r.feature for r in result.rounds]
        assert sorted(chosen) == [1, 2, 3, 4]
        assert result.selected == tuple(chosen[:len(result.selected)])

    def test_wasted_rounds_leave_subset_unchanged(self):
        result = forward_selection(make_hopeless(2), n_jobs=2)
        assert len(result.rounds) == 2
        assert all(r.feature is None for r in result.rounds)
        # both rounds saw the same two one-feature candidates
        for r in result.rounds:
            assert sorted(c.features for c, _ in r.scores) == [(1,), (2,)]
        assert result.selected == ()
        assert result.accuracy == 0.0
        assert result.best_level is None

    def test_no_features(self):
        result = forward_selection(np.array([[0.], [1.]]))
        assert result.selected == ()
        assert result.rounds == []

    def test_report_format(self, capsys):
        forward_selection(make_example(), reporter=ConsoleReporter())
        out = capsys.readouterr().out
        assert out == (
            "On level 1 of the search tree\n"
            "--Considering adding the feature at index 1\n"
            "--Accuracy with feature 1: 1.0000\n"
            "On level 1, added feature 1 (Accuracy: 1.0000)\n"
            "\n"
            "Best set of selected features: 1\n"
            "Best accuracy achieved: 1.0000\n"
        )


class TestBackwardElimination:
    def test_removes_noise_feature(self):
        result = backward_elimination(make_with_noise(), n_jobs=2)
        assert [r.level for r in result.rounds] == [2, 1]
        assert [r.feature for r in result.rounds] == [2, 1]
        assert result.selected == (1,)
        assert result.accuracy == 1.0
        assert result.best_level == 2

    def test_best_starts_from_full_set(self):
        data = make_example()
        result = backward_elimination(data)
        # removing the only feature drops to 0.25, so the full set stays best
        assert result.selected == (1,)
        assert result.accuracy == loocv_accuracy(data, [1])
        assert result.best_level is None

    def test_never_worse_than_full_set(self):
        data = make_random(d=4, seed=2)
        full = loocv_accuracy(data, (1, 2, 3, 4))
        result = backward_elimination(data, tie_break="first_candidate")
        assert result.accuracy >= full
        assert loocv_accuracy(data, result.selected) == result.accuracy

    def test_iris_noise_column_is_dropped(self):
        X, y = load_iris(return_X_y=True)
        rng = np.random.default_rng(0)
        noise = rng.normal(0, 5.0, (len(X), 1))
        data = np.column_stack([y, X, noise])
        full = loocv_accuracy(data, (1, 2, 3, 4, 5))
        result = backward_elimination(data, tie_break="first_candidate")
        assert 5 not in result.selected
        assert result.accuracy >= full

    def test_wasted_rounds_keep_full_set(self):
        # nearest neighbor is of the other class on every subset, empty included
        data = np.array([[0, 0., 0.], [1, -1., -1.], [1, 1., 1.]])
        result = backward_elimination(data, n_jobs=2)
        assert [r.level for r in result.rounds] == [2, 1]
        assert all(r.feature is None for r in result.rounds)
        for r in result.rounds:
            assert sorted(c.features for c, _ in r.scores) == [(1,), (2,)]
        assert result.selected == (1, 2)
        assert result.accuracy == 0.0
        assert result.best_level is None

    def test_report_lines(self, capsys):
        backward_elimination(make_with_noise(), n_jobs=2, reporter=ConsoleReporter())
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "On level 2 of the search tree"
        assert "--Considering removing the feature at index 2" in lines
        assert "--Accuracy without feature 2: 1.0000" in lines
        assert "On level 2, removed feature 2 (Accuracy: 1.0000)" in lines
        assert "On level 1, removed feature 1 (Accuracy: 0.2500)" in lines
        assert lines[-2:] == [
            "Best set of selected features: 1",
            "Best accuracy achieved: 1.0000",
        ]


class TestRunSearch:
    def test_dispatches_on_direction(self):
        data = make_with_noise()
        assert run_search(data, "forward").direction == "forward"
        assert run_search(data, "backward").direction == "backward"

    def test_unknown_direction(self):
        with pytest.raises(ValueError, match="direction"):
            run_search(make_example(), "random")

    def test_empty_data_raises(self):
        with pytest.raises(ValueError):
            forward_selection(np.zeros((0, 3)))


# ---------------------------------------------------------------------------
# Tests: NearestNeighborFeatureSelector
# ---------------------------------------------------------------------------

class TestNearestNeighborFeatureSelector:
    def test_fit_returns_self(self):
        X, y = load_iris(return_X_y=True)
        sel = NearestNeighborFeatureSelector(tie_break="first_candidate")
        assert sel.fit(X, y) is sel

    def test_columns_are_zero_based(self):
        data = make_with_noise()
        sel = NearestNeighborFeatureSelector().fit(data[:, 1:], data[:, 0])
        assert sel.selected_features_ == (0,)
        assert sel.search_result_.selected == (1,)
        assert sel.accuracy_ == 1.0

    def test_transform_shape(self):
        X, y = load_iris(return_X_y=True)
        sel = NearestNeighborFeatureSelector(tie_break="first_candidate").fit(X, y)
        assert sel.transform(X).shape == (len(X), len(sel.selected_features_))

    def test_accuracy_in_range(self):
        X, y = load_iris(return_X_y=True)
        sel = NearestNeighborFeatureSelector(direction="backward").fit(X, y)
        assert 0.0 <= sel.accuracy_ <= 1.0
        assert sel.accuracy_ > 0.9

    def test_get_support(self):
        X, y = load_iris(return_X_y=True)
        sel = NearestNeighborFeatureSelector(tie_break="first_candidate").fit(X, y)
        mask = sel.get_support()
        assert mask.shape == (X.shape[1],)
        assert mask.sum() == len(sel.selected_features_)
        assert set(sel.get_support(indices=True)) == set(sel.selected_features_)

    def test_get_feature_names_out(self):
        X, y = load_iris(return_X_y=True)
        names = load_iris().feature_names
        sel = NearestNeighborFeatureSelector(tie_break="first_candidate").fit(X, y)
        out = sel.get_feature_names_out(names)
        assert list(out) == [names[i] for i in sel.selected_features_]

    def test_sklearn_pipeline_compatible(self):
        X, y = load_iris(return_X_y=True)
        pipe = Pipeline([
            ("scale", StandardScaler()),
            ("sel",   NearestNeighborFeatureSelector(tie_break="first_candidate")),
            ("clf",   KNeighborsClassifier(n_neighbors=1)),
        ])
        pipe.fit(X, y)
        assert len(pipe.predict(X)) == len(y)

    def test_verbose_prints_report(self, capsys):
        data = make_example()
        NearestNeighborFeatureSelector(verbose=1).fit(data[:, 1:], data[:, 0])
        out = capsys.readouterr().out
        assert "On level 1 of the search tree" in out
        assert "Best accuracy achieved: 1.0000" in out

    def test_invalid_direction_raises(self):
        X, y = load_iris(return_X_y=True)
        with pytest.raises(ValueError, match="direction"):
            NearestNeighborFeatureSelector(direction="both").fit(X, y)

    def test_invalid_n_jobs_raises(self):
        X, y = load_iris(return_X_y=True)
        with pytest.raises(ValueError, match="n_jobs"):
            NearestNeighborFeatureSelector(n_jobs=0).fit(X, y)

    def test_string_labels(self):
        X, y = load_iris(return_X_y=True)
        names = np.asarray(load_iris().target_names)[y]
        sel = NearestNeighborFeatureSelector(tie_break="first_candidate")
        by_name = sel.fit(X, names)
        assert list(by_name.classes_) == ["setosa", "versicolor", "virginica"]
        by_code = NearestNeighborFeatureSelector(tie_break="first_candidate").fit(X, y)
        assert by_name.selected_features_ == by_code.selected_features_
        assert by_name.accuracy_ == by_code.accuracy_

    def test_mismatched_y_raises(self):
        X, y = load_iris(return_X_y=True)
        with pytest.raises(ValueError, match="y must have shape"):
            NearestNeighborFeatureSelector().fit(X, y[:-1])

    def test_summary_is_string(self):
        X, y = load_iris(return_X_y=True)
        sel = NearestNeighborFeatureSelector(tie_break="first_candidate").fit(X, y)
        assert "fit summary" in sel.summary()

    def test_not_fitted_raises(self):
        from sklearn.exceptions import NotFittedError
        sel = NearestNeighborFeatureSelector()
        with pytest.raises(NotFittedError):
            sel.transform(np.zeros((5, 4)))
