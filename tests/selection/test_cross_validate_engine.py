# tests/selection/test_cross_validate_engine.py
import numpy as np
import pytest

from demandcv.core.types import ErrorMatrix
from demandcv.selection.engines.cross_validate_engine import (
    CrossValidateEngine,
    cross_validate,
)
from demandcv.selection.engines.degree_select_engine import select_degree
from demandcv.selection.engines.fold_build_engine import RandomKFoldBuilder, build_folds
from demandcv.utils.errors import EmptyTestSetError, InsufficientDataError


def test_error_matrix_shape_and_summary_stats(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=6, per_year=12, noise=5.0)

    matrix, summaries = cross_validate(ds, 5, [1, 2, 3])

    assert matrix.degrees == (1, 2, 3)
    assert matrix.fold_indices == (1, 2, 3, 4, 5)
    assert matrix.values.shape == (3, 5)
    assert not np.isnan(matrix.values).any()

    for s in summaries:
        row = matrix.row(s.degree)
        assert s.mean_rmse == pytest.approx(row.mean())
        assert s.se_rmse == pytest.approx(row.std(ddof=1))


def test_error_matrix_is_read_only(make_quadratic_dataset):
    matrix, _ = cross_validate(make_quadratic_dataset(years=4, per_year=6), 3, [1, 2])

    with pytest.raises(ValueError):
        matrix.values[0, 0] = 1.0


def test_cross_validate_is_deterministic(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=8, per_year=12, noise=4.0)

    first, _ = cross_validate(ds, 7, range(1, 7))
    second, _ = cross_validate(ds, 7, range(1, 7))

    assert np.array_equal(first.values, second.values)


def test_exact_quadratic_error_boundary(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=19, per_year=12, noise=1e-4)

    _, summaries = cross_validate(ds, 18, range(1, 7))
    by_degree = {s.degree: s for s in summaries}

    assert by_degree[2].mean_rmse < by_degree[1].mean_rmse
    for d in range(2, 7):
        assert by_degree[d].mean_rmse < 1e-3 * by_degree[1].mean_rmse
    assert select_degree(summaries) == 2


def test_one_row_per_year_cannot_fit_first_fold(make_quadratic_dataset):
    # fold 1 trains on a single period, i.e. a single observation
    ds = make_quadratic_dataset(years=19, per_year=1)

    with pytest.raises(InsufficientDataError):
        cross_validate(ds, 18, range(1, 7))


def test_empty_test_aborts_by_default(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=6, per_year=6, skip_years=(2004,))

    with pytest.raises(EmptyTestSetError):
        cross_validate(ds, 5, [1, 2])


def test_empty_test_skipped_when_configured(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=6, per_year=6, noise=2.0, skip_years=(2004,))
    engine = CrossValidateEngine(skip_empty_test=True)

    matrix, summaries = engine.run(ds, 5, [1, 2])

    # fold 3 tests on 2004
    assert np.isnan(matrix.values[:, 2]).all()
    assert not np.isnan(np.delete(matrix.values, 2, axis=1)).any()
    for s in summaries:
        scored = matrix.row(s.degree)[~np.isnan(matrix.row(s.degree))]
        assert s.mean_rmse == pytest.approx(scored.mean())
        assert s.se_rmse == pytest.approx(scored.std(ddof=1))


def test_random_kfold_summary_is_across_repeats(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=4, per_year=12, noise=5.0)
    builder = RandomKFoldBuilder(repeats=4, seed=17)

    matrix, summaries = cross_validate(ds, 5, [1, 2, 3], builder=builder)

    assert matrix.values.shape == (3, 20)
    groups = np.asarray(matrix.fold_groups)
    for s in summaries:
        row = matrix.row(s.degree)
        per_repeat = np.array([row[groups == g].mean() for g in (1, 2, 3, 4)])
        assert s.mean_rmse == pytest.approx(per_repeat.mean())
        assert s.se_rmse == pytest.approx(per_repeat.std(ddof=1))
    assert select_degree(summaries) != 1


def test_parallel_matches_sequential(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=6, per_year=12, noise=3.0)
    folds = build_folds(ds, 5)

    sequential = CrossValidateEngine(max_workers=1).error_matrix(folds, [1, 2, 3])
    parallel = CrossValidateEngine(max_workers=2).error_matrix(folds, [1, 2, 3])

    assert np.array_equal(sequential.values, parallel.values)


def test_error_matrix_validates_shape():
    with pytest.raises(ValueError):
        ErrorMatrix(degrees=(1, 2), fold_indices=(1,), fold_groups=(1,), values=np.zeros((1, 1)))


def test_bad_degrees_rejected(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=4, per_year=6)

    with pytest.raises(ValueError):
        cross_validate(ds, 3, [])
    with pytest.raises(ValueError):
        cross_validate(ds, 3, [0, 1])
    with pytest.raises(ValueError):
        cross_validate(ds, 3, [1, 1])
