# tests/selection/test_fold_build_engine.py
import pytest

from demandcv.config.selection_config import SelectionConfig
from demandcv.core.types import Dataset, Observation
from demandcv.selection.engines.fold_build_engine import (
    RandomKFoldBuilder,
    RollingOriginFoldBuilder,
    build_folds,
    resolve_fold_builder,
)
from demandcv.utils.errors import InsufficientDataError


def test_rolling_folds_count_and_periods(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=19, per_year=12)

    folds = build_folds(ds, 18)

    assert [f.index for f in folds] == list(range(1, 19))
    assert folds[0].train.periods == [2001]
    assert folds[0].test.periods == [2002]
    assert folds[-1].train.periods == list(range(2001, 2019))
    assert folds[-1].test.periods == [2019]


def test_rolling_train_strictly_before_test(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=8, per_year=3)

    for fold in build_folds(ds, 7):
        assert len(fold.test) > 0
        assert max(o.period_index for o in fold.train) < min(o.period_index for o in fold.test)


def test_rolling_train_windows_grow(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=8, per_year=3)
    folds = build_folds(ds, 7)

    for prev, nxt in zip(folds, folds[1:]):
        prev_train = set(prev.train.observations)
        next_train = set(nxt.train.observations)
        assert prev_train < next_train
        # the period added is exactly the previous fold's test period
        assert next_train - prev_train == set(prev.test.observations)


def test_rolling_folds_are_deterministic(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=6, per_year=4)

    assert build_folds(ds, 5) == build_folds(ds, 5)


def test_rolling_test_is_single_period_in_order(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=4, per_year=12)
    fold = build_folds(ds, 3)[0]

    assert [o.sub_period for o in fold.test] == list(range(1, 13))


def test_rolling_requires_num_folds_plus_one_periods(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=5, per_year=2)

    build_folds(ds, 4)
    with pytest.raises(InsufficientDataError):
        build_folds(ds, 5)


def test_rolling_gap_year_gives_empty_slices(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=6, per_year=2, skip_years=(2003,))

    folds = build_folds(ds, 5)

    # fold 2 tests on 2003, fold 3 trains up to 2003 (same rows as fold 2)
    assert len(folds[1].test) == 0
    assert folds[2].train == folds[1].train


def test_rolling_folds_from_unsorted_observations():
    periods = [2003, 2001, 2002, 2004]
    ds = Dataset(
        observations=tuple(
            Observation(period_index=p, predictor=float(p - 2000), response=float(p - 2000) ** 2)
            for p in periods
        )
    )

    folds = build_folds(ds, 2)

    assert ds.first_period == 2001
    assert ds.last_period == 2004
    assert [o.period_index for o in ds] == [2001, 2002, 2003, 2004]
    assert [f.train.periods for f in folds] == [[2001], [2001, 2002]]
    assert [f.test.periods for f in folds] == [[2002], [2003]]


def test_rolling_rejects_empty_dataset(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=0)

    with pytest.raises(InsufficientDataError):
        RollingOriginFoldBuilder().build(ds, 3)


def test_random_kfold_partitions_each_repeat(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=3, per_year=10)
    builder = RandomKFoldBuilder(repeats=3, seed=5)

    folds = builder.build(ds, 5)

    assert len(folds) == 15
    assert [f.group for f in folds] == [1] * 5 + [2] * 5 + [3] * 5
    for repeat in (1, 2, 3):
        tests = [o for f in folds if f.group == repeat for o in f.test]
        assert sorted(tests, key=lambda o: (o.period_index, o.sub_period)) == list(ds.observations)
    for f in folds:
        assert set(f.train.observations).isdisjoint(f.test.observations)
        assert len(f.train) + len(f.test) == len(ds)


def test_random_kfold_seeded(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=3, per_year=10)

    a = RandomKFoldBuilder(repeats=2, seed=11).build(ds, 4)
    b = RandomKFoldBuilder(repeats=2, seed=11).build(ds, 4)
    c = RandomKFoldBuilder(repeats=2, seed=12).build(ds, 4)

    assert a == b
    assert a != c


def test_random_kfold_too_few_rows(make_quadratic_dataset):
    ds = make_quadratic_dataset(years=1, per_year=3)

    with pytest.raises(InsufficientDataError):
        RandomKFoldBuilder(repeats=2).build(ds, 5)


def test_resolve_fold_builder_from_config():
    assert isinstance(resolve_fold_builder(SelectionConfig()), RollingOriginFoldBuilder)

    builder = resolve_fold_builder(SelectionConfig(strategy="random_kfold", repeats=7, seed=3))
    assert isinstance(builder, RandomKFoldBuilder)
    assert builder.repeats == 7
    assert builder.seed == 3
