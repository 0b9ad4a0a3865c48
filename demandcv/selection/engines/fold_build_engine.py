# demandcv/selection/engines/fold_build_engine.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, List

import numpy as np
from sklearn.model_selection import KFold

from demandcv import logs
from demandcv.config.selection_config import SelectionConfig
from demandcv.core.types import Dataset, Fold
from demandcv.utils.errors import InsufficientDataError


class FoldBuilder(ABC):
    """
    Fold builder contract:

        build(dataset, num_folds) -> list[Fold]

    Folds are numbered 1..len(folds).
    """

    name: str = ""

    @abstractmethod
    def build(self, dataset: Dataset, num_folds: int) -> List[Fold]:
        raise NotImplementedError


class RollingOriginFoldBuilder(FoldBuilder):
    """
    Rolling-origin (forward-chaining) folds.

    With origin = first period of the dataset, fold k (1..N):
        train_k = observations with period <  origin + k
        test_k  = observations with period == origin + k

    So fold 1 trains on the first period alone and fold N tests on
    period origin + N, which is why the dataset must span N + 1 periods.
    A period bucket with no rows yields an empty slice; the evaluator
    decides what to do with it.
    """

    name = "rolling"

    def build(self, dataset: Dataset, num_folds: int) -> List[Fold]:
        if num_folds < 1:
            raise ValueError(f"num_folds must be >= 1, got {num_folds}")
        if len(dataset) == 0:
            raise InsufficientDataError("cannot build folds from an empty dataset")

        origin = dataset.first_period
        span = dataset.last_period - origin + 1
        if span < num_folds + 1:
            raise InsufficientDataError(
                f"dataset spans {span} periods ({origin}..{dataset.last_period}), "
                f"need at least {num_folds + 1} for {num_folds} folds"
            )

        folds: List[Fold] = []
        for k in range(1, num_folds + 1):
            cutoff = origin + k
            train = tuple(o for o in dataset if o.period_index < cutoff)
            test = tuple(o for o in dataset if o.period_index == cutoff)

            if not test:
                logs.warning(f"[RollingOriginFoldBuilder] fold={k} period={cutoff} has empty test set")

            folds.append(
                Fold(
                    index=k,
                    train=Dataset(observations=train),
                    test=Dataset(observations=test),
                    group=k,
                )
            )

        logs.info(
            f"[RollingOriginFoldBuilder] built {len(folds)} folds "
            f"origin={origin} last_test={origin + num_folds}"
        )
        return folds


class RandomKFoldBuilder(FoldBuilder):
    """
    Repeated randomized K-fold over the full dataset.

    Each repeat is an independent seeded shuffle into num_folds folds;
    fold.group is the repeat number, so the aggregator takes its
    statistics across repeats. No temporal ordering guarantee.
    """

    name = "random_kfold"

    def __init__(self, repeats: int = 100, seed: int = 17):
        if repeats < 1:
            raise ValueError(f"repeats must be >= 1, got {repeats}")
        self.repeats = repeats
        self.seed = seed

    def build(self, dataset: Dataset, num_folds: int) -> List[Fold]:
        if num_folds < 2:
            raise ValueError(f"num_folds must be >= 2 for K-fold, got {num_folds}")
        if len(dataset) < num_folds:
            raise InsufficientDataError(
                f"{len(dataset)} observations cannot fill {num_folds} folds"
            )

        observations = dataset.observations
        folds: List[Fold] = []
        index = 0

        for repeat in range(1, self.repeats + 1):
            splitter = KFold(
                n_splits=num_folds,
                shuffle=True,
                random_state=self.seed + repeat - 1,
            )
            for train_pos, test_pos in splitter.split(np.arange(len(observations))):
                index += 1
                # keep temporal order inside each slice
                train = tuple(observations[i] for i in sorted(train_pos))
                test = tuple(observations[i] for i in sorted(test_pos))
                folds.append(
                    Fold(
                        index=index,
                        train=Dataset(observations=train),
                        test=Dataset(observations=test),
                        group=repeat,
                    )
                )

        logs.info(
            f"[RandomKFoldBuilder] built {len(folds)} folds "
            f"k={num_folds} repeats={self.repeats} seed={self.seed}"
        )
        return folds


_BUILDER_REGISTRY: Dict[str, Callable[[SelectionConfig], FoldBuilder]] = {
    "rolling": lambda cfg: RollingOriginFoldBuilder(),
    "random_kfold": lambda cfg: RandomKFoldBuilder(repeats=cfg.repeats, seed=cfg.seed),
}


def resolve_fold_builder(cfg: SelectionConfig) -> FoldBuilder:
    if cfg.strategy not in _BUILDER_REGISTRY:
        available = ", ".join(_BUILDER_REGISTRY)
        raise ValueError(f"No FoldBuilder for strategy={cfg.strategy!r}. Available: {available}")
    return _BUILDER_REGISTRY[cfg.strategy](cfg)


def build_folds(
        dataset: Dataset,
        num_folds: int,
        builder: FoldBuilder | None = None,
) -> List[Fold]:
    """Rolling-origin folds unless another builder is given."""
    builder = builder if builder is not None else RollingOriginFoldBuilder()
    return builder.build(dataset, num_folds)
