"""
Selection engines. The four functions below are the public entry points;
the classes behind them carry configuration.
"""
from demandcv.selection.engines.fold_build_engine import (
    FoldBuilder,
    RandomKFoldBuilder,
    RollingOriginFoldBuilder,
    build_folds,
    resolve_fold_builder,
)
from demandcv.selection.engines.polynomial_fit_engine import (
    OrthogonalPolynomialFeatures,
    PolynomialEvaluateEngine,
    evaluate,
)
from demandcv.selection.engines.cross_validate_engine import (
    CrossValidateEngine,
    cross_validate,
)
from demandcv.selection.engines.degree_select_engine import (
    DegreeSelectEngine,
    select_degree,
)

__all__ = [
    "FoldBuilder",
    "RollingOriginFoldBuilder",
    "RandomKFoldBuilder",
    "build_folds",
    "resolve_fold_builder",
    "OrthogonalPolynomialFeatures",
    "PolynomialEvaluateEngine",
    "evaluate",
    "CrossValidateEngine",
    "cross_validate",
    "DegreeSelectEngine",
    "select_degree",
]
