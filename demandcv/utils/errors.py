# demandcv/utils/errors.py
class UserInputError(RuntimeError):
    """
    Raised for invalid user-provided config (paths, columns, fold counts).
    Should NOT print traceback.
    """


class CrossValidationError(RuntimeError):
    """
    Base class for every failure inside a selection run.

    All of these are deterministic given the same inputs, so callers
    must never retry without changing the inputs.
    """


class InsufficientDataError(CrossValidationError):
    """
    Train slice cannot determine the requested polynomial, or the
    dataset spans too few periods for the requested folds.
    """


class EmptyTestSetError(CrossValidationError):
    """A fold's test slice has no observations."""


class IncompleteSummaryError(CrossValidationError):
    """Selector got a summary table missing degrees of the configured range."""


class IllConditionedFitError(CrossValidationError):
    """Design matrix condition number exceeds the configured threshold."""

    def __init__(self, message: str, condition_number: float):
        super().__init__(message)
        self.condition_number = condition_number
