# demandcv/pipeline/parallel/types.py
from enum import Enum


class ParallelKind(str, Enum):
    CELL = "cell"      # one (degree, fold) evaluation
