"""Core typing contracts for NLayerNet."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np

Array = np.ndarray


@dataclass(frozen=True)
class CaseSet:
    """Ordered test cases: one input row per case, optional expected outputs."""

    inputs: Array
    expected: Optional[Array] = None

    def __len__(self) -> int:
        return int(self.inputs.shape[0])

    @property
    def has_expected(self) -> bool:
        return self.expected is not None


class StopReason(str, Enum):
    """Why a training run ended; derived from the final error, never stored."""

    CONVERGED = "error threshold reached"
    ITERATION_LIMIT = "iteration limit reached"


@dataclass(frozen=True)
class TrainResult:
    """Summary returned by :meth:`nlayernet.training.trainer.Trainer.run`."""

    iterations: int
    average_error: float
    error_threshold: float
    max_iterations: int
    elapsed: float = 0.0

    @property
    def reason(self) -> StopReason:
        if self.average_error <= self.error_threshold:
            return StopReason.CONVERGED
        return StopReason.ITERATION_LIMIT

    @property
    def converged(self) -> bool:
        return self.reason is StopReason.CONVERGED


@dataclass(frozen=True)
class EvaluationResult:
    """Outputs of an inference pass over every case of a :class:`CaseSet`."""

    outputs: Array
    hidden: List[List[Array]]
    elapsed: float = 0.0


__all__ = ["Array", "CaseSet", "EvaluationResult", "StopReason", "TrainResult"]
