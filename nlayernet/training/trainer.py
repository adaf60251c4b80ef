"""Convergence-driven online training loop and the evaluation pass."""

from __future__ import annotations

import logging
import time
from typing import Callable, Mapping, Optional, Sequence

import numpy as np

from ..core.errors import DataShapeError
from ..core.network import Network
from ..core.types import CaseSet, EvaluationResult, TrainResult

logger = logging.getLogger(__name__)

ProgressHook = Callable[[int, float], None]


class Trainer:
    """Run epochs of online updates until the error converges or the cap is hit.

    Each epoch visits every case in order, running a training-mode forward
    pass and the streaming weight update. Updates are visible to the next
    case of the same epoch, so case order shapes the trajectory and is never
    shuffled.
    """

    def __init__(
        self,
        network: Network,
        *,
        max_iterations: int,
        error_threshold: float,
        keep_alive: int = 0,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        if not network.training:
            raise RuntimeError("Trainer requires a network built with training=True")
        if max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {max_iterations}")
        if keep_alive < 0:
            raise ValueError(f"keep_alive must be >= 0, got {keep_alive}")
        self.network = network
        self.max_iterations = int(max_iterations)
        self.error_threshold = float(error_threshold)
        self.keep_alive = int(keep_alive)
        self.callbacks = list(callbacks or [])

    def run(self, cases: CaseSet, progress: Optional[ProgressHook] = None) -> TrainResult:
        if cases.expected is None:
            raise DataShapeError("Training requires expected outputs for every case")
        num_cases = len(cases)
        if num_cases == 0:
            raise DataShapeError("Training requires at least one case")

        iteration = 0
        average_error = float("inf")
        start = time.perf_counter()
        while average_error > self.error_threshold and iteration < self.max_iterations:
            average_error = self._run_epoch(cases) / 2.0 / num_cases
            iteration += 1

            self._emit_epoch(iteration, {"average_error": average_error})
            if progress is not None and self.keep_alive and iteration % self.keep_alive == 0:
                progress(iteration, average_error)
        elapsed = time.perf_counter() - start

        result = TrainResult(
            iterations=iteration,
            average_error=average_error,
            error_threshold=self.error_threshold,
            max_iterations=self.max_iterations,
            elapsed=elapsed,
        )
        logger.info(
            "Training stopped after %d iterations (average error %.6g): %s",
            result.iterations,
            result.average_error,
            result.reason.value,
        )
        return result

    # ------------------------------------------------------------------
    # Internal helpers

    def _run_epoch(self, cases: CaseSet) -> float:
        total = 0.0
        for inputs, expected in zip(cases.inputs, cases.expected):
            total += self.network.train_case(inputs, expected)
        return total

    def _emit_epoch(self, iteration: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(iteration, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(iteration, metrics)


def evaluate(network: Network, cases: CaseSet) -> EvaluationResult:
    """Run inference over every case, in order, and time it."""

    outputs = np.zeros((len(cases), network.topology.output_size), dtype=np.float64)
    hidden = []
    start = time.perf_counter()
    for idx, inputs in enumerate(cases.inputs):
        outputs[idx] = network.run(inputs)
        hidden.append(network.hidden_activations())
    elapsed = time.perf_counter() - start
    return EvaluationResult(outputs=outputs, hidden=hidden, elapsed=elapsed)


__all__ = ["ProgressHook", "Trainer", "evaluate"]
