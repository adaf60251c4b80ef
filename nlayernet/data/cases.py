"""Test-case files: whitespace-separated floating-point values."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

import numpy as np

from ..core.errors import DataShapeError, NetworkIOError
from ..core.topology import Topology
from ..core.types import Array, CaseSet

logger = logging.getLogger(__name__)


def read_values(path: str | Path) -> Array:
    """Read leading numeric tokens from ``path`` as a flat float array.

    Line breaks carry no meaning; reading stops at the first token that is not
    a number.
    """

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise NetworkIOError(f"Unable to open test-case file at {path}: {exc}") from exc
    values: List[float] = []
    for token in text.split():
        try:
            values.append(float(token))
        except ValueError:
            logger.warning("Stopped reading %s at non-numeric token %r", path, token)
            break
    return np.asarray(values, dtype=np.float64)


def _take(values: Array, num_cases: int, width: int, kind: str, source: object) -> Array:
    needed = num_cases * width
    if values.size < needed:
        raise DataShapeError(
            f"Not enough {kind} values in {source}: need {num_cases} x {width} = {needed}, "
            f"found {values.size}"
        )
    return values[:needed].reshape(num_cases, width).copy()


def load_cases(
    topology: Topology,
    num_cases: int,
    inputs_path: str | Path,
    outputs_path: str | Path | None = None,
) -> CaseSet:
    """Load ``num_cases`` cases sized for ``topology``.

    Expected outputs are read only when ``outputs_path`` is given.
    """

    if num_cases <= 0:
        raise DataShapeError(f"numTestCases must be positive, got {num_cases}")
    inputs = _take(read_values(inputs_path), num_cases, topology.input_size, "input", inputs_path)
    expected = None
    if outputs_path is not None:
        expected = _take(
            read_values(outputs_path), num_cases, topology.output_size, "output", outputs_path
        )
    logger.debug("Loaded %d test cases from %s", num_cases, inputs_path)
    return CaseSet(inputs=inputs, expected=expected)


def manual_cases(
    topology: Topology,
    num_cases: int,
    inputs: Sequence[float],
    expected: Sequence[float] | None = None,
) -> CaseSet:
    """Build ``num_cases`` cases from flat value lists given in the configuration."""

    if num_cases <= 0:
        raise DataShapeError(f"numTestCases must be positive, got {num_cases}")
    values = np.asarray(inputs, dtype=np.float64).ravel()
    rows = _take(values, num_cases, topology.input_size, "input", "manualInputs")
    targets = None
    if expected is not None:
        values = np.asarray(expected, dtype=np.float64).ravel()
        targets = _take(values, num_cases, topology.output_size, "output", "manualOutputs")
    return make_cases(rows, targets)


def make_cases(inputs, expected=None) -> CaseSet:
    """Build a :class:`CaseSet` from in-memory rows."""

    inputs = np.atleast_2d(np.asarray(inputs, dtype=np.float64))
    if expected is not None:
        expected = np.asarray(expected, dtype=np.float64)
        if expected.ndim == 1 and expected.size % inputs.shape[0] == 0:
            expected = expected.reshape(inputs.shape[0], -1)
        expected = np.atleast_2d(expected)
        if expected.shape[0] != inputs.shape[0]:
            raise DataShapeError(
                f"{inputs.shape[0]} input rows but {expected.shape[0]} expected-output rows"
            )
    return CaseSet(inputs=inputs, expected=expected)


__all__ = ["load_cases", "make_cases", "manual_cases", "read_values"]
