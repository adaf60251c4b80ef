"""Metrics sinks for training runs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from ..core.errors import NetworkIOError


class JsonlSink:
    """Append-only JSONL writer, one record per epoch."""

    def __init__(self, path: str | Path, *, seed: int | None = None) -> None:
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("")
        except OSError as exc:
            raise NetworkIOError(f"Unable to write metrics file at {self.path}: {exc}") from exc
        self.seed = seed

    def on_epoch(self, iteration: int, metrics: Mapping[str, float]) -> None:
        record = {"iteration": int(iteration), "seed": self.seed}
        record.update({k: float(v) for k, v in metrics.items() if isinstance(v, (int, float))})
        try:
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(record) + "\n")
        except OSError as exc:
            raise NetworkIOError(f"Unable to write metrics file at {self.path}: {exc}") from exc

    __call__ = on_epoch


class MetricsCapture:
    """Keep per-epoch metrics in memory."""

    def __init__(self) -> None:
        self.history: list[tuple[int, dict[str, float]]] = []

    def on_epoch(self, iteration: int, metrics: Mapping[str, float]) -> None:
        self.history.append((int(iteration), {k: float(v) for k, v in metrics.items()}))

    @property
    def errors(self) -> list[float]:
        return [metrics["average_error"] for _, metrics in self.history]

    @property
    def last(self) -> dict[str, float] | None:
        return self.history[-1][1] if self.history else None


__all__ = ["JsonlSink", "MetricsCapture"]
