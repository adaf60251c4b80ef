"""Headless-safe plotting adapters."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

from ..core.errors import NetworkIOError


class PlotAdapter:
    """Collect the per-epoch average error and optionally plot it with matplotlib."""

    def __init__(self, path: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.path = Path(path)
        self._history: List[Tuple[int, float]] = []
        if self.enable_plots:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise NetworkIOError(
                    f"Unable to create plot directory for {self.path}: {exc}"
                ) from exc

    def on_epoch(self, iteration: int, metrics):
        if not self.enable_plots:
            return
        self._history.append((iteration, float(metrics.get("average_error", 0.0))))

    def close(self) -> str | None:
        if not self.enable_plots or not self._history:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        iterations, errors = zip(*self._history)
        fig, ax = plt.subplots()
        ax.plot(iterations, errors)
        ax.set_xlabel("Iteration")
        ax.set_ylabel("Average error")
        ax.set_yscale("log")
        ax.set_title("Training Curve")
        try:
            fig.savefig(self.path)
        except OSError as exc:
            raise NetworkIOError(f"Unable to write plot at {self.path}: {exc}") from exc
        finally:
            plt.close(fig)
        return str(self.path)

    __call__ = on_epoch


__all__ = ["PlotAdapter"]
