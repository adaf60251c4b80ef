"""Training loop and run pipeline for NLayerNet."""

from .pipeline import PipelineResult, run_pipeline
from .trainer import Trainer, evaluate

__all__ = ["PipelineResult", "Trainer", "evaluate", "run_pipeline"]
