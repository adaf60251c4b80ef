"""NLayerNet public API."""

from .config import CaseSource, NetworkConfig, WeightSource, load_config
from .core import activations, errors, types  # noqa: F401
from .core.activations import Activation
from .core.errors import (
    ConfigurationError,
    DataShapeError,
    MismatchError,
    NetworkError,
    NetworkIOError,
)
from .core.network import Network
from .core.topology import Topology
from .core.types import CaseSet, EvaluationResult, StopReason, TrainResult
from .data import load_cases, load_weights, make_cases, save_weights
from .training.pipeline import PipelineResult, run_pipeline
from .training.trainer import Trainer, evaluate

__version__ = "1.0.0"

__all__ = [
    "Activation",
    "CaseSource",
    "CaseSet",
    "ConfigurationError",
    "DataShapeError",
    "EvaluationResult",
    "MismatchError",
    "Network",
    "NetworkConfig",
    "NetworkError",
    "NetworkIOError",
    "PipelineResult",
    "StopReason",
    "Topology",
    "TrainResult",
    "Trainer",
    "WeightSource",
    "activations",
    "errors",
    "evaluate",
    "load_cases",
    "load_config",
    "load_weights",
    "make_cases",
    "run_pipeline",
    "save_weights",
    "types",
]
