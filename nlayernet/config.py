"""Run configuration loaded from key-value, JSON or YAML files."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .core.activations import Activation
from .core.errors import ConfigurationError, NetworkIOError
from .core.topology import Topology

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE_PATH = "defaultConfigs.properties"


class WeightSource(str, Enum):
    """How the weights are populated before training or running."""

    RANDOM = "Random"
    LOAD = "Load"
    MANUAL = "Manual"

    @classmethod
    def parse(cls, value: object) -> "WeightSource":
        key = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        choices = ", ".join(member.value for member in cls)
        raise ConfigurationError(f"weightConfig must be one of {choices}, got {value!r}")


class CaseSource(str, Enum):
    """Where the test cases come from."""

    FILE = "File"
    MANUAL = "Manual"

    @classmethod
    def parse(cls, value: object) -> "CaseSource":
        key = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        choices = ", ".join(member.value for member in cls)
        raise ConfigurationError(f"testCaseConfig must be one of {choices}, got {value!r}")


@dataclass(frozen=True)
class NetworkConfig:
    """Immutable run configuration; every field is fixed once loaded."""

    topology: Topology
    weight_source: WeightSource
    is_training: bool
    num_test_cases: int
    test_case_source: CaseSource = CaseSource.FILE
    inputs_file_path: Optional[str] = None
    outputs_file_path: Optional[str] = None
    manual_inputs: Tuple[float, ...] = ()
    manual_outputs: Tuple[float, ...] = ()
    activation: Activation = Activation.SIGMOID
    random_weight_min: float = 0.0
    random_weight_max: float = 0.0
    random_seed: Optional[int] = None
    load_weights_file_path: Optional[str] = None
    manual_weights: Tuple[float, ...] = ()
    save_weights_to_file: bool = False
    save_weights_file_path: Optional[str] = None
    run_after_training: bool = False
    max_iterations: int = 0
    error_threshold: float = 0.0
    lambda_value: float = 0.0
    keep_alive: int = 0
    print_input_table: bool = False
    print_truth_table: bool = False
    print_hidden_activations: bool = False
    print_network_specifics: bool = False
    metrics_file_path: Optional[str] = None
    plot_file_path: Optional[str] = None
    source_path: Optional[str] = field(default=None, compare=False)

    @property
    def needs_expected_outputs(self) -> bool:
        return self.is_training or self.print_truth_table

    @classmethod
    def from_mapping(
        cls, raw: Mapping[str, Any], *, source_path: str | None = None
    ) -> "NetworkConfig":
        """Validate ``raw`` (keys as in the properties file) into a config."""

        reader = _Reader(raw)
        topology = reader.required("networkConfig", _as_topology)
        declared_layers = reader.optional("numActivationLayers", _as_int)
        if declared_layers is not None and declared_layers != topology.num_layers:
            raise ConfigurationError(
                f"numActivationLayers={declared_layers} does not match "
                f"networkConfig {topology} ({topology.num_layers} layers)"
            )

        weight_source = reader.required("weightConfig", WeightSource.parse)
        is_training = reader.required("isTraining", _as_bool)
        num_test_cases = reader.required("numTestCases", _as_int)
        if num_test_cases <= 0:
            raise ConfigurationError(f"numTestCases must be positive, got {num_test_cases}")
        print_truth_table = reader.optional("printTruthTable", _as_bool, False)

        values: Dict[str, Any] = {
            "topology": topology,
            "weight_source": weight_source,
            "is_training": is_training,
            "num_test_cases": num_test_cases,
            "activation": reader.optional("activationFunction", Activation.parse, Activation.SIGMOID),
            "random_seed": reader.optional("randomSeed", _as_int),
            "run_after_training": reader.optional("runAfterTraining", _as_bool, False),
            "keep_alive": reader.optional("keepAlive", _as_int, 0),
            "print_input_table": reader.optional("printInputTable", _as_bool, False),
            "print_truth_table": print_truth_table,
            "print_hidden_activations": reader.optional("printHiddenActivations", _as_bool, False),
            "print_network_specifics": reader.optional("printNetworkSpecifics", _as_bool, False),
            "metrics_file_path": reader.optional("metricsFilePath", _as_path),
            "plot_file_path": reader.optional("plotFilePath", _as_path),
            "source_path": source_path,
        }
        if values["keep_alive"] < 0:
            raise ConfigurationError(f"keepAlive must be >= 0, got {values['keep_alive']}")

        case_source = reader.optional("testCaseConfig", CaseSource.parse, CaseSource.FILE)
        values["test_case_source"] = case_source
        needs_expected = is_training or print_truth_table
        if case_source is CaseSource.FILE:
            values["inputs_file_path"] = reader.required("inputsFilePath", _as_path)
            if needs_expected:
                values["outputs_file_path"] = reader.required("outputsFilePath", _as_path)
            else:
                values["outputs_file_path"] = reader.optional("outputsFilePath", _as_path)
        elif case_source is CaseSource.MANUAL:
            values["manual_inputs"] = reader.required("manualInputs", _as_floats)
            if needs_expected:
                values["manual_outputs"] = reader.required("manualOutputs", _as_floats)
            else:
                values["manual_outputs"] = reader.optional("manualOutputs", _as_floats, ())
        else:  # pragma: no cover - guardrail
            raise ConfigurationError(f"Unhandled test case source: {case_source}")

        if weight_source is WeightSource.RANDOM:
            low = reader.required("randomWeightMin", _as_float)
            high = reader.required("randomWeightMax", _as_float)
            if low > high:
                raise ConfigurationError(
                    f"randomWeightMin ({low}) must not exceed randomWeightMax ({high})"
                )
            values["random_weight_min"] = low
            values["random_weight_max"] = high
        elif weight_source is WeightSource.LOAD:
            values["load_weights_file_path"] = reader.required("loadWeightsFilePath", _as_path)
        elif weight_source is WeightSource.MANUAL:
            values["manual_weights"] = reader.required("manualWeights", _as_floats)
        else:  # pragma: no cover - guardrail
            raise ConfigurationError(f"Unhandled weight source: {weight_source}")

        save = reader.optional("saveWeightsToFile", _as_bool, False)
        values["save_weights_to_file"] = save
        if save:
            values["save_weights_file_path"] = reader.required("saveWeightsFilePath", _as_path)
        else:
            values["save_weights_file_path"] = reader.optional("saveWeightsFilePath", _as_path)

        if is_training:
            max_iterations = reader.required("maxIterations", _as_int)
            if max_iterations < 0:
                raise ConfigurationError(f"maxIterations must be >= 0, got {max_iterations}")
            values["max_iterations"] = max_iterations
            values["error_threshold"] = reader.required("errorThreshold", _as_float)
            values["lambda_value"] = reader.required("lambdaValue", _as_float)
        else:
            values["max_iterations"] = reader.optional("maxIterations", _as_int, 0)
            values["error_threshold"] = reader.optional("errorThreshold", _as_float, 0.0)
            values["lambda_value"] = reader.optional("lambdaValue", _as_float, 0.0)

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view using the same keys as the properties file."""

        payload = asdict(self)
        out: Dict[str, Any] = {}
        for attr, key in _KEY_NAMES.items():
            value = payload[attr]
            if attr == "topology":
                value = str(self.topology)
            elif isinstance(value, Enum):
                value = value.value
            elif isinstance(value, tuple):
                value = list(value)
            out[key] = value
        return out


_KEY_NAMES = {
    "topology": "networkConfig",
    "weight_source": "weightConfig",
    "is_training": "isTraining",
    "num_test_cases": "numTestCases",
    "test_case_source": "testCaseConfig",
    "inputs_file_path": "inputsFilePath",
    "outputs_file_path": "outputsFilePath",
    "manual_inputs": "manualInputs",
    "manual_outputs": "manualOutputs",
    "activation": "activationFunction",
    "random_weight_min": "randomWeightMin",
    "random_weight_max": "randomWeightMax",
    "random_seed": "randomSeed",
    "load_weights_file_path": "loadWeightsFilePath",
    "manual_weights": "manualWeights",
    "save_weights_to_file": "saveWeightsToFile",
    "save_weights_file_path": "saveWeightsFilePath",
    "run_after_training": "runAfterTraining",
    "max_iterations": "maxIterations",
    "error_threshold": "errorThreshold",
    "lambda_value": "lambdaValue",
    "keep_alive": "keepAlive",
    "print_input_table": "printInputTable",
    "print_truth_table": "printTruthTable",
    "print_hidden_activations": "printHiddenActivations",
    "print_network_specifics": "printNetworkSpecifics",
    "metrics_file_path": "metricsFilePath",
    "plot_file_path": "plotFilePath",
}


class _Reader:
    """Typed access to raw configuration values with key-aware errors."""

    def __init__(self, raw: Mapping[str, Any]) -> None:
        self._raw = {str(k): v for k, v in raw.items()}

    def _present(self, key: str) -> bool:
        value = self._raw.get(key)
        return value is not None and not (isinstance(value, str) and value.strip() == "")

    def required(self, key: str, convert: Callable[[Any], Any]) -> Any:
        if not self._present(key):
            raise ConfigurationError(f"Missing required configuration key: {key}")
        return self._convert(key, convert)

    def optional(self, key: str, convert: Callable[[Any], Any], default: Any = None) -> Any:
        if not self._present(key):
            return default
        return self._convert(key, convert)

    def _convert(self, key: str, convert: Callable[[Any], Any]) -> Any:
        value = self._raw[key]
        try:
            return convert(value)
        except ConfigurationError as exc:
            raise ConfigurationError(f"Invalid value for {key}: {exc}") from None
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid value for {key}: {value!r}") from None


def _as_topology(value: Any) -> Topology:
    return Topology.parse(str(value))


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError(value)


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(value)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(value)
        return int(value)
    return int(str(value).strip())


def _as_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(value)
    return float(str(value).strip()) if isinstance(value, str) else float(value)


def _as_floats(value: Any) -> Tuple[float, ...]:
    if isinstance(value, (list, tuple)):
        return tuple(_as_float(item) for item in value)
    tokens = str(value).replace(",", " ").split()
    return tuple(float(token) for token in tokens)


def _as_path(value: Any) -> str:
    return str(value).strip()


def parse_properties(text: str) -> Dict[str, str]:
    """Parse Java-properties style ``key=value`` / ``key: value`` lines."""

    values: Dict[str, str] = {}
    for lineno, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped[0] in "#!":
            continue
        separators = [idx for idx in (stripped.find("="), stripped.find(":")) if idx >= 0]
        if separators:
            idx = min(separators)
            key, value = stripped[:idx], stripped[idx + 1 :]
        else:
            parts = stripped.split(None, 1)
            if len(parts) < 2:
                raise ConfigurationError(f"Line {lineno} is not a key-value pair: {line!r}")
            key, value = parts
        key = key.strip()
        if not key:
            raise ConfigurationError(f"Line {lineno} has an empty key: {line!r}")
        values[key] = value.strip()
    return values


def _load_raw(path: Path) -> Mapping[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise NetworkIOError(f"Unable to open configuration file at {path}: {exc}") from exc
    if path.suffix in {".yml", ".yaml"}:
        import yaml

        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Malformed YAML in {path}: {exc}") from exc
    elif path.suffix == ".json":
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Malformed JSON in {path}: {exc}") from exc
    else:
        raw = parse_properties(text)
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"Configuration in {path} must be a flat mapping")
    return raw


def load_config(path: str | Path = DEFAULT_CONFIG_FILE_PATH) -> NetworkConfig:
    """Load and validate the configuration stored at ``path``."""

    path = Path(path)
    raw = _load_raw(path)
    config = NetworkConfig.from_mapping(raw, source_path=str(path))
    logger.debug("Loaded configuration for %s from %s", config.topology, path)
    return config


__all__ = [
    "DEFAULT_CONFIG_FILE_PATH",
    "NetworkConfig",
    "CaseSource",
    "WeightSource",
    "load_config",
    "parse_properties",
]
