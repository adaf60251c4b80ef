"""Pipeline assembly: configuration in, trained or evaluated network out."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from ..config import CaseSource, NetworkConfig, WeightSource
from ..core.errors import ConfigurationError
from ..core.network import Network
from ..core.types import CaseSet, EvaluationResult, TrainResult
from ..data.cases import load_cases, manual_cases
from ..data.weights import load_weights, save_weights
from ..reporting.console import ConsoleReporter
from ..reporting.metrics import JsonlSink
from ..reporting.plots import PlotAdapter
from .trainer import Trainer, evaluate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Everything a run produced."""

    network: Network
    cases: CaseSet
    training: Optional[TrainResult] = None
    evaluation: Optional[EvaluationResult] = None
    weights_path: Optional[str] = None
    metrics_path: Optional[str] = None
    plot_path: Optional[str] = None


def build_network(config: NetworkConfig) -> Network:
    return Network(
        config.topology,
        activation=config.activation,
        lambda_value=config.lambda_value,
        training=config.is_training,
    )


def populate_weights(
    network: Network, config: NetworkConfig, rng: np.random.Generator | None = None
) -> None:
    """Fill ``network`` according to ``config.weight_source``."""

    source = config.weight_source
    if source is WeightSource.RANDOM:
        rng = rng if rng is not None else np.random.default_rng(config.random_seed)
        network.fill_random(config.random_weight_min, config.random_weight_max, rng)
    elif source is WeightSource.LOAD:
        load_weights(network, config.load_weights_file_path)
    elif source is WeightSource.MANUAL:
        network.set_flat_weights(config.manual_weights)
    else:  # pragma: no cover - guardrail
        raise ConfigurationError(f"Unhandled weight source: {source}")
    logger.debug("Populated weights for %s from %s", network.topology, source.value)


def load_run_cases(config: NetworkConfig) -> CaseSet:
    """Read the cases from files or build them from inline configuration values."""

    source = config.test_case_source
    if source is CaseSource.FILE:
        outputs_path = config.outputs_file_path if config.needs_expected_outputs else None
        return load_cases(
            config.topology,
            config.num_test_cases,
            config.inputs_file_path,
            outputs_path,
        )
    if source is CaseSource.MANUAL:
        expected = config.manual_outputs if config.needs_expected_outputs else None
        return manual_cases(
            config.topology, config.num_test_cases, config.manual_inputs, expected
        )
    raise ConfigurationError(f"Unhandled test case source: {source}")  # pragma: no cover


def run_pipeline(
    config: NetworkConfig,
    reporter: ConsoleReporter | None = None,
    *,
    rng: np.random.Generator | None = None,
) -> PipelineResult:
    """Allocate, populate, train and/or run the network described by ``config``.

    With ``reporter`` set, the same sections the console front end prints are
    emitted along the way; errors propagate unchanged.
    """

    if reporter is not None:
        reporter.network_configs(config)
        if config.is_training:
            reporter.training_parameters(config)

    network = build_network(config)
    populate_weights(network, config, rng)
    cases = load_run_cases(config)

    if reporter is not None and config.print_input_table:
        reporter.input_table(cases)

    training: Optional[TrainResult] = None
    weights_path: Optional[str] = None
    metrics_path: Optional[str] = None
    plot_path: Optional[str] = None
    should_run = True

    if config.is_training:
        callbacks: List[object] = []
        if config.metrics_file_path:
            sink = JsonlSink(config.metrics_file_path, seed=config.random_seed)
            callbacks.append(sink)
            metrics_path = str(sink.path)
        plotter = None
        if config.plot_file_path:
            plotter = PlotAdapter(config.plot_file_path, enable_plots=True)
            callbacks.append(plotter)

        trainer = Trainer(
            network,
            max_iterations=config.max_iterations,
            error_threshold=config.error_threshold,
            keep_alive=config.keep_alive,
            callbacks=callbacks,
        )
        progress = reporter.keep_alive if reporter is not None else None
        training = trainer.run(cases, progress=progress)
        if plotter is not None:
            plot_path = plotter.close()

        if reporter is not None:
            reporter.train_results(
                training, network, print_weights=config.print_network_specifics
            )
        if config.save_weights_to_file:
            weights_path = save_weights(network, config.save_weights_file_path)
            if reporter is not None:
                reporter.saved_weights(weights_path)
        should_run = config.run_after_training

    evaluation: Optional[EvaluationResult] = None
    if should_run:
        evaluation = evaluate(network, cases)
        if reporter is not None:
            reporter.run_results(evaluation, cases, network, config)

    return PipelineResult(
        network=network,
        cases=cases,
        training=training,
        evaluation=evaluation,
        weights_path=weights_path,
        metrics_path=metrics_path,
        plot_path=plot_path,
    )


__all__ = ["PipelineResult", "build_network", "load_run_cases", "populate_weights", "run_pipeline"]
