"""Human-readable console output for training and running a network."""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from ..config import NetworkConfig, WeightSource
from ..core.network import Network
from ..core.types import CaseSet, EvaluationResult, TrainResult


def _row(values, fmt: str) -> str:
    return "".join(fmt % value for value in values)


class ConsoleReporter:
    """Print the report sections of a run to ``stream`` (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream

    def _print(self, *args, **kwargs) -> None:
        print(*args, file=self.stream or sys.stdout, **kwargs)

    def _header(self, title: str) -> None:
        self._print(f"\n---------{title}---------")

    def network_configs(self, config: NetworkConfig) -> None:
        self._header("NETWORK CONFIGURATIONS")
        self._print(f"Configurations File Path: {config.source_path}")
        self._print(f"Test Cases Input File Path: {config.inputs_file_path}")
        self._print(f"Test Cases Output File Path: {config.outputs_file_path}")
        self._print(f"Network Config: {config.topology}")
        self._print(f"Activation Function: {config.activation.value}")
        self._print(f"Print Network Specifics: {config.print_network_specifics}")
        self._print(f"Print Input Table: {config.print_input_table}")
        self._print(f"Print Truth Table: {config.print_truth_table}")
        self._print(f"Print Hidden Activations: {config.print_hidden_activations}")
        self._print(f"Keep Alive Iterations: {config.keep_alive}")
        self._print(f"Weight Configuration: {config.weight_source.value}")
        self._print(f"Test Case Configuration: {config.test_case_source.value}")
        self._print(f"Mode: {'Training' if config.is_training else 'Running'}")
        self._print(f"Run After Training: {config.run_after_training}")
        self._print(f"Number of Test Cases: {config.num_test_cases}")

    def training_parameters(self, config: NetworkConfig) -> None:
        self._header("TRAINING PARAMETERS")
        if config.weight_source is WeightSource.RANDOM:
            self._print(
                f"Random Weight Range: {config.random_weight_min} to {config.random_weight_max}"
            )
        self._print(f"Max Iterations: {config.max_iterations}")
        self._print(f"Error Threshold: {config.error_threshold}")
        self._print(f"Lambda Value: {config.lambda_value}")

    def input_table(self, cases: CaseSet) -> None:
        self._header("INPUT TABLE")
        self._print("Inputs")
        for inputs in cases.inputs:
            self._print("[" + _row(inputs, "%.2f ") + "]")

    def keep_alive(self, iteration: int, average_error: float) -> None:
        self._print(f"Iteration {iteration}, Error = {average_error:f}")

    def train_results(
        self, result: TrainResult, network: Network, *, print_weights: bool = False
    ) -> None:
        self._header("TRAINING RESULTS")
        self._print(f"Iterations: {result.iterations}")
        self._print(f"Final Average Error: {result.average_error:.6f}")
        self._print(f"Training Time: {result.elapsed * 1000.0:.0f} milliseconds")
        self._print(f"Reason: {result.reason.value.capitalize()}.")
        if print_weights:
            self.network_weights(network)

    def run_results(
        self,
        evaluation: EvaluationResult,
        cases: CaseSet,
        network: Network,
        config: NetworkConfig,
    ) -> None:
        self._header("RUN RESULTS")
        self._print(f"Run Time: {evaluation.elapsed * 1000.0:.0f} milliseconds")
        if config.print_network_specifics:
            self.network_weights(network)
        if config.print_truth_table and cases.expected is not None:
            self.truth_table(evaluation, cases)
        else:
            self.inputs_and_outputs(evaluation, cases)
        if config.print_hidden_activations:
            self.hidden_activations(evaluation, network)

    def truth_table(self, evaluation: EvaluationResult, cases: CaseSet) -> None:
        self._header("TRUTH TABLE")
        self._print("Inputs | Expected Outputs | Actual Outputs")
        for inputs, expected, actual in zip(cases.inputs, cases.expected, evaluation.outputs):
            self._print(
                "["
                + _row(inputs, "%.2f ")
                + "|"
                + _row(expected, " %.2f")
                + " |"
                + _row(actual, " %.4f")
                + "]"
            )

    def inputs_and_outputs(self, evaluation: EvaluationResult, cases: CaseSet) -> None:
        self._header("INPUTS AND OUTPUTS")
        self._print("Inputs | Outputs")
        for inputs, actual in zip(cases.inputs, evaluation.outputs):
            self._print("[" + _row(inputs, "%.2f ") + "|" + _row(actual, " %.17f") + "]")

    def network_weights(self, network: Network) -> None:
        self._header("NETWORK WEIGHTS")
        for n, W in enumerate(network.weights):
            for k in range(W.shape[0]):
                for j in range(W.shape[1]):
                    self._print(f"weights[{n}][{k}][{j}]: {W[k, j]:.4f}")

    def hidden_activations(self, evaluation: EvaluationResult, network: Network) -> None:
        self._header("HIDDEN ACTIVATIONS")
        first = network.topology.first_hidden
        for case_index, layers in enumerate(evaluation.hidden):
            self._print(f"Case {case_index}")
            for offset, values in enumerate(layers):
                for k, value in enumerate(values):
                    self._print(f"a[{first + offset}][{k}]: {value:.4f}")

    def saved_weights(self, path: str) -> None:
        self._print(f"\nWeights saved to {path}")


__all__ = ["ConsoleReporter"]
