import io
import json

import numpy as np
import pytest

from nlayernet.config import NetworkConfig
from nlayernet.core.errors import DataShapeError, MismatchError
from nlayernet.core.types import StopReason
from nlayernet.reporting.console import ConsoleReporter
from nlayernet.training.pipeline import run_pipeline


def test_train_save_and_run(training_values):
    stream = io.StringIO()
    config = NetworkConfig.from_mapping(training_values)
    result = run_pipeline(config, ConsoleReporter(stream))

    assert result.training is not None
    assert result.training.iterations == 200
    assert result.training.reason is StopReason.ITERATION_LIMIT
    assert result.evaluation is not None
    assert result.evaluation.outputs.shape == (4, 3)
    assert result.weights_path == training_values["saveWeightsFilePath"]

    text = stream.getvalue()
    for header in [
        "NETWORK CONFIGURATIONS",
        "TRAINING PARAMETERS",
        "INPUT TABLE",
        "TRAINING RESULTS",
        "RUN RESULTS",
        "TRUTH TABLE",
    ]:
        assert f"---------{header}---------" in text
    assert "Iteration 50, Error = " in text
    assert "Iteration 200, Error = " in text
    assert "Reason: Iteration limit reached." in text


def test_saved_weights_reload_into_an_inference_run(training_values, tmp_path):
    trained = run_pipeline(NetworkConfig.from_mapping(training_values))

    run_values = {
        "networkConfig": "2-4-3-3",
        "weightConfig": "Load",
        "loadWeightsFilePath": trained.weights_path,
        "isTraining": "false",
        "numTestCases": "4",
        "inputsFilePath": training_values["inputsFilePath"],
        "printHiddenActivations": "true",
    }
    stream = io.StringIO()
    rerun = run_pipeline(NetworkConfig.from_mapping(run_values), ConsoleReporter(stream))
    assert rerun.training is None
    assert np.array_equal(rerun.evaluation.outputs, trained.evaluation.outputs)
    text = stream.getvalue()
    assert "INPUTS AND OUTPUTS" in text
    assert "HIDDEN ACTIVATIONS" in text
    assert "TRAINING RESULTS" not in text


def test_manual_weights_reproduce_the_forward_scenario(tmp_path):
    inputs = tmp_path / "inputs.txt"
    inputs.write_text("1 0")
    config = NetworkConfig.from_mapping(
        {
            "networkConfig": "2-2-1",
            "weightConfig": "Manual",
            "manualWeights": "0.1 0.2 0.3 0.4 0.5 0.6",
            "isTraining": "false",
            "numTestCases": "1",
            "inputsFilePath": str(inputs),
        }
    )
    result = run_pipeline(config)
    assert result.evaluation.outputs[0, 0] == pytest.approx(0.64392, abs=1e-4)


def test_training_without_run_after_training(training_values):
    values = dict(training_values, runAfterTraining="false", saveWeightsToFile="false")
    result = run_pipeline(NetworkConfig.from_mapping(values))
    assert result.evaluation is None
    assert result.weights_path is None


def test_metrics_and_plot_artifacts(training_values, tmp_path):
    values = dict(
        training_values,
        maxIterations="30",
        metricsFilePath=str(tmp_path / "run" / "metrics.jsonl"),
        plotFilePath=str(tmp_path / "run" / "loss.png"),
    )
    result = run_pipeline(NetworkConfig.from_mapping(values))
    records = [json.loads(line) for line in open(result.metrics_path).read().splitlines() if line]
    assert [r["iteration"] for r in records] == list(range(1, 31))
    assert all(r["seed"] == 5 for r in records)
    assert records[-1]["average_error"] == pytest.approx(result.training.average_error)
    assert (tmp_path / "run" / "loss.png").exists()


def test_mismatched_weights_abort_the_run(training_values, tmp_path):
    run_pipeline(NetworkConfig.from_mapping(training_values))
    values = dict(
        training_values,
        networkConfig="2-4-2-3",
        weightConfig="Load",
        loadWeightsFilePath=training_values["saveWeightsFilePath"],
    )
    with pytest.raises(MismatchError):
        run_pipeline(NetworkConfig.from_mapping(values))


def test_short_output_file_aborts_the_run(training_values, xor_files):
    _, outputs = xor_files
    outputs.write_text("0 0 0\n0 1 1\n")
    with pytest.raises(DataShapeError):
        run_pipeline(NetworkConfig.from_mapping(training_values))


def test_manual_test_cases_train_without_case_files(training_values):
    values = dict(
        training_values,
        testCaseConfig="Manual",
        manualInputs="0 0 0 1 1 0 1 1",
        manualOutputs="0 0 0  0 1 1  0 1 1  1 1 0",
        saveWeightsToFile="false",
    )
    del values["inputsFilePath"], values["outputsFilePath"]
    stream = io.StringIO()
    result = run_pipeline(NetworkConfig.from_mapping(values), ConsoleReporter(stream))

    from_files = run_pipeline(
        NetworkConfig.from_mapping(dict(training_values, saveWeightsToFile="false"))
    )
    assert np.array_equal(result.cases.inputs, from_files.cases.inputs)
    assert np.array_equal(result.cases.expected, from_files.cases.expected)
    assert np.array_equal(result.evaluation.outputs, from_files.evaluation.outputs)
    assert "Test Case Configuration: Manual" in stream.getvalue()


def test_too_few_manual_values_abort_the_run(training_values):
    values = dict(
        training_values,
        testCaseConfig="Manual",
        manualInputs="0 0 0 1 1 0 1 1",
        manualOutputs="0 0 0 0 1 1",
    )
    with pytest.raises(DataShapeError, match="manualOutputs"):
        run_pipeline(NetworkConfig.from_mapping(values))
