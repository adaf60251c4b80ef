import pytest


@pytest.fixture
def xor_files(tmp_path):
    inputs = tmp_path / "inputs.txt"
    inputs.write_text("0 0\n0 1\n1 0\n1 1\n")
    outputs = tmp_path / "outputs.txt"
    outputs.write_text("0 0 0\n0 1 1\n0 1 1\n1 1 0\n")
    return inputs, outputs


@pytest.fixture
def training_values(tmp_path, xor_files):
    inputs, outputs = xor_files
    return {
        "networkConfig": "2-4-3-3",
        "weightConfig": "Random",
        "randomWeightMin": "-1.0",
        "randomWeightMax": "1.0",
        "randomSeed": "5",
        "isTraining": "true",
        "runAfterTraining": "true",
        "maxIterations": "200",
        "errorThreshold": "0.0002",
        "lambdaValue": "0.3",
        "keepAlive": "50",
        "numTestCases": "4",
        "inputsFilePath": str(inputs),
        "outputsFilePath": str(outputs),
        "saveWeightsToFile": "true",
        "saveWeightsFilePath": str(tmp_path / "out" / "weights.bin"),
        "printInputTable": "true",
        "printTruthTable": "true",
    }
