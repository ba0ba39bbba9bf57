import numpy as np
import pytest

from mlpim import cli, dpu_training, iris, kernels


@pytest.fixture(scope="module")
def iris_run():
    return cli.train_iris(1)


@pytest.fixture(scope="module")
def iris_dpu_run():
    return cli.train_iris_dpu(1, 16)


@pytest.fixture(scope="module")
def grid_run():
    return cli.partitioned_inference()


def test_train_iris_shapes(iris_run):
    assert iris_run.trained.w0.shape == (4, 8)
    assert iris_run.trained.w1.shape == (8, 1)
    assert iris_run.trained.predictions.shape == (122, 1)
    assert iris_run.test_predictions.shape == (28, 1)


def test_train_iris_test_predictions_match_forward(iris_run):
    expected = kernels.forward(iris.test_features(), iris_run.trained.w0, iris_run.trained.w1)
    np.testing.assert_array_equal(iris_run.test_predictions, expected)


def test_train_iris_predictions_are_probabilities(iris_run):
    values = iris_run.test_predictions
    assert np.all(values > 0.0)
    assert np.all(values < 1.0)
    assert iris_run.training_ms >= 0.0
    assert iris_run.testing_ms >= 0.0


def test_train_iris_is_deterministic(iris_run):
    again = cli.train_iris(1)
    np.testing.assert_array_equal(again.trained.w0, iris_run.trained.w0)
    np.testing.assert_array_equal(again.test_predictions, iris_run.test_predictions)


def test_train_iris_dpu_matches_processor_test(iris_dpu_run):
    expected = dpu_training.test(
        16, iris.dpu_test_features(), iris_dpu_run.trained.w0, iris_dpu_run.trained.w1
    )
    np.testing.assert_array_equal(iris_dpu_run.test_predictions, expected)
    assert iris_dpu_run.test_predictions.shape == (28, 1)


def test_train_iris_dpu_rejects_no_tasklets():
    with pytest.raises(ValueError):
        cli.train_iris_dpu(1, 0)


def test_sequential_inference_small():
    run = cli.sequential_inference(6, 4, 3, 2, 1)
    assert run.predictions.shape == (6, 1)
    assert np.all((run.predictions > 0.0) & (run.predictions < 1.0))


def test_sequential_inference_deterministic():
    first = cli.sequential_inference(5, 3, 4, 2, 7)
    second = cli.sequential_inference(5, 3, 4, 2, 7)
    np.testing.assert_array_equal(first.predictions, second.predictions)


def test_sequential_inference_rejects_empty():
    with pytest.raises(ValueError):
        cli.sequential_inference(0, 4, 3, 2, 1)


def test_partitioned_inference_zero_weights_give_sigmoid_of_zero(grid_run):
    assert grid_run.predictions.shape == (128,)
    expected = kernels.sigmoid(np.zeros(128, dtype=np.float32))
    np.testing.assert_array_equal(grid_run.predictions, expected)


def test_partitioned_inference_rejects_no_tasklets():
    with pytest.raises(ValueError):
        cli.partitioned_inference(n_tasklets=0)


def test_main_iris_prints_times(capsys):
    assert cli.main(["iris"]) == 0
    output = capsys.readouterr().out
    assert "Training time (ms): " in output
    assert "Testing time (ms): " in output


def test_main_inference_prints_repeated_predictions(capsys):
    assert cli.main(["inference", "--size", "3", "--dim", "2", "--l1", "2", "--l2", "2"]) == 0
    output = capsys.readouterr().out
    assert output.count("KTEST Prediction[") == 6
    assert "MLP Sequential Version Time (ms): " in output


def test_main_partitioned_prints_every_prediction(capsys):
    assert cli.main(["partitioned"]) == 0
    output = capsys.readouterr().out
    assert "Prediction values are: " in output
    assert output.count("Prediction[") == 128


def test_main_reports_invalid_size(capsys):
    assert cli.main(["inference", "--size", "0"]) == 1
    assert "must be positive" in capsys.readouterr().err


def test_main_requires_command():
    with pytest.raises(SystemExit):
        cli.main([])