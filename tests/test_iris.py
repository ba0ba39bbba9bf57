import numpy as np
import pytest

from mlpim import iris


@pytest.mark.parametrize(
    "features, rows",
    [
        (iris.training_features, iris.TRAINING_SIZE),
        (iris.test_features, iris.TEST_ROWS),
        (iris.dpu_test_features, iris.TEST_ROWS),
    ],
)
def test_feature_shapes_and_dtype(features, rows):
    matrix = features()
    assert matrix.shape == (rows, iris.TRAINING_DIM)
    assert matrix.dtype == np.float32
    assert np.all(matrix > 0)


@pytest.mark.parametrize(
    "labels, rows",
    [
        (iris.training_labels, iris.TRAINING_SIZE),
        (iris.test_labels, iris.TEST_ROWS),
        (iris.dpu_training_labels, iris.TRAINING_SIZE),
        (iris.dpu_test_labels, iris.TEST_ROWS),
    ],
)
def test_labels_are_binary(labels, rows):
    values = labels()
    assert values.shape == (rows,)
    assert values.dtype == np.float32
    assert set(np.unique(values).tolist()) == {0.0, 1.0}


@pytest.mark.parametrize(
    "features, labels",
    [
        (iris.training_features, iris.training_labels),
        (iris.test_features, iris.test_labels),
        (iris.dpu_test_features, iris.dpu_test_labels),
    ],
)
def test_label_zero_matches_short_petals(features, labels):
    petal_length = features()[:, 2]
    assert np.array_equal(labels() == 0.0, petal_length < 2.5)


@pytest.mark.parametrize(
    "labels",
    [iris.training_labels, iris.test_labels, iris.dpu_training_labels],
)
def test_sequential_labels_are_sorted(labels):
    values = labels()
    assert np.array_equal(values, np.sort(values))


def test_dpu_training_labels_have_more_zeros():
    assert (iris.dpu_training_labels() == 0).sum() > (iris.training_labels() == 0).sum()
    assert (iris.dpu_training_labels() <= iris.training_labels()).all()


def test_first_training_row():
    np.testing.assert_allclose(
        iris.training_features()[0], np.array([5.8, 4.0, 1.2, 0.2], dtype=np.float32)
    )


def test_returns_fresh_copies():
    first = iris.training_features()
    first[:] = -1.0
    assert np.all(iris.training_features() > 0)
    labels = iris.dpu_test_labels()
    labels[:] = 7.0
    assert iris.dpu_test_labels().max() == 1.0