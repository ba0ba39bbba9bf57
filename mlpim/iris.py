"""Iris flower measurements used to train and test the binary classifier.

Each sample has four features: sepal length, sepal width, petal length and
petal width. Labels are 0.0 for the first species and 1.0 otherwise.
"""

from __future__ import annotations

import numpy as np

TRAINING_SIZE = 122
TRAINING_DIM = 4
L1_SIZE = 8
TEST_ROWS = 28
TEST_SIZE = TRAINING_DIM * TEST_ROWS
TEST_PRED_SIZE = TEST_ROWS

_TRAINING_FEATURES = (
    (5.8, 4.0, 1.2, 0.2), (5.7, 4.4, 1.5, 0.4), (5.4, 3.9, 1.3, 0.4),
    (5.1, 3.5, 1.4, 0.3), (5.7, 3.8, 1.7, 0.3), (5.1, 3.8, 1.5, 0.3),
    (5.4, 3.4, 1.7, 0.2), (5.1, 3.7, 1.5, 0.4), (4.6, 3.6, 1.0, 0.2),
    (5.1, 3.3, 1.7, 0.5), (4.8, 3.4, 1.9, 0.2), (5.0, 3.0, 1.6, 0.2),
    (5.0, 3.4, 1.6, 0.4), (5.2, 3.5, 1.5, 0.2), (5.2, 3.4, 1.4, 0.2),
    (4.7, 3.2, 1.6, 0.2), (4.8, 3.1, 1.6, 0.2), (5.4, 3.4, 1.5, 0.4),
    (5.2, 4.1, 1.5, 0.1), (5.5, 4.2, 1.4, 0.2), (4.9, 3.1, 1.5, 0.1),
    (5.0, 3.2, 1.2, 0.2), (5.5, 3.5, 1.3, 0.2), (4.9, 3.1, 1.5, 0.1),
    (4.4, 3.0, 1.3, 0.2), (5.1, 3.4, 1.5, 0.2), (5.0, 3.5, 1.3, 0.3),
    (4.5, 2.3, 1.3, 0.3), (4.4, 3.2, 1.3, 0.2), (5.0, 3.5, 1.6, 0.6),
    (5.1, 3.8, 1.9, 0.4), (4.8, 3.0, 1.4, 0.3), (5.1, 3.8, 1.6, 0.2),
    (4.6, 3.2, 1.4, 0.2), (5.3, 3.7, 1.5, 0.2), (5.0, 3.3, 1.4, 0.2),
    (7.0, 3.2, 4.7, 1.4), (6.4, 3.2, 4.5, 1.5), (6.9, 3.1, 4.9, 1.5),
    (5.5, 2.3, 4.0, 1.3), (6.5, 2.8, 4.6, 1.5), (5.7, 2.8, 4.5, 1.3),
    (6.3, 3.3, 4.7, 1.6), (4.9, 2.4, 3.3, 1.0), (6.6, 2.9, 4.6, 1.3),
    (5.2, 2.7, 3.9, 1.4), (5.0, 2.0, 3.5, 1.0), (5.9, 3.0, 4.2, 1.5),
    (6.0, 2.2, 4.0, 1.0), (6.1, 2.9, 4.7, 1.4), (5.6, 2.9, 3.6, 1.3),
    (6.7, 3.1, 4.4, 1.4), (5.6, 3.0, 4.5, 1.5), (5.8, 2.7, 4.1, 1.0),
    (6.2, 2.2, 4.5, 1.5), (5.6, 2.5, 3.9, 1.1), (5.9, 3.2, 4.8, 1.8),
    (6.1, 2.8, 4.0, 1.3), (6.3, 2.5, 4.9, 1.5), (6.1, 2.8, 4.7, 1.2),
    (6.4, 2.9, 4.3, 1.3), (6.6, 3.0, 4.4, 1.4), (6.8, 2.8, 4.8, 1.4),
    (6.7, 3.0, 5.0, 1.7), (6.0, 2.9, 4.5, 1.5), (5.7, 2.6, 3.5, 1.0),
    (5.5, 2.4, 3.8, 1.1), (5.5, 2.4, 3.7, 1.0), (5.8, 2.7, 3.9, 1.2),
    (6.0, 2.7, 5.1, 1.6), (5.4, 3.0, 4.5, 1.5), (6.0, 3.4, 4.5, 1.6),
    (6.7, 3.1, 4.7, 1.5), (6.3, 2.3, 4.4, 1.3), (5.6, 3.0, 4.1, 1.3),
    (5.5, 2.5, 4.0, 1.3), (5.5, 2.6, 4.4, 1.2), (6.1, 3.0, 4.6, 1.4),
    (5.8, 2.6, 4.0, 1.2), (5.0, 2.3, 3.3, 1.0), (5.6, 2.7, 4.2, 1.3),
    (5.7, 3.0, 4.2, 1.2), (5.7, 2.9, 4.2, 1.3), (6.2, 2.9, 4.3, 1.3),
    (5.1, 2.5, 3.0, 1.1), (5.7, 2.8, 4.1, 1.3), (6.3, 3.3, 6.0, 2.5),
    (5.8, 2.7, 5.1, 1.9), (7.1, 3.0, 5.9, 2.1), (6.3, 2.9, 5.6, 1.8),
    (6.5, 3.0, 5.8, 2.2), (7.6, 3.0, 6.6, 2.1), (4.9, 2.5, 4.5, 1.7),
    (7.3, 2.9, 6.3, 1.8), (6.7, 2.5, 5.8, 1.8), (7.2, 3.6, 6.1, 2.5),
    (6.5, 3.2, 5.1, 2.0), (6.4, 2.7, 5.3, 1.9), (6.8, 3.0, 5.5, 2.1),
    (5.7, 2.5, 5.0, 2.0), (5.8, 2.8, 5.1, 2.4), (6.4, 3.2, 5.3, 2.3),
    (6.5, 3.0, 5.5, 1.8), (7.7, 3.8, 6.7, 2.2), (7.7, 2.6, 6.9, 2.3),
    (6.0, 2.2, 5.0, 1.5), (6.9, 3.2, 5.7, 2.3), (5.6, 2.8, 4.9, 2.0),
    (7.7, 2.8, 6.7, 2.0), (6.3, 2.7, 4.9, 1.8), (6.7, 3.3, 5.7, 2.1),
    (7.2, 3.2, 6.0, 1.8), (6.2, 2.8, 4.8, 1.8), (6.1, 3.0, 4.9, 1.8),
    (6.4, 2.8, 5.6, 2.1), (7.2, 3.0, 5.8, 1.6), (7.4, 2.8, 6.1, 1.9),
    (7.9, 3.8, 6.4, 2.0), (6.4, 2.8, 5.6, 2.2), (6.3, 2.8, 5.1, 1.5),
    (6.1, 2.6, 5.6, 1.4), (7.7, 3.0, 6.1, 2.3),
)

_TRAINING_ZEROS = 36
_DPU_TRAINING_ZEROS = 42

_TEST_FEATURES = (
    (5.1, 3.5, 1.4, 0.2), (4.9, 3.0, 1.4, 0.2), (4.7, 3.2, 1.3, 0.2),
    (4.6, 3.1, 1.5, 0.2), (5.0, 3.6, 1.4, 0.2), (5.4, 3.9, 1.7, 0.4),
    (4.6, 3.4, 1.4, 0.3), (5.0, 3.4, 1.5, 0.2), (4.4, 2.9, 1.4, 0.2),
    (4.9, 3.1, 1.5, 0.1), (5.4, 3.7, 1.5, 0.2), (4.8, 3.4, 1.6, 0.2),
    (4.8, 3.0, 1.4, 0.1), (4.3, 3.0, 1.1, 0.1), (6.3, 3.4, 5.6, 2.4),
    (6.4, 3.1, 5.5, 1.8), (6.0, 3.0, 4.8, 1.8), (6.9, 3.1, 5.4, 2.1),
    (6.7, 3.1, 5.6, 2.4), (6.9, 3.1, 5.1, 2.3), (5.8, 2.7, 5.1, 1.9),
    (6.8, 3.2, 5.9, 2.3), (6.7, 3.3, 5.7, 2.5), (6.7, 3.0, 5.2, 2.3),
    (6.3, 2.5, 5.0, 1.9), (6.5, 3.0, 5.2, 2.0), (6.2, 3.4, 5.4, 2.3),
    (5.9, 3.0, 5.1, 1.8),
)

_TEST_ZEROS = 14

_DPU_TEST_FEATURES = (
    (6.0, 1.9, 4.5, 1.5), (4.3, 3.0, 1.1, 0.1), (5.0, 1.0, 3.5, 1.0),
    (6.3, 1.8, 5.1, 1.5), (5.1, 3.8, 1.5, 0.3), (5.6, 1.9, 3.6, 1.3),
    (4.5, 1.3, 1.3, 0.3), (6.7, 3.0, 5.2, 1.3), (4.4, 3.2, 1.3, 0.2),
    (6.7, 3.1, 5.6, 1.4), (5.0, 3.2, 1.2, 0.2), (5.6, 3.0, 4.5, 1.5),
    (6.1, 1.8, 4.7, 1.2), (4.8, 3.4, 1.6, 0.2), (5.8, 1.6, 4.0, 1.2),
    (5.7, 1.9, 4.2, 1.3), (6.3, 1.7, 4.9, 1.8), (6.7, 3.0, 5.0, 1.7),
    (6.5, 1.8, 4.6, 1.5), (6.9, 3.1, 5.4, 1.1), (6.1, 3.0, 4.9, 1.8),
    (4.8, 3.1, 1.6, 0.2), (6.4, 3.1, 5.5, 1.8), (7.3, 1.9, 6.3, 1.8),
    (6.7, 3.1, 4.4, 1.4), (7.7, 3.8, 6.7, 1.2), (4.8, 3.0, 1.4, 0.3),
    (6.3, 3.4, 5.6, 1.4),
)

_DPU_TEST_LABELS = (
    1, 0, 1, 1, 0, 1, 0, 1, 0, 1, 0, 1, 1, 0,
    1, 1, 1, 1, 1, 1, 1, 0, 1, 1, 1, 1, 0, 1,
)


def _matrix(rows) -> np.ndarray:
    return np.array(rows, dtype=np.float32)


def _step_labels(zeros: int, total: int) -> np.ndarray:
    labels = np.ones(total, dtype=np.float32)
    labels[:zeros] = 0.0
    return labels


def training_features() -> np.ndarray:
    """The 122 x 4 training matrix, row-major float32."""
    return _matrix(_TRAINING_FEATURES)


def training_labels() -> np.ndarray:
    """Labels of the training rows for the sequential trainer."""
    return _step_labels(_TRAINING_ZEROS, TRAINING_SIZE)


def test_features() -> np.ndarray:
    """The 28 x 4 test matrix used by the sequential trainer."""
    return _matrix(_TEST_FEATURES)


def test_labels() -> np.ndarray:
    """Expected labels of the sequential trainer's test rows."""
    return _step_labels(_TEST_ZEROS, TEST_ROWS)


def dpu_training_labels() -> np.ndarray:
    """Labels of the training rows as used by the single-DPU trainer."""
    return _step_labels(_DPU_TRAINING_ZEROS, TRAINING_SIZE)


def dpu_test_features() -> np.ndarray:
    """The 28 x 4 test matrix used by the single-DPU trainer."""
    return _matrix(_DPU_TEST_FEATURES)


def dpu_test_labels() -> np.ndarray:
    """Expected labels of the single-DPU trainer's test rows."""
    return np.array(_DPU_TEST_LABELS, dtype=np.float32)