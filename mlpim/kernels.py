"""Sequential float32 MLP kernels: activations, products, training and inference."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

TRAINING_SIZE = 61440
TRAINING_DIM = 512
L1_SIZE = 128
L2_SIZE = 64
OUTPUT_SIZE = 1

_EXP_A = 1512775
_EXP_C = 68243
_EXP_BIAS = 1072693248 - _EXP_C
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def fast_exp(y):
    """Bit-level approximation of exp for integer arguments.

    The high 32-bit word of a double is set to ``EXP_A * y + bias`` with the
    low word zero; overflow wraps as 32-bit integer arithmetic would.
    """
    scalar = np.ndim(y) == 0
    ints = np.atleast_1d(np.asarray(y, dtype=np.int64))
    high = ((_EXP_A * ints + _EXP_BIAS) & 0xFFFFFFFF).astype(np.uint64)
    result = (high << np.uint64(32)).view(np.float64)
    return float(result[0]) if scalar else result


def _as_array(m) -> np.ndarray:
    return np.asarray(m, dtype=np.float32)


def _as_matrix(m, name: str) -> np.ndarray:
    arr = _as_array(m)
    if arr.ndim != 2:
        raise ValueError(f"{name} must be a 2-D matrix, got {arr.ndim} dimensions")
    return arr


def sigmoid(m) -> np.ndarray:
    """Logistic function using ``fast_exp`` of the truncated negated input."""
    arr = _as_array(m)
    exponent = np.clip(np.trunc(-arr.astype(np.float64)), _INT32_MIN, _INT32_MAX)
    e = fast_exp(exponent.astype(np.int64).reshape(-1)).reshape(arr.shape)
    return (1.0 / (1.0 + e)).astype(np.float32)


def sigmoid_derivative(m) -> np.ndarray:
    """Derivative of the logistic function given its output ``m``."""
    arr = _as_array(m)
    return arr * (np.float32(1) - arr)


def elementwise_product(a, b) -> np.ndarray:
    """Hadamard product of two equally shaped arrays."""
    a, b = _as_array(a), _as_array(b)
    if a.shape != b.shape:
        raise ValueError(f"shape mismatch: {a.shape} and {b.shape}")
    return a * b


def subtract(a, b) -> np.ndarray:
    """Elementwise difference ``a - b``."""
    a, b = _as_array(a), _as_array(b)
    if a.shape != b.shape:
        raise ValueError(f"shape mismatch: {a.shape} and {b.shape}")
    return a - b


def relu(m) -> np.ndarray:
    """Rectified linear unit."""
    return np.maximum(_as_array(m), np.float32(0))


def _accumulate(left: np.ndarray, right: np.ndarray) -> np.ndarray:
    """Matrix product summed in float32 one inner index at a time."""
    out = np.zeros((left.shape[0], right.shape[1]), dtype=np.float32)
    for column, row in zip(left.T, right):
        out += np.outer(column, row)
    return out


def dot(m1, m2) -> np.ndarray:
    """Matrix product ``m1 @ m2``."""
    m1, m2 = _as_matrix(m1, "m1"), _as_matrix(m2, "m2")
    if m1.shape[1] != m2.shape[0]:
        raise ValueError(f"cannot multiply {m1.shape} by {m2.shape}")
    return _accumulate(m1, m2)


def dot_transposed(m1, m2) -> np.ndarray:
    """Product ``m1 @ m2.T`` where both matrices are stored row-major."""
    m1, m2 = _as_matrix(m1, "m1"), _as_matrix(m2, "m2")
    if m1.shape[1] != m2.shape[1]:
        raise ValueError(f"cannot multiply {m1.shape} by transpose of {m2.shape}")
    return _accumulate(m1, m2.T)


def accumulate_transposed_product(lr, m1, m2, out: np.ndarray) -> np.ndarray:
    """Add ``lr * (m1.T @ m2)`` to ``out`` in place and return it."""
    m1, m2 = _as_matrix(m1, "m1"), _as_matrix(m2, "m2")
    if not isinstance(out, np.ndarray) or out.dtype != np.float32:
        raise TypeError("out must be a float32 numpy array")
    if m1.shape[0] != m2.shape[0]:
        raise ValueError(f"row count mismatch: {m1.shape} and {m2.shape}")
    if out.shape != (m1.shape[1], m2.shape[1]):
        raise ValueError(
            f"out has shape {out.shape}, expected {(m1.shape[1], m2.shape[1])}"
        )
    out += np.float32(lr) * _accumulate(m1.T, m2)
    return out


class FitResult(NamedTuple):
    """Trained weights together with the final forward pass."""

    w0: np.ndarray
    w1: np.ndarray
    hidden: np.ndarray
    predictions: np.ndarray


def fit(x, y, w0, w1, lr: float = 0.1, epochs: int = 500) -> FitResult:
    """Train a one-hidden-layer sigmoid network by full-batch backpropagation.

    The given weights are copied; the trained copies are returned.
    """
    x = _as_matrix(x, "x")
    w0 = np.array(_as_matrix(w0, "w0"), dtype=np.float32, copy=True)
    w1 = np.array(_as_matrix(w1, "w1"), dtype=np.float32, copy=True)
    if w0.shape[0] != x.shape[1]:
        raise ValueError(f"w0 has {w0.shape[0]} rows, x has {x.shape[1]} columns")
    if w1.shape[0] != w0.shape[1]:
        raise ValueError(f"w1 has {w1.shape[0]} rows, w0 has {w0.shape[1]} columns")
    y = _as_array(y)
    if y.size != x.shape[0] * w1.shape[1]:
        raise ValueError(f"y has {y.size} values, expected {x.shape[0] * w1.shape[1]}")
    y = y.reshape(x.shape[0], w1.shape[1])
    if epochs < 0:
        raise ValueError("epochs must not be negative")

    for _ in range(epochs):
        hidden = sigmoid(dot(x, w0))
        pred = sigmoid(dot(hidden, w1))
        pred_delta = elementwise_product(subtract(y, pred), sigmoid_derivative(pred))
        hidden_delta = elementwise_product(
            dot_transposed(pred_delta, w1), sigmoid_derivative(hidden)
        )
        accumulate_transposed_product(lr, hidden, pred_delta, w1)
        accumulate_transposed_product(lr, x, hidden_delta, w0)

    hidden = sigmoid(dot(x, w0))
    pred = sigmoid(dot(hidden, w1))
    return FitResult(w0, w1, hidden, pred)


def forward(x, *args) -> np.ndarray:
    """Run ``x`` through sigmoid layers with the given weight matrices."""
    if not args:
        raise ValueError("at least one weight matrix is required")
    layer = _as_matrix(x, "x")
    for weights in args:
        layer = sigmoid(dot(layer, weights))
    return layer