"""Tasklet-partitioned kernels operating in place on flat float32 buffers.

Each kernel splits its output among ``n_threads`` workers the way the
in-memory processor does: at most ``total // 2`` workers run, each handling a
contiguous block, and elements past the last block are left untouched.
"""

from __future__ import annotations

from typing import List

import numpy as np

from mlpim import kernels


def tasklet_ranges(n_threads: int, total: int, clamp_zero: bool = False) -> List[range]:
    """Index ranges handled by each running tasklet, in tasklet order."""
    if n_threads <= 0:
        raise ValueError("n_threads must be positive")
    if total < 0:
        raise ValueError("total must not be negative")
    max_threads = total // 2
    if clamp_zero and max_threads == 0:
        max_threads = 1
    n_elem = total // n_threads
    if n_threads > max_threads:
        if max_threads == 0:
            raise ValueError(f"{total} elements are too few to share among tasklets")
        n_elem = total // max_threads
    running = min(n_threads, max_threads)
    return [range(t * n_elem, (t + 1) * n_elem) for t in range(running)]


def _covered(n_threads: int, total: int, clamp_zero: bool) -> int:
    ranges = tasklet_ranges(n_threads, total, clamp_zero)
    return ranges[-1].stop if ranges else 0


def _flat_out(out) -> np.ndarray:
    if not isinstance(out, np.ndarray) or out.dtype != np.float32:
        raise TypeError("out must be a float32 numpy array")
    if not out.flags.c_contiguous:
        raise ValueError("out must be C-contiguous")
    return out.reshape(-1)


def _flat_in(m, needed: int, name: str) -> np.ndarray:
    arr = np.asarray(m, dtype=np.float32).reshape(-1)
    if arr.size < needed:
        raise ValueError(f"{name} holds {arr.size} values, needs {needed}")
    return arr


def _elementwise(n_threads, out, clamp_zero, operation, *inputs) -> np.ndarray:
    flat = _flat_out(out)
    stop = _covered(n_threads, flat.size, clamp_zero)
    if stop > flat.size:
        raise ValueError("tasklet blocks run past the end of out")
    sources = [
        _flat_in(m, stop, f"input {n}")[:stop].copy() for n, m in enumerate(inputs)
    ]
    flat[:stop] = operation(*sources)
    return out


def elementwise_product(n_threads: int, a, b, out: np.ndarray) -> np.ndarray:
    """Write ``a * b`` into ``out``."""
    return _elementwise(n_threads, out, False, kernels.elementwise_product, a, b)


def subtract(n_threads: int, a, b, out: np.ndarray) -> np.ndarray:
    """Write ``a - b`` into ``out``."""
    return _elementwise(n_threads, out, False, kernels.subtract, a, b)


def sigmoid(n_threads: int, m, out: np.ndarray) -> np.ndarray:
    """Write the approximate logistic function of ``m`` into ``out``."""
    return _elementwise(n_threads, out, False, kernels.sigmoid, m)


def sigmoid_inference(n_threads: int, m, out: np.ndarray) -> np.ndarray:
    """Like ``sigmoid`` but a single element still gets one tasklet."""
    return _elementwise(n_threads, out, True, kernels.sigmoid, m)


def sigmoid_derivative(n_threads: int, m, out: np.ndarray) -> np.ndarray:
    """Write ``m * (1 - m)`` into ``out``."""
    return _elementwise(n_threads, out, False, kernels.sigmoid_derivative, m)


def relu(n_threads: int, m, out: np.ndarray) -> np.ndarray:
    """Write ``max(0, m)`` into ``out``."""
    return _elementwise(n_threads, out, False, kernels.relu, m)


def _matrix(m, rows: int, columns: int, name: str) -> np.ndarray:
    return _flat_in(m, rows * columns, name)[: rows * columns].reshape(rows, columns)


def _store(out, product: np.ndarray, n_threads: int, clamp_zero: bool) -> np.ndarray:
    flat = _flat_out(out)
    values = product.reshape(-1)
    if flat.size < values.size:
        raise ValueError(f"out holds {flat.size} values, needs {values.size}")
    stop = _covered(n_threads, values.size, clamp_zero)
    flat[:stop] = values[:stop]
    return out


def dot(n_threads, m1, m2, out, m1_rows, m1_columns, m2_columns) -> np.ndarray:
    """Write ``m1 @ m2`` into ``out`` (both row-major)."""
    left = _matrix(m1, m1_rows, m1_columns, "m1")
    right = _matrix(m2, m1_columns, m2_columns, "m2")
    return _store(out, kernels.dot(left, right), n_threads, False)


def dot_inference(n_threads, m1, m2, out, m1_rows, m1_columns, m2_columns) -> np.ndarray:
    """Like ``dot`` but a single output element still gets one tasklet."""
    left = _matrix(m1, m1_rows, m1_columns, "m1")
    right = _matrix(m2, m1_columns, m2_columns, "m2")
    return _store(out, kernels.dot(left, right), n_threads, True)


def dot_transposed(n_threads, m1, m2, out, m1_rows, m1_columns, m2_rows) -> np.ndarray:
    """Write ``m1 @ m2.T`` into ``out``; ``m2`` has ``m2_rows`` rows of ``m1_columns``."""
    left = _matrix(m1, m1_rows, m1_columns, "m1")
    right = _matrix(m2, m2_rows, m1_columns, "m2")
    return _store(out, kernels.dot_transposed(left, right), n_threads, False)


def accumulate_transposed_product(
    lr, n_threads, m1, m2, out, m1_rows, m1_columns, m2_columns
) -> np.ndarray:
    """Add ``lr * (m1.T @ m2)`` to ``out`` in place."""
    left = _matrix(m1, m1_rows, m1_columns, "m1")
    right = _matrix(m2, m1_rows, m2_columns, "m2")
    product = kernels.dot(left.T, right).reshape(-1)
    flat = _flat_out(out)
    if flat.size < product.size:
        raise ValueError(f"out holds {flat.size} values, needs {product.size}")
    stop = _covered(n_threads, product.size, False)
    flat[:stop] += np.float32(lr) * product[:stop]
    return out