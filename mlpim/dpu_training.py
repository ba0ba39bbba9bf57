"""Training and testing the iris classifier the way a single in-memory processor runs it.

Main memory is modelled as fixed-size float32 buffers of ``NR_ELEM_PER_DPU``
values. Every matrix product first copies its operands into two working-memory
caches in chunks of at most ``MAX_READ_ELEMENTS`` values, then computes from
the caches. The second operand's chunk count is derived from the first
operand's chunk size, so a cache may keep values from an earlier product. That
stale data is used exactly as the processor would use it.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from mlpim import tasklets
from mlpim.kernels import FitResult

NR_ELEM_PER_DPU = 4096
CACHE_SIZE = 1280
TRAINING_SIZE = 122
TRAINING_DIM = 4
L1_SIZE = 8
NR_TASKLETS = 16
MAX_READ_ELEMENTS = 512
LEARNING_RATE = 0.1
EPOCHS = 500


def load_cache(
    source, cache: np.ndarray, count: int, chunk: int, stride_chunk: Optional[int] = None
) -> np.ndarray:
    """Copy ``count`` values of ``source`` into ``cache`` in chunks.

    ``count // stride_chunk`` chunks of ``chunk`` values are copied, followed
    by a tail of ``count % chunk`` values starting where those chunks end.
    Values that would land past the end of ``cache`` are dropped.
    """
    if stride_chunk is None:
        stride_chunk = chunk
    if chunk <= 0 or stride_chunk <= 0:
        raise ValueError("chunk sizes must be positive")
    if count < 0:
        raise ValueError("count must not be negative")
    if not isinstance(cache, np.ndarray) or cache.dtype != np.float32 or cache.ndim != 1:
        raise TypeError("cache must be a one-dimensional float32 numpy array")
    values = np.asarray(source, dtype=np.float32).reshape(-1)

    full = count // stride_chunk
    blocks = [(n * chunk, chunk) for n in range(full)]
    blocks.append((full * chunk, count % chunk))
    for offset, size in blocks:
        if size == 0:
            continue
        end = offset + size
        if end > values.size:
            raise ValueError(f"read of values {offset}..{end - 1} past end of source")
        stop = min(end, cache.size)
        if offset < stop:
            cache[offset:stop] = values[offset:stop]
    return cache


class _Processor:
    """The tasklet count and the two working-memory caches of one processor."""

    def __init__(self, n_threads: int, cache_size: int = CACHE_SIZE) -> None:
        if n_threads <= 0:
            raise ValueError("n_threads must be positive")
        self.n_threads = n_threads
        self.cache1 = np.zeros(cache_size, dtype=np.float32)
        self.cache2 = np.zeros(cache_size, dtype=np.float32)

    def _load(self, m1, m1_count: int, m2, m2_count: int) -> None:
        chunk1 = min(MAX_READ_ELEMENTS, m1_count)
        chunk2 = min(MAX_READ_ELEMENTS, m2_count)
        load_cache(m1, self.cache1, m1_count, chunk1)
        load_cache(m2, self.cache2, m2_count, chunk2, chunk1)

    def dot(self, m1, m2, out, rows, columns, m2_columns, inference=False) -> None:
        self._load(m1, rows * columns, m2, columns * m2_columns)
        kernel = tasklets.dot_inference if inference else tasklets.dot
        kernel(self.n_threads, self.cache1, self.cache2, out, rows, columns, m2_columns)

    def dot_transposed(self, m1, m2, out, rows, columns, m2_rows) -> None:
        self._load(m1, rows * columns, m2, m2_rows * columns)
        tasklets.dot_transposed(
            self.n_threads, self.cache1, self.cache2, out, rows, columns, m2_rows
        )

    def accumulate(self, lr, m1, m2, out, rows, columns, m2_columns) -> None:
        self._load(m1, rows * columns, m2, rows * m2_columns)
        tasklets.accumulate_transposed_product(
            lr, self.n_threads, self.cache1, self.cache2, out, rows, columns, m2_columns
        )


def _mram(values=None, size: int = NR_ELEM_PER_DPU) -> np.ndarray:
    buffer = np.zeros(size, dtype=np.float32)
    if values is not None:
        flat = np.asarray(values, dtype=np.float32).reshape(-1)
        if flat.size > size:
            raise ValueError(f"{flat.size} values do not fit a buffer of {size}")
        buffer[: flat.size] = flat
    return buffer


def _matrix(m, name: str) -> np.ndarray:
    arr = np.asarray(m, dtype=np.float32)
    if arr.ndim != 2:
        raise ValueError(f"{name} must be a 2-D matrix, got {arr.ndim} dimensions")
    return arr


def _check_layers(x: np.ndarray, w0: np.ndarray, w1: np.ndarray) -> None:
    if w0.shape[0] != x.shape[1]:
        raise ValueError(f"w0 has {w0.shape[0]} rows, x has {x.shape[1]} columns")
    if w1.shape[0] != w0.shape[1]:
        raise ValueError(f"w1 has {w1.shape[0]} rows, w0 has {w0.shape[1]} columns")


def fit(
    n_threads: int,
    x,
    y,
    w0,
    w1,
    lr: float = LEARNING_RATE,
    epochs: int = EPOCHS,
) -> FitResult:
    """Train the two-layer sigmoid network with the processor's kernels.

    Returns the weights and the final forward pass as held in main memory.
    """
    x = _matrix(x, "x")
    w0 = _matrix(w0, "w0")
    w1 = _matrix(w1, "w1")
    _check_layers(x, w0, w1)
    if epochs < 0:
        raise ValueError("epochs must not be negative")
    x_h, x_w = x.shape
    l1_w = w0.shape[1]
    y_w = w1.shape[1]
    y = np.asarray(y, dtype=np.float32).reshape(-1)
    if y.size != x_h * y_w:
        raise ValueError(f"y has {y.size} values, expected {x_h * y_w}")
    hidden_size = x_h * l1_w
    output_size = x_h * y_w
    if hidden_size > NR_ELEM_PER_DPU:
        raise ValueError(f"hidden layer of {hidden_size} values does not fit a buffer")

    d_x = _mram(x)
    d_w0 = _mram(w0)
    d_w1 = _mram(w1)
    d_y = _mram(y)
    d_l1 = _mram()
    d_l1_delta = _mram()
    d_buffer = _mram()
    d_pred = _mram()
    d_pred_delta = _mram()
    dpu = _Processor(n_threads)
    n = n_threads

    def forward() -> None:
        dpu.dot(d_x, d_w0, d_l1, x_h, x_w, l1_w)
        tasklets.sigmoid(n, d_l1[:hidden_size], d_l1[:hidden_size])
        dpu.dot(d_l1, d_w1, d_pred, x_h, l1_w, y_w)
        tasklets.sigmoid(n, d_pred[:output_size], d_pred[:output_size])

    for _ in range(epochs):
        forward()
        tasklets.subtract(
            n, d_y[:output_size], d_pred[:output_size], d_pred_delta[:output_size]
        )
        tasklets.sigmoid_derivative(n, d_pred[:output_size], d_buffer[:output_size])
        tasklets.elementwise_product(
            n,
            d_pred_delta[:output_size],
            d_buffer[:output_size],
            d_pred_delta[:output_size],
        )
        dpu.dot_transposed(d_pred_delta, d_w1, d_l1_delta, x_h, y_w, l1_w)
        tasklets.sigmoid_derivative(n, d_l1[:hidden_size], d_buffer[:hidden_size])
        tasklets.elementwise_product(
            n,
            d_l1_delta[:hidden_size],
            d_buffer[:hidden_size],
            d_l1_delta[:hidden_size],
        )
        dpu.accumulate(lr, d_l1, d_pred_delta, d_w1, x_h, l1_w, y_w)
        dpu.accumulate(lr, d_x, d_l1_delta, d_w0, x_h, x_w, l1_w)

    forward()
    return FitResult(
        d_w0[: w0.size].reshape(w0.shape).copy(),
        d_w1[: w1.size].reshape(w1.shape).copy(),
        d_l1[:hidden_size].reshape(x_h, l1_w).copy(),
        d_pred[:output_size].reshape(x_h, y_w).copy(),
    )


def test(n_threads: int, x, w0, w1) -> np.ndarray:
    """Predict the rows of ``x`` with fresh caches, as the test pass does."""
    x = _matrix(x, "x")
    w0 = _matrix(w0, "w0")
    w1 = _matrix(w1, "w1")
    _check_layers(x, w0, w1)
    x_h, x_w = x.shape
    l1_w = w0.shape[1]
    y_w = w1.shape[1]
    hidden_size = x_h * l1_w
    output_size = x_h * y_w

    d_test = _mram(x, size=x.size)
    d_w0 = _mram(w0)
    d_w1 = _mram(w1)
    d_l1 = _mram(size=hidden_size)
    d_pred = _mram(size=output_size)
    dpu = _Processor(n_threads)

    dpu.dot(d_test, d_w0, d_l1, x_h, x_w, l1_w, inference=True)
    tasklets.sigmoid_inference(n_threads, d_l1, d_l1)
    dpu.dot(d_l1, d_w1, d_pred, x_h, l1_w, y_w, inference=True)
    tasklets.sigmoid_inference(n_threads, d_pred, d_pred)
    return d_pred.reshape(x_h, y_w)