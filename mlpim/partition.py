"""Matrix products split across a two-dimensional grid of in-memory processors.

The left operand is cut into horizontal blocks, one per grid row, and the
right operand, stored transposed, into blocks, one per grid column. Operands
are zero-padded so every processor receives a block of the same size. Each
processor then runs its tasklet kernels on its block, and the host reassembles
the pieces and strips the padding.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from mlpim import tasklets

NR_DPUS1 = 8
NR_DPUS2 = 8
TRAINING_SIZE = 128
TRAINING_DIM = 128
OUTPUT_SIZE = 1
L1_SIZE = 128
L2_SIZE = 128
NR_TASKLETS = 16


def c_ceil(value) -> int:
    """Round a single-precision value up the way the host code does.

    Values above their truncation gain one; anything else is truncated, so
    negative fractions round towards zero.
    """
    a = np.float32(value)
    truncated = int(a)
    return truncated + 1 if a > truncated else truncated


def _quotient(rows: int, parts: int) -> np.float32:
    return np.float32(rows) / np.float32(parts)


@dataclass(frozen=True)
class DpuGrid:
    """A grid of ``lhs_dpus`` by ``rhs_dpus`` processors."""

    lhs_dpus: int = NR_DPUS1
    rhs_dpus: int = NR_DPUS2

    def __post_init__(self) -> None:
        if self.lhs_dpus <= 0 or self.rhs_dpus <= 0:
            raise ValueError("grid dimensions must be positive")

    @property
    def count(self) -> int:
        """Total number of processors in the grid."""
        return self.lhs_dpus * self.rhs_dpus

    def lhs_block_rows(self, rows: int) -> int:
        """Rows of the left operand given to each grid row."""
        return c_ceil(_quotient(rows, self.lhs_dpus))

    def rhs_block_rows(self, rows: int) -> int:
        """Rows of the transposed right operand per grid column, rounded to even."""
        return c_ceil(_quotient(rows, self.rhs_dpus) / np.float32(2)) * 2

    def vector_block_rows(self, rows: int) -> int:
        """Rows per processor when the whole grid shares one operand, rounded to even."""
        return c_ceil(_quotient(rows, self.count) / np.float32(2)) * 2


def _positive(**dims: int) -> None:
    for name, value in dims.items():
        if value <= 0:
            raise ValueError(f"{name} must be positive")


def _padded(m, rows: int, columns: int, padded_rows: int, name: str) -> np.ndarray:
    flat = np.asarray(m, dtype=np.float32).reshape(-1)
    needed = rows * columns
    if flat.size < needed:
        raise ValueError(f"{name} holds {flat.size} values, needs {needed}")
    padded = np.zeros(padded_rows * columns, dtype=np.float32)
    padded[:needed] = flat[:needed]
    return padded


def run_dot_relu(grid: DpuGrid, m1, m2, m1_rows, m1_cols, m2_rows, n_tasklets=NR_TASKLETS):
    """Compute ``relu(m1 @ m2.T)`` across the grid.

    ``m1`` holds ``m1_rows`` rows and ``m2`` holds ``m2_rows`` rows, both of
    ``m1_cols`` values. Returns an ``m1_rows`` by ``m2_rows`` float32 matrix.
    """
    _positive(m1_rows=m1_rows, m1_cols=m1_cols, m2_rows=m2_rows)
    block1 = grid.lhs_block_rows(m1_rows)
    block2 = grid.rhs_block_rows(m2_rows)
    left = _padded(m1, m1_rows, m1_cols, block1 * grid.lhs_dpus, "m1")
    right = _padded(m2, m2_rows, m1_cols, block2 * grid.rhs_dpus, "m2")

    # The processor kernel sizes its column count from the unpadded share.
    kernel_rows = m2_rows // grid.rhs_dpus
    kernel_total = block1 * kernel_rows
    lhs_chunk = block1 * m1_cols
    rhs_chunk = block2 * m1_cols

    result = np.zeros((block1 * grid.lhs_dpus, block2 * grid.rhs_dpus), dtype=np.float32)
    for dpu in range(grid.count):
        lhs_index, rhs_index = divmod(dpu, grid.rhs_dpus)
        lhs_block = left[lhs_index * lhs_chunk:(lhs_index + 1) * lhs_chunk]
        rhs_block = right[rhs_index * rhs_chunk:(rhs_index + 1) * rhs_chunk]
        output = np.zeros(max(block1 * block2, kernel_total), dtype=np.float32)
        tasklets.dot_transposed(
            n_tasklets, lhs_block, rhs_block, output, block1, m1_cols, kernel_rows
        )
        tasklets.relu(n_tasklets, output[:kernel_total], output[:kernel_total])
        result[
            lhs_index * block1:(lhs_index + 1) * block1,
            rhs_index * block2:(rhs_index + 1) * block2,
        ] = output[: block1 * block2].reshape(block1, block2)
    return result[:m1_rows, :m2_rows].copy()


def run_dot_sigmoid_vector(grid: DpuGrid, m1, m2, m1_rows, m1_cols, n_tasklets=NR_TASKLETS):
    """Compute ``sigmoid(m1 @ m2)`` for a weight vector ``m2`` of ``m1_cols`` values.

    Every processor receives a block of rows and the whole vector. Returns a
    vector of ``m1_rows`` float32 predictions.
    """
    _positive(m1_rows=m1_rows, m1_cols=m1_cols)
    block = grid.vector_block_rows(m1_rows)
    left = _padded(m1, m1_rows, m1_cols, block * grid.count, "m1")
    weights = np.asarray(m2, dtype=np.float32).reshape(-1)
    if weights.size < m1_cols:
        raise ValueError(f"m2 holds {weights.size} values, needs {m1_cols}")
    weights = weights[:m1_cols].copy()

    chunk = block * m1_cols
    result = np.zeros(block * grid.count, dtype=np.float32)
    for dpu in range(grid.count):
        output = np.zeros(block * OUTPUT_SIZE, dtype=np.float32)
        tasklets.dot(
            n_tasklets,
            left[dpu * chunk:(dpu + 1) * chunk],
            weights,
            output,
            block,
            m1_cols,
            OUTPUT_SIZE,
        )
        tasklets.sigmoid(n_tasklets, output, output)
        result[dpu * block:(dpu + 1) * block] = output[:block]
    return result[:m1_rows].copy()


def _matrix(m, name: str) -> np.ndarray:
    arr = np.asarray(m, dtype=np.float32)
    if arr.ndim != 2:
        raise ValueError(f"{name} must be a 2-D matrix, got {arr.ndim} dimensions")
    return arr


def infer(grid: DpuGrid, x, w0, w1, w2, n_tasklets=NR_TASKLETS) -> np.ndarray:
    """Run a three-layer network: two ReLU layers and a sigmoid output.

    ``w0`` and ``w1`` are stored transposed, one row per output unit, and
    ``w2`` is the output weight vector. Returns one prediction per row of ``x``.
    """
    x = _matrix(x, "x")
    w0 = _matrix(w0, "w0")
    w1 = _matrix(w1, "w1")
    w2 = np.asarray(w2, dtype=np.float32).reshape(-1)
    rows, dim = x.shape
    l1, l2 = w0.shape[0], w1.shape[0]
    if w0.shape[1] != dim:
        raise ValueError(f"w0 has {w0.shape[1]} columns, x has {dim}")
    if w1.shape[1] != l1:
        raise ValueError(f"w1 has {w1.shape[1]} columns, w0 has {l1} rows")
    if w2.size != l2:
        raise ValueError(f"w2 has {w2.size} values, w1 has {l2} rows")

    layer1 = run_dot_relu(grid, x, w0, rows, dim, l1, n_tasklets)
    layer2 = run_dot_relu(grid, layer1, w1, rows, l1, l2, n_tasklets)
    return run_dot_sigmoid_vector(grid, layer2, w2, rows, l2, n_tasklets)