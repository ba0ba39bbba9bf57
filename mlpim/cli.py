"""Command-line entry points: iris training and the two inference benchmarks."""

from __future__ import annotations

import argparse
import sys
from typing import List, NamedTuple, Optional, TextIO

import numpy as np

from mlpim import dpu_training, iris, kernels, partition
from mlpim.kernels import FitResult
from mlpim.rng import RAND_MAX, CRandom, uniform_weights
from mlpim.timer import Timer

LEARNING_RATE = 0.1
EPOCHS = 500
NR_TASKLETS = 16


class _IrisRun(NamedTuple):
    trained: FitResult
    test_predictions: np.ndarray
    training_ms: float
    testing_ms: float


class _InferenceRun(NamedTuple):
    predictions: np.ndarray
    milliseconds: float


def _check_positive(**values: int) -> None:
    for name, value in values.items():
        if value <= 0:
            raise ValueError(f"{name} must be positive")


def _iris_weights(seed: int):
    rng = CRandom(seed)
    w0 = uniform_weights(rng, iris.L1_SIZE * iris.TRAINING_DIM).reshape(
        iris.TRAINING_DIM, iris.L1_SIZE
    )
    w1 = uniform_weights(rng, iris.L1_SIZE).reshape(iris.L1_SIZE, 1)
    return w0, w1


def train_iris(seed: int = 1) -> _IrisRun:
    """Train the iris classifier sequentially and predict the test rows."""
    w0, w1 = _iris_weights(seed)
    timer = Timer()
    timer.start(0, 0)
    trained = kernels.fit(
        iris.training_features(), iris.training_labels(), w0, w1, LEARNING_RATE, EPOCHS
    )
    timer.stop(0)
    training_ms = timer.milliseconds(0, 1)
    timer.start(0, 0)
    predictions = kernels.forward(iris.test_features(), trained.w0, trained.w1)
    timer.stop(0)
    return _IrisRun(trained, predictions, training_ms, timer.milliseconds(0, 1))


def train_iris_dpu(seed: int = 1, n_tasklets: int = NR_TASKLETS) -> _IrisRun:
    """Train and test the iris classifier with the single-processor kernels."""
    _check_positive(n_tasklets=n_tasklets)
    w0, w1 = _iris_weights(seed)
    timer = Timer()
    timer.start(0, 0)
    trained = dpu_training.fit(
        n_tasklets,
        iris.training_features(),
        iris.dpu_training_labels(),
        w0,
        w1,
        LEARNING_RATE,
        EPOCHS,
    )
    timer.stop(0)
    training_ms = timer.milliseconds(0, 1)
    timer.start(0, 0)
    predictions = dpu_training.test(
        n_tasklets, iris.dpu_test_features(), trained.w0, trained.w1
    )
    timer.stop(0)
    return _IrisRun(trained, predictions, training_ms, timer.milliseconds(0, 1))


def sequential_inference(
    training_size: int = kernels.TRAINING_SIZE,
    training_dim: int = kernels.TRAINING_DIM,
    l1_size: int = kernels.L1_SIZE,
    l2_size: int = kernels.L2_SIZE,
    seed: int = 1,
) -> _InferenceRun:
    """Run random inputs through a three-layer sigmoid network on the CPU."""
    _check_positive(
        training_size=training_size,
        training_dim=training_dim,
        l1_size=l1_size,
        l2_size=l2_size,
    )
    rng = CRandom(seed)
    w0 = uniform_weights(rng, l1_size * training_dim).reshape(training_dim, l1_size)
    w1 = uniform_weights(rng, l1_size * l2_size).reshape(l1_size, l2_size)
    w2 = uniform_weights(rng, l2_size * kernels.OUTPUT_SIZE).reshape(
        l2_size, kernels.OUTPUT_SIZE
    )
    x = uniform_weights(rng, training_dim * training_size).reshape(
        training_size, training_dim
    )
    timer = Timer()
    timer.start(0, 0)
    predictions = kernels.forward(x, w0, w1, w2)
    timer.stop(0)
    return _InferenceRun(predictions, timer.milliseconds(0, 1))


def _scaled_zeros(rng: CRandom, count: int) -> np.ndarray:
    values = [(np.float32(rng.rand()) / np.float32(RAND_MAX)) * np.float32(0.0)
              for _ in range(count)]
    return np.array(values, dtype=np.float32)


def partitioned_inference(
    training_size: int = partition.TRAINING_SIZE,
    training_dim: int = partition.TRAINING_DIM,
    l1_size: int = partition.L1_SIZE,
    l2_size: int = partition.L2_SIZE,
    seed: int = 1,
    n_tasklets: int = partition.NR_TASKLETS,
) -> _InferenceRun:
    """Run the three-layer network across the default processor grid."""
    _check_positive(
        training_size=training_size,
        training_dim=training_dim,
        l1_size=l1_size,
        l2_size=l2_size,
        n_tasklets=n_tasklets,
    )
    rng = CRandom(seed)
    x = _scaled_zeros(rng, training_size * training_dim).reshape(
        training_size, training_dim
    )
    w0 = _scaled_zeros(rng, training_dim * l1_size).reshape(l1_size, training_dim)
    w1 = _scaled_zeros(rng, l1_size * l2_size).reshape(l2_size, l1_size)
    w2 = _scaled_zeros(rng, l2_size * partition.OUTPUT_SIZE)
    grid = partition.DpuGrid()
    timer = Timer()
    timer.start(0, 0)
    predictions = partition.infer(grid, x, w0, w1, w2, n_tasklets)
    timer.stop(0)
    return _InferenceRun(predictions, timer.milliseconds(0, 1))


def _print_iris(run: _IrisRun, out: TextIO) -> None:
    out.write(f"\nTraining time (ms): {run.training_ms:f}\t")
    out.write(f"\nTesting time (ms): {run.testing_ms:f}\t\n")


def _print_matrix(matrix: np.ndarray, out: TextIO) -> None:
    for row in matrix:
        out.write("".join(f"{value:f} " for value in row) + "\n")


def _print_iris_dpu(run: _IrisRun, n_tasklets: int, out: TextIO) -> None:
    out.write("DPUs allocated: 1\n")
    out.write(f"Nr of Tasklets is: {n_tasklets}\n")
    out.write("\n\nW0 starts:\n\n")
    _print_matrix(run.trained.w0, out)
    out.write("\n\nW1 starts:\n\n")
    _print_matrix(run.trained.w1, out)
    out.write("\n\n")
    for index, value in enumerate(run.test_predictions.reshape(-1)):
        out.write(f"KTEST Prediction[{index}] : {value:.10f}\n")


def _print_sequential(run: _InferenceRun, columns: int, out: TextIO) -> None:
    for index, value in enumerate(run.predictions[:, 0]):
        line = f"KTEST Prediction[{index}] : {value:.10f}\n"
        for _ in range(columns):
            out.write(line)
    out.write(f"MLP Sequential Version Time (ms): {run.milliseconds:f}\t\n")


def _print_partitioned(run: _InferenceRun, out: TextIO) -> None:
    out.write(f"MLP Upmem Version Time (ms): {run.milliseconds:f}\t")
    out.write("\n\nPrediction values are: \n")
    for index, value in enumerate(run.predictions):
        out.write(f"Prediction[{index}]: {value:f}\n")
    out.write("\n\n")


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mlpim", description="Multi-layer perceptron training and inference."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    fit_seq = commands.add_parser("iris", help="train and test on iris sequentially")
    fit_seq.add_argument("--seed", type=int, default=1)

    fit_dpu = commands.add_parser("iris-dpu", help="train and test with processor kernels")
    fit_dpu.add_argument("--seed", type=int, default=1)
    fit_dpu.add_argument("--tasklets", type=int, default=NR_TASKLETS)

    seq = commands.add_parser("inference", help="sequential three-layer inference")
    seq.add_argument("--size", type=int, default=kernels.TRAINING_SIZE)
    seq.add_argument("--dim", type=int, default=kernels.TRAINING_DIM)
    seq.add_argument("--l1", type=int, default=kernels.L1_SIZE)
    seq.add_argument("--l2", type=int, default=kernels.L2_SIZE)
    seq.add_argument("--seed", type=int, default=1)

    grid = commands.add_parser("partitioned", help="inference across a processor grid")
    grid.add_argument("--size", type=int, default=partition.TRAINING_SIZE)
    grid.add_argument("--dim", type=int, default=partition.TRAINING_DIM)
    grid.add_argument("--l1", type=int, default=partition.L1_SIZE)
    grid.add_argument("--l2", type=int, default=partition.L2_SIZE)
    grid.add_argument("--seed", type=int, default=1)
    grid.add_argument("--tasklets", type=int, default=partition.NR_TASKLETS)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, run the chosen workload and print its report."""
    args = _parser().parse_args(argv)
    out = sys.stdout
    try:
        if args.command == "iris":
            _print_iris(train_iris(args.seed), out)
        elif args.command == "iris-dpu":
            _print_iris_dpu(train_iris_dpu(args.seed, args.tasklets), args.tasklets, out)
        elif args.command == "inference":
            run = sequential_inference(args.size, args.dim, args.l1, args.l2, args.seed)
            _print_sequential(run, args.dim, out)
        else:
            run = partitioned_inference(
                args.size, args.dim, args.l1, args.l2, args.seed, args.tasklets
            )
            _print_partitioned(run, out)
    except ValueError as error:
        print(f"mlpim: error: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())