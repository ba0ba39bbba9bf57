# mlpim

Small multilayer perceptron kernels built on NumPy, in two flavours:

- **sequential** float32 kernels (`mlpim.kernels`): matrix products,
  a sigmoid built on a bit-level approximation of `exp` (`fast_exp`, which
  takes integer arguments, so `sigmoid` truncates its negated input first),
  ReLU, a full-batch back-propagation trainer (`fit`) and a multi-layer
  forward pass (`forward`);
- **partitioned** kernels that simulate running the same network on
  processing-in-memory units, each splitting its work among tasklets:
  - `mlpim.tasklets`: in-place kernels on flat float32 buffers. At most
    `total // 2` tasklets run, each on a contiguous block
    (`tasklet_ranges`), and elements past the last block are left untouched.
  - `mlpim.dpu_training`: training (`fit`) and prediction (`test`) on one
    simulated unit, with fixed-size main-memory buffers and two
    working-memory caches filled in chunks by `load_cache`. Cache contents
    left over from earlier products are used as the unit would use them.
  - `mlpim.partition`: products split over a grid of units (`DpuGrid`)
    with zero padding so that every unit gets an equal block;
    `run_dot_relu`, `run_dot_sigmoid_vector` and `infer`
    (ReLU, ReLU, sigmoid) run on it.

Supporting modules:

- `mlpim.iris`: the Iris training and test slices with their labels
  (`training_features`, `training_labels`, `test_features`, `test_labels`,
  and the `dpu_*` variants used by the single-unit trainer).
- `mlpim.rng`: `CRandom`, a reproduction of the classic seeded C library
  `srand`/`rand`, and `uniform_weights`, which draws float32 weights in
  `[-scale, scale]`.
- `mlpim.timer`: `Timer`, which accumulates microseconds in four slots and
  reports milliseconds averaged over repetitions (`milliseconds`, `report`).

## Install

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
mlpim --help
```

Sub-commands:

- `mlpim iris [--seed N]`: train the one-hidden-layer classifier on the Iris
  slice with the sequential kernels (learning rate 0.1, 500 epochs), predict
  the test rows and print training and testing times.
- `mlpim iris-dpu [--seed N] [--tasklets N]`: the same training through the
  single-unit simulation; prints the trained weights and one
  `KTEST Prediction[i]` line per test row.
- `mlpim inference [--size N] [--dim N] [--l1 N] [--l2 N] [--seed N]`:
  random inputs through a three-layer sigmoid network, printing every
  prediction and the time taken. The defaults (61440 rows of 512 values)
  are large and take a while.
- `mlpim partitioned [--size N] [--dim N] [--l1 N] [--l2 N] [--seed N] [--tasklets N]`:
  three-layer inference across the default 8 x 8 grid. Inputs and weights
  are drawn from the generator and scaled by zero, so every prediction is
  the sigmoid of zero.

The command exits with status 1 and a message on standard error when a size
or tasklet count is invalid.

## Library use

```python
from mlpim import iris, kernels
from mlpim.rng import CRandom, uniform_weights

rng = CRandom(1)
w0 = uniform_weights(rng, 4 * 8, 0.1).reshape(4, 8)
w1 = uniform_weights(rng, 8, 0.1).reshape(8, 1)

result = kernels.fit(iris.training_features(), iris.training_labels(), w0, w1, 0.1, 500)
predictions = kernels.forward(iris.test_features(), result.w0, result.w1)
```

`fit` leaves the weights it is given unchanged and returns a `FitResult`
holding the trained `w0` and `w1` and the final `hidden` and `predictions`.
Seed `1` gives the same starting weights on every run.

## What this package does not do

It does not talk to any processing-in-memory hardware. Every unit, tasklet,
cache and memory transfer is simulated in NumPy on the host, so the
partitioned modules reproduce the layout and arithmetic of such a system,
not its speed; their timings measure the simulation.