import numpy as np
import pytest

from mlpim import dpu_training, iris, kernels
from mlpim.rng import CRandom, uniform_weights


def _sigmoid_of_zero() -> np.float32:
    return kernels.sigmoid(np.zeros(1, dtype=np.float32))[0]


def _iris_weights():
    rng = CRandom(1)
    w0 = uniform_weights(rng, iris.TRAINING_DIM * iris.L1_SIZE).reshape(
        iris.TRAINING_DIM, iris.L1_SIZE
    )
    w1 = uniform_weights(rng, iris.L1_SIZE).reshape(iris.L1_SIZE, 1)
    return w0, w1


def test_load_cache_drops_values_past_cache_end():
    source = np.arange(10, dtype=np.float32)
    cache = np.zeros(8, dtype=np.float32)
    result = dpu_training.load_cache(source, cache, 10, 4)
    assert result is cache
    np.testing.assert_array_equal(cache, source[:8])


def test_load_cache_with_larger_stride_loads_nothing():
    source = np.arange(32, dtype=np.float32)
    cache = np.full(64, 7.0, dtype=np.float32)
    dpu_training.load_cache(source, cache, 32, 32, 488)
    np.testing.assert_array_equal(cache, np.full(64, 7.0, dtype=np.float32))


def test_load_cache_smaller_stride_reads_beyond_count():
    source = np.arange(1, 1489, dtype=np.float32)
    cache = np.zeros(dpu_training.CACHE_SIZE, dtype=np.float32)
    dpu_training.load_cache(source, cache, 976, 512, 488)
    np.testing.assert_array_equal(cache, source[: dpu_training.CACHE_SIZE])


def test_load_cache_rejects_short_source():
    cache = np.zeros(16, dtype=np.float32)
    with pytest.raises(ValueError):
        dpu_training.load_cache(np.ones(5, dtype=np.float32), cache, 10, 4)


def test_load_cache_rejects_zero_chunk():
    cache = np.zeros(16, dtype=np.float32)
    with pytest.raises(ValueError):
        dpu_training.load_cache(np.ones(5, dtype=np.float32), cache, 0, 0)


def test_load_cache_rejects_non_float32_cache():
    with pytest.raises(TypeError):
        dpu_training.load_cache(np.ones(4), np.zeros(4), 4, 4)


def test_fit_without_epochs_keeps_weights_and_uses_empty_cache():
    w0, w1 = _iris_weights()
    result = dpu_training.fit(
        dpu_training.NR_TASKLETS,
        iris.training_features(),
        iris.dpu_training_labels(),
        w0,
        w1,
        epochs=0,
    )
    np.testing.assert_array_equal(result.w0, w0)
    np.testing.assert_array_equal(result.w1, w1)
    assert result.hidden.shape == (iris.TRAINING_SIZE, iris.L1_SIZE)
    np.testing.assert_array_equal(result.hidden, np.full_like(result.hidden, _sigmoid_of_zero()))
    assert result.predictions.shape == (iris.TRAINING_SIZE, 1)
    np.testing.assert_array_equal(
        result.predictions[:112], np.full((112, 1), _sigmoid_of_zero(), dtype=np.float32)
    )
    np.testing.assert_array_equal(result.predictions[112:], np.zeros((10, 1), np.float32))


def test_fit_iris_epochs_leave_weights_untouched():
    w0, w1 = _iris_weights()
    result = dpu_training.fit(
        dpu_training.NR_TASKLETS,
        iris.training_features(),
        iris.dpu_training_labels(),
        w0,
        w1,
        lr=0.1,
        epochs=3,
    )
    np.testing.assert_array_equal(result.w0, w0)
    np.testing.assert_array_equal(result.w1, w1)
    np.testing.assert_array_equal(result.predictions[112:], np.zeros((10, 1), np.float32))


def test_fit_small_network_uses_loaded_and_stale_cache():
    x = np.array([[1.0, 2.0], [-1.0, 0.5]], dtype=np.float32)
    w0 = np.array([[0.5, -1.0, 2.0, 0.25], [1.5, 0.0, -0.5, 3.0]], dtype=np.float32)
    w1 = np.array([[9.0], [9.0], [9.0], [9.0]], dtype=np.float32)
    result = dpu_training.fit(16, x, [0.0, 1.0], w0, w1, epochs=0)
    expected_hidden = kernels.sigmoid(kernels.dot(x, w0))
    np.testing.assert_array_equal(result.hidden, expected_hidden)
    stale_w1 = w0.reshape(-1)[:4].reshape(4, 1)
    expected_pred = kernels.sigmoid(kernels.dot(expected_hidden, stale_w1))
    np.testing.assert_array_equal(result.predictions, expected_pred)


def test_fit_rejects_mismatched_layers():
    x = np.ones((3, 4), dtype=np.float32)
    with pytest.raises(ValueError):
        dpu_training.fit(16, x, np.zeros(3), np.ones((5, 8)), np.ones((8, 1)))


def test_fit_rejects_wrong_label_count():
    x = np.ones((3, 4), dtype=np.float32)
    with pytest.raises(ValueError):
        dpu_training.fit(16, x, np.zeros(4), np.ones((4, 8)), np.ones((8, 1)))


def test_fit_rejects_input_larger_than_buffer():
    x = np.ones((1100, 4), dtype=np.float32)
    with pytest.raises(ValueError):
        dpu_training.fit(16, x, np.zeros(1100), np.ones((4, 1)), np.ones((1, 1)), epochs=0)


def test_fit_rejects_negative_epochs():
    w0, w1 = _iris_weights()
    with pytest.raises(ValueError):
        dpu_training.fit(
            16, iris.training_features(), iris.dpu_training_labels(), w0, w1, epochs=-1
        )


def test_test_pass_uses_fresh_caches():
    w0, w1 = _iris_weights()
    first = dpu_training.test(16, iris.dpu_test_features(), w0, w1)
    second = dpu_training.test(16, iris.dpu_test_features(), w0 * 3, w1 - 1)
    assert first.shape == (iris.TEST_ROWS, 1)
    np.testing.assert_array_equal(first, second)
    np.testing.assert_array_equal(
        first, np.full((iris.TEST_ROWS, 1), _sigmoid_of_zero(), dtype=np.float32)
    )


def test_test_pass_rejects_mismatched_weights():
    with pytest.raises(ValueError):
        dpu_training.test(16, iris.dpu_test_features(), np.ones((3, 8)), np.ones((8, 1)))


def test_nonpositive_tasklet_count_is_rejected():
    w0, w1 = _iris_weights()
    with pytest.raises(ValueError):
        dpu_training.test(0, iris.dpu_test_features(), w0, w1)