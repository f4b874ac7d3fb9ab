#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
import numpy as np
import pytest

from classes.Base import OptimizationMethod, Regularizer
from classes.Errors import ConfigurationError, DataShapeError, DimensionError, EmptyDatasetError, LabelDimensionError
from classes.SparseLeastSquares import SparseLeastSquares
from classes.Sparse import hypothesis


def flat_inputs():
	for i in range(-20, 20, 10):
		for j in range(-20, 20, 10):
			for k in range(-20, 20, 10):
				yield [float(i), float(j), float(k)]


@pytest.mark.parametrize("method, lr, reg, iters", [
	(OptimizationMethod.BATCH, 0.1, 0.1, 200),
	(OptimizationMethod.STOCHASTIC, 0.01, 0.01, 200),
])
def test_flat_line_converges(flat_data, method, lr, reg, iters):
	X, y = flat_data
	model = SparseLeastSquares(method, lr, reg, Regularizer.L2, iters, X, y, n_features=3)
	model.learn()

	for x in flat_inputs():
		guess = model.predict(x)
		assert len(guess) == 1
		assert guess[0] == pytest.approx(3.0, abs=1e-2)


@pytest.mark.parametrize("method, lr, reg", [
	(OptimizationMethod.BATCH, 0.1, 0.1),
	(OptimizationMethod.STOCHASTIC, 0.001, 0.01),
])
def test_flat_line_undertrained(flat_data, method, lr, reg):
	X, y = flat_data
	model = SparseLeastSquares(method, lr, reg, Regularizer.L2, 1, X, y, n_features=3)
	model.learn()

	failures = sum(abs(3.0 - model.predict(x)[0]) > 1e-2 for x in flat_inputs())
	assert failures > 32


@pytest.mark.parametrize("method", [OptimizationMethod.BATCH, OptimizationMethod.STOCHASTIC])
def test_learn_rejects_empty_dataset(flat_data, method):
	_, y = flat_data
	model = SparseLeastSquares(method, 0.01, 0.1, Regularizer.L2, 1, [], y, n_features=3)
	with pytest.raises(EmptyDatasetError):
		model.learn()


def test_learn_rejects_missing_labels():
	model = SparseLeastSquares(OptimizationMethod.STOCHASTIC, 0.01, 0.1, Regularizer.L2, 1, [{}], None, n_features=3)
	with pytest.raises(LabelDimensionError):
		model.learn()


def test_learn_rejects_wide_labels(flat_data):
	X, _ = flat_data
	model = SparseLeastSquares("batch", 0.01, 0.0, "l2", 1, X, [[3.0, 1.0]] * len(X), n_features=3)
	with pytest.raises(LabelDimensionError):
		model.learn()


def test_learn_rejects_label_count_mismatch(flat_data):
	X, y = flat_data
	model = SparseLeastSquares("batch", 0.01, 0.0, "l2", 1, X, y[:-1], n_features=3)
	with pytest.raises(LabelDimensionError):
		model.learn()


def test_learn_rejects_unknown_method(flat_data):
	X, y = flat_data
	model = SparseLeastSquares("not a method", 0.01, 0.1, Regularizer.L2, 1, X, y, n_features=3)
	with pytest.raises(ConfigurationError):
		model.learn()
	assert not np.any(model.parameters)


def test_learn_rejects_out_of_range_feature(flat_data):
	X, y = flat_data
	X = X[:-1] + [{7: 1.0}]
	model = SparseLeastSquares("batch", 0.01, 0.0, "l2", 10, X, y, n_features=3)
	with pytest.raises(DataShapeError):
		model.learn()
	assert not np.any(model.parameters)


def test_learn_rejects_non_numeric_feature(flat_data):
	X, y = flat_data
	X = X[:-1] + [{0: "abc"}]
	model = SparseLeastSquares("batch", 0.01, 0.0, "l2", 10, X, y, n_features=3)
	with pytest.raises(DataShapeError):
		model.learn()
	assert not np.any(model.parameters)


@pytest.mark.parametrize("label", ["3", ["abc"], [[3.0], [1.0, 2.0]]])
def test_learn_rejects_non_numeric_label(flat_data, label):
	X, y = flat_data
	model = SparseLeastSquares("batch", 0.01, 0.0, "l2", 10, X, y[:-1] + [label], n_features=3)
	with pytest.raises(LabelDimensionError):
		model.learn()


@pytest.mark.parametrize("kwargs", [
	{"learning_rate": 0.0},
	{"regularization": -1.0},
	{"penalty": "l3"},
	{"max_iter": -1},
])
def test_learn_rejects_bad_hyperparameters(flat_data, kwargs):
	X, y = flat_data
	model = SparseLeastSquares(X=X, y=y, n_features=3, **kwargs)
	with pytest.raises(ConfigurationError):
		model.learn()


def test_constructor_needs_feature_count():
	with pytest.raises(ConfigurationError):
		SparseLeastSquares()


@pytest.mark.parametrize("method, lr", [
	(OptimizationMethod.BATCH, 0.01),
	(OptimizationMethod.STOCHASTIC, 0.001),
])
def test_inclined_line_converges(increasing_data, method, lr):
	X, y = increasing_data
	model = SparseLeastSquares(method, lr, 0.0, Regularizer.L2, 500, X, y, n_features=1)
	model.learn()

	for i in range(-20, 20):
		guess = model.predict([float(i)])
		assert len(guess) == 1
		assert guess[0] == pytest.approx(i, abs=1e-2)


@pytest.mark.parametrize("method", [OptimizationMethod.BATCH, OptimizationMethod.STOCHASTIC])
def test_inclined_line_overregularized(increasing_data, method):
	X, y = increasing_data
	model = SparseLeastSquares(method, 1e-4, 1e3, Regularizer.L2, 500, X, y, n_features=1)
	model.learn()

	failures = sum(abs(i - model.predict([float(i)])[0]) > 1e-2 for i in range(-20, 20, 2))
	assert failures > 10


def test_l1_penalty_shrinks_weights(increasing_data):
	X, y = increasing_data
	free = SparseLeastSquares("batch", 0.01, 0.0, "none", 300, X, y, n_features=1)
	free.learn()
	lasso = SparseLeastSquares("batch", 0.01, 50.0, "l1", 300, X, y, n_features=1)
	lasso.learn()

	assert free.coef_[0] == pytest.approx(1.0, abs=1e-3)
	assert abs(lasso.coef_[0]) < 0.75


@pytest.mark.parametrize("method, lr", [
	(OptimizationMethod.BATCH, 0.1),
	(OptimizationMethod.STOCHASTIC, 0.01),
])
def test_three_dimensional_line_converges(three_d_data, method, lr):
	X, y = three_d_data
	model = SparseLeastSquares(method, lr, 0.0, Regularizer.L2, 500, X, y, n_features=2)
	model.learn()

	for i in range(10):
		for j in range(10):
			guess = model.predict([float(i), float(j)])
			assert len(guess) == 1
			assert guess[0] == pytest.approx(10.0 + i / 10 + j / 5, abs=1e-2)


def test_predict_accepts_sparse_input(three_d_data):
	X, y = three_d_data
	model = SparseLeastSquares("batch", 0.1, 0.0, "l2", 500, X, y, n_features=2)
	model.learn()

	assert model.predict({1: 5.0})[0] == pytest.approx(11.0, abs=1e-2)
	assert model.predict({})[0] == pytest.approx(10.0, abs=1e-2)
	assert model.predict(np.array([0.0, 5.0]))[0] == pytest.approx(11.0, abs=1e-2)


@pytest.mark.parametrize("x", [[1.0], [1.0, 2.0, 3.0], {2: 1.0}, {-1: 1.0}, {"a": 1.0}, ["a", "b"], {0: "a"}])
def test_predict_rejects_wrong_dimension(x):
	model = SparseLeastSquares(n_features=2)
	with pytest.raises(DimensionError):
		model.predict(x)


def test_fit_and_predict_rows_on_matrix(three_d_data):
	X, y = three_d_data
	dense = np.array([[row.get(0, 0.0), row.get(1, 0.0)] for row in X])
	model = SparseLeastSquares("batch", 0.1, 0.0, "l2", 500, n_features=2).fit(dense, np.asarray(y))

	assert model.predict_rows(dense) == pytest.approx(np.asarray(y), abs=1e-2)
	assert model.intercept_ == pytest.approx(10.0, abs=1e-2)
	assert model.coef_ == pytest.approx([0.1, 0.2], abs=1e-3)


def test_fit_accepts_scipy_sparse(three_d_data):
	import scipy.sparse as sp

	X, y = three_d_data
	dense = np.array([[row.get(0, 0.0), row.get(1, 0.0)] for row in X])
	model = SparseLeastSquares("stochastic", 0.01, 0.0, "l2", 300, n_features=2).fit(sp.csr_matrix(dense), y)

	assert model.predict_rows(sp.csr_matrix(dense)) == pytest.approx(np.asarray(y), abs=1e-2)


def test_record_history_decreases(three_d_data):
	X, y = three_d_data
	model = SparseLeastSquares("batch", 0.1, 0.0, "l2", 50, X, y, n_features=2, record_history=True)
	model.learn()

	assert len(model.cost_history_) == 50
	assert model.cost_history_[-1] < model.cost_history_[0]


def test_parameters_setter_checks_length():
	model = SparseLeastSquares(n_features=2)
	model.parameters = [1.0, 2.0, 3.0]
	assert model.predict([1.0, 1.0])[0] == pytest.approx(6.0)

	with pytest.raises(DimensionError):
		model.parameters = [1.0, 2.0]


def test_predict_scores_with_hypothesis():
	model = SparseLeastSquares(n_features=3)
	model.parameters = [0.5, -1.0, 2.0, 4.0]
	inputs = [{}, {2: 1.0}, {0: 3.0, 1: -0.5}, [1.0, 1.0, 1.0], np.array([0.0, 2.0, 0.0])]

	for x in inputs:
		assert model.predict(x)[0] == pytest.approx(hypothesis(model.parameters, x, 3))
	assert model.predict_rows(inputs[3:]) == pytest.approx([5.5, 4.5])


def test_str_shows_hypothesis():
	model = SparseLeastSquares(n_features=2)
	model.parameters = [1.0, 2.0, 3.0]
	assert str(model) == "h(θ,x) = 1 + 2*x[0] + 3*x[1]"
