#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
import numpy as np
import pytest
import yaml

from classes.Base import OptimizationMethod, Regularizer
from classes.Errors import PersistenceError
from classes.SparseLeastSquares import SparseLeastSquares


def test_persist_and_restore_least_squares(noisy_data, tmp_path):
	X, y = noisy_data
	model = SparseLeastSquares(OptimizationMethod.BATCH, 1e-6, 1e-6, Regularizer.L2, 75, X, y, n_features=1)
	model.learn()

	inputs = np.arange(400.0, 600.0)
	trained = [model.predict([x])[0] for x in inputs]
	for x, guess in zip(inputs, trained):
		assert guess == pytest.approx(x * 0.5, abs=5)

	path = tmp_path / "models" / "least_squares.yaml"
	model.persist_to_file(str(path))
	assert path.exists()

	model.parameters = np.zeros(len(model.parameters))
	for x in inputs:
		guess = model.predict([x])
		assert len(guess) == 1
		assert guess[0] == 0.0

	model.restore_from_file(str(path))
	for x, before in zip(inputs, trained):
		assert model.predict([x])[0] == pytest.approx(before, abs=1e-12)
		assert model.predict([x])[0] == pytest.approx(x * 0.5, abs=5)


def test_restore_replaces_configuration(tmp_path):
	source = SparseLeastSquares("stochastic", 0.25, 0.5, "l1", 42, n_features=2)
	source.parameters = [1.0, 2.0, 3.0]
	path = tmp_path / "model.yaml"
	source.persist_to_file(str(path))

	target = SparseLeastSquares(n_features=5)
	target.restore_from_file(str(path))

	assert target.method is OptimizationMethod.STOCHASTIC
	assert target.penalty is Regularizer.L1
	assert target.learning_rate == 0.25
	assert target.regularization == 0.5
	assert target.max_iter == 42
	assert target.n_features == 2
	assert target.parameters.tolist() == [1.0, 2.0, 3.0]


def test_persisted_file_is_keyed_yaml(tmp_path):
	model = SparseLeastSquares(n_features=1)
	path = tmp_path / "model.yaml"
	model.persist_to_file(str(path))

	state = yaml.safe_load(path.read_text())
	assert state == {
		"method": "batch",
		"learning_rate": 0.01,
		"regularization": 0.0,
		"penalty": "l2",
		"max_iter": 500,
		"n_features": 1,
		"parameters": [0.0, 0.0],
	}


def test_persistence_rejects_empty_path():
	model = SparseLeastSquares(n_features=1)
	with pytest.raises(PersistenceError):
		model.persist_to_file("")
	with pytest.raises(PersistenceError):
		model.restore_from_file("")


def test_restore_missing_file(tmp_path):
	model = SparseLeastSquares(n_features=1)
	with pytest.raises(FileNotFoundError):
		model.restore_from_file(str(tmp_path / "missing.yaml"))


@pytest.mark.parametrize("content", [
	"parameters: [1.0, 2.0\n",
	"- just\n- a list\n",
	"method: batch\nlearning_rate: 0.1\n",
	"method: batch\nlearning_rate: 0.1\nregularization: 0\npenalty: l2\nmax_iter: 5\nn_features: 2\nparameters: [1.0, 2.0]\n",
	"method: newton\nlearning_rate: 0.1\nregularization: 0\npenalty: l2\nmax_iter: 5\nn_features: 1\nparameters: [1.0, 2.0]\n",
])
def test_restore_rejects_malformed_content(tmp_path, content):
	path = tmp_path / "bad.yaml"
	path.write_text(content)
	model = SparseLeastSquares(n_features=1)
	model.parameters = [4.0, 5.0]

	with pytest.raises(PersistenceError):
		model.restore_from_file(str(path))
	assert model.parameters.tolist() == [4.0, 5.0]
