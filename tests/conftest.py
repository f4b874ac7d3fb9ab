#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
import itertools
import numpy as np
import pytest


def dense_to_sparse(rows):
	return [{i: float(v) for i, v in enumerate(row)} for row in rows]


@pytest.fixture
def flat_data():
	"""y = 3 over a centered grid of 3 features."""
	grid = [-2.0, -1.0, 0.0, 1.0, 2.0]
	X = [list(p) for p in itertools.product(grid, grid, grid)]
	return dense_to_sparse(X), [3.0] * len(X)


@pytest.fixture
def increasing_data():
	"""y = x for x in [-20, 20]."""
	xs = [k * 0.5 for k in range(-40, 41)]
	return dense_to_sparse([[x] for x in xs]), [[x] for x in xs]


@pytest.fixture
def three_d_data():
	"""z = 10 + x/10 + y/5."""
	grid = [k * 0.5 for k in range(-4, 5)]
	X = [[a, b] for a in grid for b in grid]
	return dense_to_sparse(X), [10.0 + a / 10 + b / 5 for a, b in X]


@pytest.fixture
def noisy_data():
	"""y = 0.5 x + N(0, 1) for x in [400, 600)."""
	rng = np.random.default_rng(7)
	xs = np.arange(400.0, 600.0)
	ys = 0.5 * xs + rng.normal(0.0, 1.0, size=xs.shape[0])
	return dense_to_sparse([[x] for x in xs]), list(ys)
