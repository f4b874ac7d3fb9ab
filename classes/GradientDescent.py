#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
"""
Gradient descent update rules for the linear hypothesis h(x) = θ·[1, x].

Loss is the half squared error, so the gradient with respect to θ[j] on one
example is (h(x) - y) * x[j] (x[0] = 1 for the bias), plus the penalty
gradient of the configured Regularizer.

	Batch       θ := θ - α * (Xᵀ(Xθ - y) / n + penalty(θ))
	Stochastic  θ := θ - α * ((h(x) - y) * x + penalty(θ))

Both rules return a fresh array and never modify the θ they are given, which
lets the caller publish the result as a new snapshot.
"""
import numpy as np
import scipy.sparse as sp

from classes.Base import Regularizer
from classes.Sparse import SparseVector, dot


def batch_step(theta: np.ndarray, X: sp.csr_matrix, y: np.ndarray,
			   learning_rate: float, penalty: Regularizer, strength: float) -> np.ndarray:
	n = X.shape[0]
	residual = (X @ theta[1:]) + theta[0] - y

	grad = penalty.gradient(theta, strength)
	grad[0] += residual.sum() / n
	grad[1:] += (X.T @ residual) / n
	return theta - learning_rate * grad


def stochastic_step(theta: np.ndarray, x: SparseVector, y: float,
					learning_rate: float, penalty: Regularizer, strength: float) -> np.ndarray:
	err = dot(theta, x) - y

	grad = penalty.gradient(theta, strength)
	grad[0] += err
	for idx, val in x.items():
		grad[idx + 1] += err * val
	return theta - learning_rate * grad


def mean_squared_error(theta: np.ndarray, X: sp.csr_matrix, y: np.ndarray) -> float:
	residual = (X @ theta[1:]) + theta[0] - y
	return float(np.mean(residual * residual))
