#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
import logging
import os
import threading
import numpy as np
import yaml
from typing import Optional

from classes.Base import OptimizationMethod, Regularizer
from classes.Channel import Channel
from classes.Errors import ConfigurationError, DataShapeError, EmptyDatasetError, LabelDimensionError, PersistenceError
from classes.GradientDescent import batch_step, stochastic_step, mean_squared_error
from classes.OnlineLearner import OnlineLearner, UpdateCallback, label_value
from classes.ParameterVector import ParameterVector
from classes.Sparse import as_sparse, hypothesis, rows_from, to_csr

log = logging.getLogger(__name__)


class SparseLeastSquares:
	"""
	Least squares linear regression over sparse feature vectors, trained by
	batch or stochastic gradient descent with an optional L1/L2 penalty.

	The hypothesis is
		h(x) = θ[0] + Σ_i θ[i+1] * x[i]
	where x is a SparseVector ({feature index: value}, absent entries are 0),
	so scoring costs the number of non-zero features, not n_features.

	The model can be trained two ways:
	- `learn()` / `fit(X, y)`: batch training on a stored dataset, running
	  `max_iter` iterations of the configured rule (one full pass each).
	- `online_learn(errors, stream, on_update)`: a background thread applies
	  one stochastic step per Example read from `stream` while other threads
	  keep calling `predict`.

	Parameters
	----------
	method : OptimizationMethod or str
		"batch" (one aggregated step per iteration) or "stochastic" (one step
		per example per iteration). Anything else is rejected by `learn`.
	learning_rate : float
		Step size α, must be > 0.
	regularization : float
		Penalty strength λ (≥ 0, 0 disables the penalty).
	penalty : Regularizer or str
		"none", "l1" or "l2". The bias is never penalized.
	max_iter : int
		Number of passes over the dataset in batch training.
	X, y : optional
		Training set: SparseVectors or dense rows, and label vectors of length
		1 (bare numbers are accepted as length-1 labels).
	n_features : int
		Declared feature count. Inferred from dense X when omitted.

	Attributes
	----------
	parameters : np.ndarray
		Current θ snapshot (length n_features + 1, bias first).
	cost_history_ : list
		Training MSE after each batch iteration, if `record_history=True`.
	typ : str
		'r' indicating a regression task.
	"""

	typ = 'r'

	def __init__(self,
				 method: OptimizationMethod | str = OptimizationMethod.BATCH,
				 learning_rate: float = 0.01,
				 regularization: float = 0.0,
				 penalty: Regularizer | str = Regularizer.L2,
				 max_iter: int = 500,
				 X=None,
				 y=None,
				 n_features: Optional[int] = None,
				 record_history: bool = False):
		self.method = method
		self.learning_rate = float(learning_rate)
		self.regularization = float(regularization)
		self.penalty = penalty
		self.max_iter = int(max_iter)
		self.record_history = bool(record_history)
		self.cost_history_: list[float] = []

		self.X = X
		self.y = y
		if n_features is None:
			n_features = self._infer_features(X)
		if n_features is None or int(n_features) <= 0:
			raise ConfigurationError(f"n_features must be a positive integer, got {n_features!r}")
		self.n_features = int(n_features)
		self._parameters = ParameterVector(self.n_features + 1)
		self._worker: Optional[threading.Thread] = None

	@staticmethod
	def _infer_features(X) -> Optional[int]:
		if X is None:
			return None
		shape = getattr(X, "shape", None)
		if shape is not None and len(shape) == 2:
			return int(shape[1])
		rows = list(X)
		if rows and not isinstance(rows[0], dict):
			return len(rows[0])
		return None

	def _check_resizable(self, n_features: int) -> None:
		# a running OnlineLearner holds the current ParameterVector
		if n_features != self.n_features and self._worker is not None and self._worker.is_alive():
			raise ConfigurationError(f"cannot change n_features from {self.n_features} to {n_features} "
									 f"while online learning is running, close its stream first")

	def _resize(self, n_features: int) -> None:
		self._check_resizable(n_features)
		self.n_features = n_features
		if len(self._parameters) != n_features + 1:
			self._parameters = ParameterVector(n_features + 1)

	# ---------- parameters ----------
	@property
	def parameters(self) -> np.ndarray:
		return self._parameters.snapshot()

	@parameters.setter
	def parameters(self, values) -> None:
		self._parameters.publish(values)

	@property
	def coef_(self) -> np.ndarray:
		return self.parameters[1:]

	@property
	def intercept_(self) -> float:
		return float(self.parameters[0])

	# ---------- validation ----------
	def _config(self) -> tuple[OptimizationMethod, Regularizer]:
		method = OptimizationMethod.parse(self.method)
		penalty = Regularizer.parse(self.penalty)
		if not self.learning_rate > 0:
			raise ConfigurationError(f"learning_rate must be > 0, got {self.learning_rate}")
		if self.regularization < 0:
			raise ConfigurationError(f"regularization must be >= 0, got {self.regularization}")
		if self.max_iter < 0:
			raise ConfigurationError(f"max_iter must be >= 0, got {self.max_iter}")
		return method, penalty

	def _dataset(self) -> tuple[list, np.ndarray]:
		rows = [] if self.X is None else rows_from(self.X)
		if not rows:
			raise EmptyDatasetError("the training set is empty")

		if self.y is None:
			raise LabelDimensionError("no labels were given for the training set")
		labels = list(self.y)
		if len(labels) != len(rows):
			raise LabelDimensionError(f"{len(rows)} examples but {len(labels)} labels")
		try:
			y = np.array([label_value(lab) for lab in labels], dtype=float)
		except DataShapeError as e:
			raise LabelDimensionError(str(e)) from e

		X = [as_sparse(row, self.n_features) for row in rows]
		return X, y

	# ---------- training ----------
	def learn(self) -> None:
		"""Batch training on the stored dataset. Overwrites θ."""
		rows, y = self._dataset()
		method, penalty = self._config()
		n = len(rows)
		X = to_csr(rows, self.n_features)
		log.debug(f"learning {method.value} gd: n={n}, features={self.n_features}, "
				  f"lr={self.learning_rate}, {penalty.value}={self.regularization}, iters={self.max_iter}")

		self.cost_history_.clear()
		for it in range(self.max_iter):
			if method is OptimizationMethod.BATCH:
				theta = batch_step(self._parameters.snapshot(), X, y,
								   self.learning_rate, penalty, self.regularization)
				self._parameters.publish(theta)
			else:
				for x_i, y_i in zip(rows, y):
					theta = stochastic_step(self._parameters.snapshot(), x_i, float(y_i),
											self.learning_rate, penalty, self.regularization)
					self._parameters.publish(theta)

			if self.record_history:
				cost = mean_squared_error(self.parameters, X, y) + penalty.cost(self.parameters, self.regularization)
				self.cost_history_.append(cost)
				log.debug(f"iteration {it + 1}/{self.max_iter}: cost={cost:.6g}")

		if not np.all(np.isfinite(self.parameters)):
			log.warning("training diverged (non-finite parameters), try a smaller learning_rate")

	def fit(self, X, y, n_features: Optional[int] = None) -> "SparseLeastSquares":
		if n_features is None:
			n_features = self._infer_features(X) or self.n_features
		self._resize(int(n_features))
		self.X = X
		self.y = y
		self.learn()
		return self

	def online_learn(self, errors: Channel, stream: Optional[Channel],
					 on_update: Optional[UpdateCallback] = None) -> threading.Thread:
		"""
		Start learning from `stream` on a background thread and return it.

		Every Example read from the stream is validated; a malformed one is
		reported as a DataShapeError on `errors` and skipped. `errors` is closed
		once the stream is closed and drained, which is the caller's signal
		that θ is final. If the stream is None a single ConfigurationError is
		reported instead. Callers must drain `errors` or a bounded sink stalls
		the learner.
		"""
		learner = OnlineLearner(self._parameters, self.n_features,
								self.learning_rate, self.penalty, self.regularization)
		self._worker = learner.start(errors, stream, on_update)
		return self._worker

	# ---------- prediction ----------
	def predict(self, x) -> np.ndarray:
		"""Score one feature vector (sparse dict or dense sequence); returns a length-1 array."""
		return np.array([hypothesis(self._parameters.snapshot(), x, self.n_features)])

	def predict_rows(self, X) -> np.ndarray:
		theta = self._parameters.snapshot()
		return np.array([hypothesis(theta, r, self.n_features) for r in rows_from(X)], dtype=float)

	# ---------- persistence ----------
	def persist_to_file(self, path: str) -> None:
		"""Write the configuration and θ to `path` as YAML."""
		if not path:
			raise PersistenceError("cannot persist the model to an empty path")
		method = self.method.value if isinstance(self.method, OptimizationMethod) else str(self.method)
		penalty = self.penalty.value if isinstance(self.penalty, Regularizer) else str(self.penalty)
		state = {
			"method": method,
			"learning_rate": self.learning_rate,
			"regularization": self.regularization,
			"penalty": penalty,
			"max_iter": self.max_iter,
			"n_features": self.n_features,
			"parameters": [float(v) for v in self.parameters],
		}
		directory = os.path.dirname(os.path.abspath(path))
		os.makedirs(directory, exist_ok=True)
		with open(path, "w") as fp:
			yaml.safe_dump(state, fp, sort_keys=False)
		log.debug(f"model persisted to {path}")

	def restore_from_file(self, path: str) -> None:
		"""Replace the configuration and θ with the content of a file written by `persist_to_file`."""
		if not path:
			raise PersistenceError("cannot restore the model from an empty path")
		with open(path, "r") as fp:
			try:
				state = yaml.safe_load(fp)
			except yaml.YAMLError as e:
				raise PersistenceError(f"{path}: malformed model file: {e}") from e

		keys = ("method", "learning_rate", "regularization", "penalty", "max_iter", "n_features", "parameters")
		if not isinstance(state, dict) or any(k not in state for k in keys):
			raise PersistenceError(f"{path}: model file must define {', '.join(keys)}")
		try:
			method = OptimizationMethod.parse(state["method"])
			penalty = Regularizer.parse(state["penalty"])
			n_features = int(state["n_features"])
			theta = np.asarray(state["parameters"], dtype=float).reshape(-1)
			learning_rate = float(state["learning_rate"])
			regularization = float(state["regularization"])
			max_iter = int(state["max_iter"])
		except (ConfigurationError, TypeError, ValueError) as e:
			raise PersistenceError(f"{path}: invalid model file: {e}") from e
		if n_features <= 0 or theta.shape[0] != n_features + 1:
			raise PersistenceError(f"{path}: expected {n_features + 1} parameters, got {theta.shape[0]}")
		self._check_resizable(n_features)

		self.method = method
		self.penalty = penalty
		self.learning_rate = learning_rate
		self.regularization = regularization
		self.max_iter = max_iter
		self._resize(n_features)
		self._parameters.publish(theta)
		log.debug(f"model restored from {path}")

	def __str__(self) -> str:
		theta = self.parameters
		terms = " + ".join(f"{theta[i]:.5g}*x[{i - 1}]" for i in range(1, len(theta)))
		return f"h(θ,x) = {theta[0]:.5g}" + (f" + {terms}" if terms else "")
