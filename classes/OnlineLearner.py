#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
import logging
import numbers
import threading
import numpy as np
from typing import Callable, Optional

from classes.Base import Example, Regularizer
from classes.Channel import Channel
from classes.Errors import ConfigurationError, DataShapeError
from classes.GradientDescent import stochastic_step
from classes.ParameterVector import ParameterVector
from classes.Sparse import SparseVector, as_sparse

log = logging.getLogger(__name__)

UpdateCallback = Callable[[np.ndarray], None]


def label_value(y) -> float:
	"""Single output of a label vector, which must have exactly one entry."""
	if y is None:
		raise DataShapeError("label vector is missing")
	if isinstance(y, (str, bytes)):
		raise DataShapeError(f"label must be a number or a vector of numbers, got {y!r}")
	if isinstance(y, numbers.Real):
		return float(y)
	try:
		values = np.asarray(y)
	except (TypeError, ValueError) as e:
		raise DataShapeError(f"label vector is not a flat sequence of numbers: {e}") from e
	if values.dtype.kind not in "biuf":
		raise DataShapeError(f"label vector must hold numbers, got dtype {values.dtype}")
	values = values.astype(float).reshape(-1)
	if values.shape[0] != 1:
		raise DataShapeError(f"label vector must have length 1, got {values.shape[0]}")
	return float(values[0])


class OnlineLearner:
	"""
	Stochastic gradient descent over a live stream of examples.

	One learner thread is the only writer of the ParameterVector; it takes a
	snapshot, computes the next θ from one example and publishes it. Readers
	(``SparseLeastSquares.predict``) are never blocked for longer than the
	reference swap.

	Protocol of `run`
	-----------------
	- no stream: one ConfigurationError on `errors`, `errors` closed, return.
	- a malformed example: one DataShapeError on `errors`, keep going.
	- a valid example: one stochastic step, then `on_update(theta)`.
	- stream closed and drained: `errors` closed, return.
	"""

	def __init__(self, parameters: ParameterVector, n_features: int,
				 learning_rate: float, penalty: Regularizer | str, regularization: float):
		self.parameters = parameters
		self.n_features = int(n_features)
		self.learning_rate = float(learning_rate)
		self.penalty = penalty
		self.regularization = float(regularization)
		self.updates = 0

	def _check_config(self) -> None:
		self.penalty = Regularizer.parse(self.penalty)
		if not self.learning_rate > 0:
			raise ConfigurationError(f"learning_rate must be > 0, got {self.learning_rate}")
		if self.regularization < 0:
			raise ConfigurationError(f"regularization must be >= 0, got {self.regularization}")

	def _validate(self, example) -> tuple[SparseVector, float]:
		if not isinstance(example, Example):
			raise DataShapeError(f"expected an Example, got {type(example).__name__}")
		x = as_sparse(example.X, self.n_features)
		y = label_value(example.Y)
		return x, y

	def step(self, x: SparseVector, y: float) -> np.ndarray:
		theta = stochastic_step(self.parameters.snapshot(), x, y,
								self.learning_rate, self.penalty, self.regularization)
		self.updates += 1
		return self.parameters.publish(theta)

	def run(self, errors: Channel, stream: Optional[Channel], on_update: Optional[UpdateCallback] = None) -> None:
		if stream is None:
			log.error("online learning started without a data stream")
			errors.put(ConfigurationError("online learning needs a data stream, got None"))
			errors.close()
			return
		try:
			self._check_config()
		except ConfigurationError as e:
			log.error(f"online learning not started: {e}")
			errors.put(e)
			errors.close()
			return

		log.debug(f"online learner started ({self.n_features} features, lr={self.learning_rate})")
		try:
			for example in stream:
				try:
					x, y = self._validate(example)
				except DataShapeError as e:
					log.warning(f"skipping malformed example: {e}")
					errors.put(e)
					continue

				theta = self.step(x, y)
				if on_update is not None:
					on_update(theta)
		finally:
			log.debug(f"online learner finished after {self.updates} updates")
			errors.close()

	def start(self, errors: Channel, stream: Optional[Channel], on_update: Optional[UpdateCallback] = None) -> threading.Thread:
		worker = threading.Thread(target=self.run, args=(errors, stream, on_update),
								  name="online-learner", daemon=True)
		worker.start()
		return worker
