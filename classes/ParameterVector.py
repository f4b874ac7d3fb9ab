#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
import numpy as np
from threading import Lock

from classes.Errors import DimensionError


class ParameterVector:
	"""
	The parameter vector θ shared between one training thread and any number
	of predicting threads.

	θ is never modified in place. A writer builds a new array and `publish`es
	it; the reference swap happens under a lock, and every published array is
	read-only, so a `snapshot` stays consistent for as long as the reader
	keeps it. The length (features + bias) is fixed at construction.
	"""

	def __init__(self, size: int):
		self._lock = Lock()
		self._values = self._freeze(np.zeros(size, dtype=float))

	@staticmethod
	def _freeze(values: np.ndarray) -> np.ndarray:
		values.flags.writeable = False
		return values

	def __len__(self) -> int:
		return self._values.shape[0]

	def snapshot(self) -> np.ndarray:
		with self._lock:
			return self._values

	def publish(self, values) -> np.ndarray:
		new = np.array(values, dtype=float, copy=True).reshape(-1)
		if new.shape[0] != len(self):
			raise DimensionError(f"parameter vector must have length {len(self)}, got {new.shape[0]}")
		new = self._freeze(new)
		with self._lock:
			self._values = new
		return new
