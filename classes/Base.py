#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
import numpy as np
from enum import Enum
from dataclasses import dataclass
from typing import Any, Sequence

from classes.Errors import ConfigurationError


@dataclass
class Example:
	"""One labeled training example: sparse (or dense) features X, label vector Y."""
	X: Any
	Y: Sequence[float] | float | None


@dataclass
class TextExample:
	"""One document X with its class Y in {0, ..., classes-1}."""
	X: str
	Y: int


class OptimizationMethod(Enum):
	BATCH = "batch"
	STOCHASTIC = "stochastic"

	@classmethod
	def parse(cls, value) -> "OptimizationMethod":
		if isinstance(value, cls):
			return value
		if isinstance(value, str):
			for method in cls:
				if value.strip().lower() == method.value:
					return method
		raise ConfigurationError(f"unrecognized optimization method: {value!r} "
								 f"(expected one of {[m.value for m in cls]})")


class Regularizer(Enum):
	"""
	Penalty applied to every weight during a gradient step.

	The bias θ[0] is never penalized. With strength λ:
		NONE -> 0
		L1   -> λ * sign(θ[i])
		L2   -> λ * θ[i]
	"""

	NONE = "none"
	L1 = "l1"
	L2 = "l2"

	@classmethod
	def parse(cls, value) -> "Regularizer":
		if isinstance(value, cls):
			return value
		if value is None:
			return cls.NONE
		if isinstance(value, str):
			for reg in cls:
				if value.strip().lower() == reg.value:
					return reg
		raise ConfigurationError(f"unrecognized regularization kind: {value!r} "
								 f"(expected one of {[r.value for r in cls]})")

	def gradient(self, theta: np.ndarray, strength: float) -> np.ndarray:
		grad = np.zeros_like(theta)
		if strength == 0.0 or self is Regularizer.NONE:
			return grad
		if self is Regularizer.L2:
			grad[1:] = strength * theta[1:]
		else:
			grad[1:] = strength * np.sign(theta[1:])
		return grad

	def cost(self, theta: np.ndarray, strength: float) -> float:
		if strength == 0.0 or self is Regularizer.NONE:
			return 0.0
		if self is Regularizer.L2:
			return 0.5 * strength * float(np.sum(theta[1:] ** 2))
		return strength * float(np.sum(np.abs(theta[1:])))
