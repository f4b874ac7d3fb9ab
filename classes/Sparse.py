#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
"""
Sparse feature vectors.

A SparseVector is a plain ``dict[int, float]`` from feature index to value,
absent keys being 0. Dense rows (lists, numpy arrays) are accepted anywhere a
feature vector is expected and converted on the way in.
"""
import numbers
import numpy as np
import scipy.sparse as sp
from typing import Dict, Iterable, List

from classes.Errors import DataShapeError, DimensionError

SparseVector = Dict[int, float]


def _real(val, error: type[Exception]) -> float:
	if isinstance(val, (str, bytes)):
		raise error(f"feature value must be a number, got {val!r}")
	try:
		return float(val)
	except (TypeError, ValueError) as e:
		raise error(f"feature value must be a number, got {val!r}") from e


def as_sparse(x, n_features: int, error: type[Exception] = DataShapeError) -> SparseVector:
	"""Validate ``x`` against ``n_features`` and return it as a SparseVector."""
	if x is None:
		raise error("feature vector is missing")
	if isinstance(x, dict):
		out: SparseVector = {}
		for idx, val in x.items():
			if not isinstance(idx, numbers.Integral) or isinstance(idx, bool):
				raise error(f"feature index must be an integer, got {idx!r}")
			idx = int(idx)
			if idx < 0 or idx >= n_features:
				raise error(f"feature index {idx} out of range for {n_features} features")
			val = _real(val, error)
			if val:
				out[idx] = val
		return out

	if isinstance(x, (str, bytes)):
		raise error(f"feature vector must be a sequence of numbers, got {x!r}")
	try:
		raw = np.asarray(x)
	except (TypeError, ValueError) as e:
		raise error(f"feature vector is not a flat sequence of numbers: {e}") from e
	if raw.dtype.kind not in "biuf":
		raise error(f"feature vector must hold numbers, got dtype {raw.dtype}")
	row = raw.astype(float)
	if row.ndim != 1 or row.shape[0] != n_features:
		raise error(f"expected a feature vector of length {n_features}, got shape {row.shape}")
	nz = np.flatnonzero(row)
	return {int(i): float(row[i]) for i in nz}


def dot(theta: np.ndarray, x: SparseVector) -> float:
	# no validation, callers check x first
	total = float(theta[0])
	for idx, val in x.items():
		total += theta[idx + 1] * val
	return total


def hypothesis(theta: np.ndarray, x, n_features: int) -> float:
	"""h(x) = θ[0] + Σ θ[i+1]·x[i] over the present entries of x."""
	return dot(theta, as_sparse(x, n_features, error=DimensionError))


def rows_from(X) -> List:
	"""Split a matrix-like input (scipy sparse, ndarray, DataFrame, list) into rows."""
	if sp.issparse(X):
		X = X.tocsr()
		rows = []
		for r in range(X.shape[0]):
			start, end = X.indptr[r], X.indptr[r + 1]
			rows.append({int(i): float(v) for i, v in zip(X.indices[start:end], X.data[start:end]) if v})
		return rows
	if hasattr(X, "to_numpy"):
		X = X.to_numpy(dtype=float)
	if isinstance(X, np.ndarray):
		if X.ndim != 2:
			raise DataShapeError(f"expected a 2-D feature matrix, got shape {X.shape}")
		return list(X)
	return list(X)


def to_csr(rows: Iterable[SparseVector], n_features: int) -> sp.csr_matrix:
	"""Stack already validated SparseVectors into an (N, n_features) CSR matrix."""
	data, indices, indptr = [], [], [0]
	for row in rows:
		for idx, val in row.items():
			indices.append(idx)
			data.append(val)
		indptr.append(len(indices))
	return sp.csr_matrix((np.asarray(data, dtype=float), np.asarray(indices, dtype=np.int64), np.asarray(indptr, dtype=np.int64)),
						 shape=(len(indptr) - 1, n_features))
