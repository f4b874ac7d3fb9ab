#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
import numpy as np
import os
import pandas as pd
import logging
import yaml
from platform import system

# scikit-learn imports (aliases to avoid conflicts)
from sklearn.datasets import load_svmlight_file
from sklearn.linear_model import SGDRegressor as SkSGDRegressor

from classes.Base import OptimizationMethod, Regularizer
from classes.SparseLeastSquares import SparseLeastSquares
from classes.NaiveBayes import NaiveBayes

logging.basicConfig(level=logging.WARNING, format="[%(asctime)s] %(levelname)s %(name)s - %(message)s", datefmt="%H:%M:%S")
log = logging.getLogger(__name__)

def set_verbosity(verbose: int) -> None:
	level = logging.WARNING if verbose <= 0 else (logging.INFO if verbose == 1 else logging.DEBUG)
	logging.getLogger().setLevel(level)

def getPath(script_dir, file_dir):
	plat = system()
	if plat == "Windows":
		script_dir = script_dir.replace("/", "\\")
		file_dir = file_dir.replace("/", "\\")
	else:
		script_dir = script_dir.replace("\\", "/")
		file_dir = file_dir.replace("\\", "/")
	return script_dir, file_dir

def split(X, y: np.ndarray, test_size=0.2, random_state=42):
	rng = np.random.default_rng(random_state)
	indices = rng.permutation(len(y))
	cut = int(len(y) * (1 - test_size))
	train_idx, test_idx = indices[:cut], indices[cut:]
	return X[train_idx], X[test_idx], y[train_idx], y[test_idx]

def read_file(fname: str, sep: str) -> pd.DataFrame:
	script_dir = os.path.dirname(os.path.abspath(__file__))
	script_dir, file_dir = getPath(script_dir, fname)
	full_path = os.path.join(script_dir, file_dir)
	log.debug(f"reading file: {full_path} (sep='{sep}')")
	return pd.read_csv(full_path, sep=sep)

def read_regression(fname: str, sep: str = ";") -> pd.DataFrame:
	df = read_file(fname, sep)
	df = df.fillna(df.mean(numeric_only=True))
	df = df.drop(columns=["id"], errors="ignore")
	return df

def read_table(fname: str, target: str, sep: str = ";") -> tuple[np.ndarray, np.ndarray, list[str]]:
	"""Numeric feature matrix, target vector and feature names of a CSV file."""
	df = read_regression(fname, sep)
	if target not in df.columns:
		raise KeyError(f"column {target!r} not found in {fname} (columns: {list(df.columns)})")
	y = df[target].to_numpy(dtype=float)
	features = df.drop(columns=[target]).select_dtypes(include=[np.number])
	return features.to_numpy(dtype=float, copy=True), y, features.columns.tolist()

def read_svmlight(fname: str, n_features: int | None = None):
	"""CSR feature matrix and target vector of a svmlight/libsvm file."""
	script_dir, file_dir = getPath(os.path.dirname(os.path.abspath(__file__)), fname)
	X, y = load_svmlight_file(os.path.join(script_dir, file_dir), n_features=n_features)
	log.debug(f"loaded svmlight: X={X.shape}, nnz={X.nnz}")
	return X.tocsr(), y.astype(np.float64)

def standardize(X_train: np.ndarray, X_test: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
	mu = X_train.mean(axis=0); sigma = X_train.std(axis=0); sigma[sigma == 0] = 1.0
	return (X_train - mu) / sigma, (X_test - mu) / sigma

def read_params(path: str | None = None) -> dict[str, dict[str, any]]:
	if path is None:
		script_dir = os.path.dirname(os.path.abspath(__file__))
		script_dir, file_dir = getPath(script_dir, "params.yaml")
		path = os.path.join(script_dir, file_dir)
	with open(path, "r") as fp:
		params = yaml.safe_load(fp)
	return params or {}

def apply_params(model, algo_name: str, params: dict, ar: list[str], is_sci=False) -> None:
	"""
	Applies the hyperparameters read from params.yaml to the model
	- For scikit: uses model.set_params(**par)
	- For scratch: setattr, after checking the attribute exists
	"""
	par = (
		params.get(algo_name, {})
			  .get("scikit" if is_sci else "scratch", {})
		or {}
	)
	if not par:
		return

	if in_args(ar, "hyperparams"):
		print(f"\nHyperparameters applied to {algo_name} "
			  f"({'scikit-learn' if is_sci else 'scratch'}) :")
		for k, v in par.items():
			print(f"   {k}: {v}")
		print("-" * 60)

	if hasattr(model, "set_params"):
		model.set_params(**par)  # scikit
		return
	for k, v in par.items():
		if not hasattr(model, k):
			raise AttributeError(f"{algo_name} has no hyperparameter {k!r}")
		setattr(model, k, v)  # scratch

def in_args(ar: list[str], val: str) -> bool:
	return "all" in ar or val in ar

type_map = {"r": "regression", "c": "classification"}
methods_map = {m.value: m for m in OptimizationMethod}
penalties_map = {r.value: r for r in Regularizer}
algos_map = {
	"SparseLeastSquares": {"r": SparseLeastSquares},
	"NaiveBayes": {"c": NaiveBayes},
}
algos_sci_map = {
	"SparseLeastSquares": {"r": SkSGDRegressor},
}

def get_class(algo_name: str, typ: str):
	try:
		return algos_map[algo_name][typ]
	except KeyError:
		raise ValueError(f"{algo_name} doesn't support {type_map.get(typ, typ)}") from None
