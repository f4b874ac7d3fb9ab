#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
import logging
import numpy as np
from time import perf_counter
from threading import Thread
from contextlib import contextmanager
from typing import Dict, Any, Callable, Iterable, List

from classes.Base import Example, TextExample
from classes.Channel import Channel

log = logging.getLogger(__name__)


@contextmanager
def timer(name: str, store: Dict[str, float] | None = None):
	t0 = perf_counter()
	try:
		yield
	finally:
		dt = perf_counter() - t0
		if store is not None:
			store[name] = dt

def regression_metrics(y_true: np.ndarray, y_pred: np.ndarray) -> Dict[str, float]:
	y_true = np.asarray(y_true, dtype=float); y_pred = np.asarray(y_pred, dtype=float)
	mse = float(np.mean((y_true - y_pred) ** 2))
	mae = float(np.mean(np.abs(y_true - y_pred)))
	ss_tot = float(np.sum((y_true - np.mean(y_true)) ** 2))
	ss_res = float(np.sum((y_true - y_pred) ** 2))
	r2 = 1.0 - (ss_res / ss_tot if ss_tot > 0 else 0.0)
	return {"mse": mse, "mae": mae, "r2": r2}

def _predict(model, X) -> np.ndarray:
	# scratch models score one vector with predict, many with predict_rows
	if hasattr(model, "predict_rows"):
		return model.predict_rows(X)
	return model.predict(X)


# ---------- Benchmark helpers ----------
def benchmark_regression(model, X_train, y_train: np.ndarray,
						 X_test, y_test: np.ndarray) -> Dict[str, Any]:
	times: Dict[str, float] = {}
	with timer("fit", store=times):
		model.fit(X_train, y_train)
	with timer("predict", store=times):
		y_pred = _predict(model, X_test)

	return {"model": model, "y_pred": y_pred, "times": times, "reg_metrics": regression_metrics(y_test, y_pred)}

def benchmark_online(model, rows: List, y_train: np.ndarray, X_test, y_test: np.ndarray,
					 epochs: int = 1, log_every: int = 0, on_error: Callable[[Exception], None] | None = None) -> Dict[str, Any]:
	"""
	Streams (rows, y_train) `epochs` times through `model.online_learn` and
	scores the model once the error channel is closed.
	"""
	times: Dict[str, float] = {}
	stream = Channel(maxsize=1024)
	errors = Channel(maxsize=1)
	updates = [0]

	def on_update(theta: np.ndarray) -> None:
		updates[0] += 1
		if log_every and updates[0] % log_every == 0:
			log.info(f"update {updates[0]}: bias={theta[0]:.5g}, |w|={np.linalg.norm(theta[1:]):.5g}")

	def produce() -> None:
		for _ in range(epochs):
			for x, y in zip(rows, y_train):
				stream.put(Example(X=x, Y=[float(y)]))
		stream.close()

	reported: List[Exception] = []
	with timer("fit", store=times):
		model.online_learn(errors, stream, on_update)
		producer = Thread(target=produce, name="online-producer", daemon=True)
		producer.start()
		for err in errors:
			reported.append(err)
			if on_error is not None:
				on_error(err)
		producer.join()
	with timer("predict", store=times):
		y_pred = _predict(model, X_test)

	return {"model": model, "y_pred": y_pred, "times": times, "updates": updates[0],
			"errors": reported, "reg_metrics": regression_metrics(y_test, y_pred)}

def benchmark_text_classification(model, train: Iterable[TextExample], test: Iterable[TextExample]) -> Dict[str, Any]:
	times: Dict[str, float] = {}
	stream = Channel()
	errors = Channel()
	model.update_stream(stream)
	with timer("fit", store=times):
		model.online_learn(errors)
		for ex in train:
			stream.put(ex)
		stream.close()
		reported = list(errors)
	test = list(test)
	with timer("predict", store=times):
		y_pred = np.array([model.predict(ex.X) for ex in test])
	y_true = np.array([ex.Y for ex in test])
	acc = float((y_pred == y_true).mean()) if len(test) else 0.0
	return {"model": model, "y_pred": y_pred, "times": times, "errors": reported, "acc": acc}
