#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from typing import List, Dict

def plot_linear_importances(w: np.ndarray, feature_names: List[str], top_k: int = 15, title: str = "Linear weights") -> None:
	"""
	Horizontal bars of the `top_k` largest weights by magnitude, signed,
	so negative contributions stay visible.
	"""
	w = np.asarray(w, dtype=float)
	k = min(top_k, len(w))
	order = np.argsort(np.abs(w))[::-1][:k][::-1]
	colors = ["tab:red" if w[i] < 0 else "tab:blue" for i in order]

	pos = np.arange(k)
	plt.figure(figsize=(8, max(3, 0.4 * k)))
	plt.barh(pos, w[order], color=colors)
	plt.yticks(pos, [feature_names[i] for i in order])
	plt.axvline(0.0, color="black", linewidth=0.8)
	plt.xlabel("weight (blue > 0, red < 0)")
	plt.title(title)
	plt.tight_layout()
	plt.show()

# --- Regression ---
def regression_table(models_results: List[Dict], labels: List[str]) -> pd.DataFrame:
	rows = []
	for lab, res in zip(labels, models_results):
		row = {"model": lab, **res["reg_metrics"],
			   "fit_ms": res["times"]["fit"] * 1000, "pred_ms": res["times"]["predict"] * 1000}
		if "updates" in res:
			row["updates"] = res["updates"]
			row["errors"] = len(res["errors"])
		rows.append(row)
	return pd.DataFrame(rows).set_index("model")

def print_regression_report(models_results: List[Dict], labels: List[str]) -> None:
	"""
	One line per model: MSE / MAE / R², fit and predict time, and for models
	trained from a stream the number of applied updates and reported errors.
	"""
	print("\n=== Regression report ===")
	table = regression_table(models_results, labels)
	for lab, row in table.iterrows():
		line = (f"{lab:>32} | MSE={row['mse']:.4f} | MAE={row['mae']:.4f} | R²={row['r2']:.4f} | "
				f"fit={row['fit_ms']:.1f} ms | pred={row['pred_ms']:.1f} ms")
		if "updates" in table.columns and not pd.isna(row["updates"]):
			line += f" | updates={int(row['updates'])} | errors={int(row['errors'])}"
		print(line)

def plot_regression_parity(y_true: np.ndarray, models_results: List[Dict], labels: List[str],
						   title: str = "Predicted vs Actual") -> None:
	"""
	Left: predictions against targets with the y=x line. Right: residual histogram.
	"""
	y_true = np.asarray(y_true, dtype=float)
	fig, (ax_par, ax_res) = plt.subplots(1, 2, figsize=(11, 5))
	lo, hi = y_true.min(), y_true.max()
	for res, lab in zip(models_results, labels):
		y_pred = np.asarray(res["y_pred"], dtype=float)
		ax_par.scatter(y_true, y_pred, s=12, alpha=0.5, label=lab)
		ax_res.hist(y_pred - y_true, bins=40, alpha=0.5, label=lab)
	ax_par.plot([lo, hi], [lo, hi], linestyle="--", color="black", linewidth=1)
	ax_par.set_xlabel("target")
	ax_par.set_ylabel("prediction")
	ax_par.legend()
	ax_res.axvline(0.0, color="black", linewidth=1)
	ax_res.set_xlabel("prediction - target")
	ax_res.set_ylabel("count")
	fig.suptitle(title)
	fig.tight_layout()
	plt.show()

def plot_cost_history(cost_history: List[float], title: str = "Training cost per iteration") -> None:
	plt.figure()
	plt.plot(np.arange(1, len(cost_history) + 1), cost_history, linewidth=2)
	plt.yscale("log")
	plt.xlabel("iteration")
	plt.ylabel("MSE + penalty")
	plt.title(title)
	plt.tight_layout()
	plt.show()

# --- Classification ---
def print_classification_report(models_results: List[Dict], labels: List[str]) -> None:
	print("\n=== Classification report ===")
	for lab, res in zip(labels, models_results):
		t = res["times"]
		print(f"{lab:>24} | Acc={res['acc']:.3f} | errors={len(res['errors'])} | "
			  f"fit={t['fit']*1000:.1f} ms | pred={t['predict']*1000:.1f} ms")
