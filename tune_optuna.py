#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Optuna tuner for the scratch SparseLeastSquares and scikit's SGDRegressor.

Usage
-----
python tune_optuna.py \
  -f Data-20251001/ozone_complet.txt \
  -F maxO3 \
  --lib scratch \
  --n-trials 50

python tune_optuna.py \
  -f data/E2006.train.svm \
  --format svmlight \
  --lib scikit \
  --n-trials 30

Notes
-----
- Uses utils.read_table / utils.read_svmlight, utils.get_class / utils.algos_sci_map
  and bench.benchmark_regression, so preprocessing & metrics match main.py.
- Maximizes R² on the held out split.
- A diverged scratch model (non-finite R²) is reported as a pruned trial.
"""

import argparse
import numpy as np
import optuna
import utils
import bench

# ----------------------------- arg parsing -----------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Hyperparameter optimization with Optuna (scratch & scikit).",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("-f", "--file", required=True, help="Input file path")
    parser.add_argument("--format", choices=["csv", "svmlight"], default="csv", help="Input file format")
    parser.add_argument("--sep", default=";", help="csv separator")
    parser.add_argument("-F", "--to-find", help="Target column (csv only)")
    parser.add_argument("--lib", choices=["scratch", "scikit"], default="scratch",
                        help="Tune scratch or scikit implementation")
    parser.add_argument("--n-trials", type=int, default=30, help="Number of Optuna trials")
    parser.add_argument("--timeout", type=int, default=None, help="Global timeout in seconds")
    parser.add_argument("--seed", type=int, default=0, help="Random seed for split & Optuna")
    return parser

# ----------------------------- search spaces -----------------------------

LOG_1_3_10 = lambda lo, hi: [v for v in
    [m * 10**e for e in range(-7, 4) for m in (1, 3)] if lo <= v <= hi]

def suggest_params(trial: optuna.Trial, lib: str) -> dict:
    """
    Clean hyperparameters sampled from discrete grids (1-3-10 pattern),
    to avoid messy decimal values.
    """
    if lib == "scratch":
        return {
            "method": trial.suggest_categorical("method", ["batch", "stochastic"]),
            "learning_rate": trial.suggest_categorical("learning_rate", LOG_1_3_10(1e-5, 1e-1)),
            "penalty": trial.suggest_categorical("penalty", ["none", "l1", "l2"]),
            "regularization": trial.suggest_categorical("regularization", [0.0] + LOG_1_3_10(1e-5, 1.0)),
            "max_iter": trial.suggest_int("max_iter", 50, 1000, step=50),
        }
    return {
        "penalty": trial.suggest_categorical("penalty", ["l2", "l1", "elasticnet"]),
        "alpha": trial.suggest_categorical("alpha", LOG_1_3_10(1e-6, 1e-1)),
        "eta0": trial.suggest_categorical("eta0", LOG_1_3_10(1e-5, 1e-1)),
        "max_iter": trial.suggest_int("max_iter", 100, 2000, step=100),
        "random_state": 0,
    }

# ----------------------------- objective -----------------------------

def load_split(args):
    if args.format == "svmlight":
        X, y = utils.read_svmlight(args.file)
        return utils.split(X, y, test_size=0.2, random_state=args.seed)
    if not args.to_find:
        raise SystemExit("-F/--to-find is required for csv input")
    X, y, _ = utils.read_table(args.file, args.to_find, sep=args.sep)
    X_train, X_test, y_train, y_test = utils.split(X, y, test_size=0.2, random_state=args.seed)
    X_train, X_test = utils.standardize(X_train, X_test)
    return X_train, X_test, y_train, y_test

def build_model(lib: str, par: dict, n_features: int):
    if lib == "scratch":
        return utils.get_class("SparseLeastSquares", "r")(n_features=n_features, **par)
    return utils.algos_sci_map["SparseLeastSquares"]["r"](**par)

def make_objective(lib: str, data):
    X_train, X_test, y_train, y_test = data

    def objective(trial: optuna.Trial) -> float:
        par = suggest_params(trial, lib)
        model = build_model(lib, par, X_train.shape[1])
        res = bench.benchmark_regression(model, X_train, y_train, X_test, y_test)
        score = float(res["reg_metrics"]["r2"])
        trial.set_user_attr("times", res.get("times", {}))
        if not np.isfinite(score):
            raise optuna.TrialPruned("model diverged")
        return score

    return objective

# ----------------------------- run study -----------------------------

def main(argv=None):
    args = build_parser().parse_args(argv)
    study = optuna.create_study(
        study_name=f"SparseLeastSquares-{args.lib}",
        direction="maximize",
        sampler=optuna.samplers.TPESampler(seed=args.seed),
    )
    study.optimize(make_objective(args.lib, load_split(args)), n_trials=args.n_trials, timeout=args.timeout)

    print("\nBest trial:")
    bt = study.best_trial
    print(f"  value: {bt.value:.6f}")
    print("  params:")
    for k, v in bt.params.items():
        print(f"    {k}: {v}")

    print("\nYAML snippet to paste into params.yaml:")
    print("SparseLeastSquares:")
    print(f"  {args.lib}:")
    for k, v in bt.params.items():
        if isinstance(v, float):
            print(f"    {k}: {v:.6g}")
        else:
            print(f"    {k}: {v}")

if __name__ == "__main__":
    main()
