#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
import argparse
import numpy as np
import utils
import bench
import plot
from classes.Base import OptimizationMethod
from classes.Sparse import rows_from

def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(description="Sparse least squares trained by gradient descent, batch or online", formatter_class=argparse.ArgumentDefaultsHelpFormatter)
	parser.add_argument("-f", "--file", help="input file", required=True)
	parser.add_argument("--format", help="input file format", choices=["csv", "svmlight"], default="csv")
	parser.add_argument("--sep", help="csv separator", default=";")
	parser.add_argument("-F", "--to-find", help="dependant var to find (csv only)")
	parser.add_argument("-m", "--method", help="optimization method", choices=list(utils.methods_map), default=None)
	parser.add_argument("--lr", help="learning rate", type=float, default=None)
	parser.add_argument("--reg", help="regularization strength", type=float, default=None)
	parser.add_argument("--penalty", help="regularization kind", choices=list(utils.penalties_map), default=None)
	parser.add_argument("--max-iter", help="iterations of batch training", type=int, default=None)
	parser.add_argument("--online", help="train from a live stream instead of a batch", action="store_true")
	parser.add_argument("--epochs", help="passes over the training set in online mode", type=int, default=10)
	parser.add_argument("--log-every", help="log every N online updates (0 disables)", type=int, default=0)
	parser.add_argument("-p", "--params", help="hyperparameters file", default=None)
	parser.add_argument("-s", "--save", help="persist the trained model to this path", default=None)
	parser.add_argument("--show", help="extra output", nargs="*", choices=["hyperparams", "plots", "all"], default=[])
	parser.add_argument("-v", "--verbose", help="-v info, -vv debug", action="count", default=0)
	return parser

def load_dataset(args):
	if args.format == "svmlight":
		X, y = utils.read_svmlight(args.file)
		feature_names = [f"x{i}" for i in range(X.shape[1])]
		X_train, X_test, y_train, y_test = utils.split(X, y)
		return X_train, X_test, y_train, y_test, feature_names

	if not args.to_find:
		raise SystemExit("-F/--to-find is required for csv input")
	X, y, feature_names = utils.read_table(args.file, args.to_find, sep=args.sep)
	X_train, X_test, y_train, y_test = utils.split(X, y)
	X_train, X_test = utils.standardize(X_train, X_test)
	return X_train, X_test, y_train, y_test, feature_names

def configure(model, args, params) -> None:
	utils.apply_params(model, "SparseLeastSquares", params, args.show)
	if args.method is not None: model.method = utils.methods_map[args.method]
	if args.lr is not None: model.learning_rate = args.lr
	if args.reg is not None: model.regularization = args.reg
	if args.penalty is not None: model.penalty = utils.penalties_map[args.penalty]
	if args.max_iter is not None: model.max_iter = args.max_iter

def main(argv=None):
	args = build_parser().parse_args(argv)
	utils.set_verbosity(args.verbose)
	params = utils.read_params(args.params)

	X_train, X_test, y_train, y_test, feature_names = load_dataset(args)
	n_features = X_train.shape[1]

	ModelClass = utils.get_class("SparseLeastSquares", "r")
	model = ModelClass(n_features=n_features, record_history=utils.in_args(args.show, "plots"))
	configure(model, args, params)

	model_sci = utils.algos_sci_map["SparseLeastSquares"]["r"]()
	utils.apply_params(model_sci, "SparseLeastSquares", params, args.show, is_sci=True)

	method = 'online' if args.online else OptimizationMethod.parse(model.method).value
	label = f"SparseLeastSquares[{method}]"
	if args.online:
		res = bench.benchmark_online(model, rows_from(X_train), y_train, X_test, y_test,
									 epochs=args.epochs, log_every=args.log_every,
									 on_error=lambda e: utils.log.warning(f"stream error: {e}"))
	else:
		res = bench.benchmark_regression(model, X_train, y_train, X_test, y_test)
	res_sci = bench.benchmark_regression(model_sci, X_train, y_train, X_test, y_test)

	plot.print_regression_report([res, res_sci], [label, "SGDRegressor_scikit"])
	print(f"\n{model}")

	if args.save:
		model.persist_to_file(args.save)
		print(f"model saved to {args.save}")

	if utils.in_args(args.show, "plots"):
		plot.plot_regression_parity(np.asarray(y_test, dtype=float), [res, res_sci], [label, "SGDRegressor_scikit"])
		if model.cost_history_:
			plot.plot_cost_history(model.cost_history_)
		plot.plot_linear_importances(model.coef_, feature_names, top_k=10, title="SparseLeastSquares - importances")

if __name__ == "__main__":
	main()
