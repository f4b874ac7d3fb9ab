#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
import argparse
import numpy as np
from sklearn.feature_extraction.text import CountVectorizer
from sklearn.naive_bayes import MultinomialNB
from sklearn.pipeline import make_pipeline
import utils
import bench
import plot
from classes.Base import TextExample

def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(description="Online Naive Bayes text classifier", formatter_class=argparse.ArgumentDefaultsHelpFormatter)
	parser.add_argument("-f", "--file", help="csv file with one document per row", required=True)
	parser.add_argument("--sep", help="csv separator", default=",")
	parser.add_argument("-T", "--text", help="text column", default="text")
	parser.add_argument("-F", "--to-find", help="class column (integers 0..classes-1)", default="label")
	parser.add_argument("-c", "--classes", help="number of classes (default: read from params file)", type=int, default=None)
	parser.add_argument("-p", "--params", help="hyperparameters file", default=None)
	parser.add_argument("-s", "--save", help="persist the trained model to this path", default=None)
	parser.add_argument("-v", "--verbose", help="-v info, -vv debug", action="count", default=0)
	return parser

def main(argv=None):
	args = build_parser().parse_args(argv)
	utils.set_verbosity(args.verbose)
	params = utils.read_params(args.params)
	classes = args.classes or params.get("NaiveBayes", {}).get("scratch", {}).get("classes", 2)

	df = utils.read_file(args.file, args.sep).dropna(subset=[args.text, args.to_find])
	texts = df[args.text].astype(str).to_numpy()
	labels = df[args.to_find].astype(int).to_numpy()
	X_train, X_test, y_train, y_test = utils.split(texts, labels)

	model = utils.get_class("NaiveBayes", "c")(classes=classes)
	train = [TextExample(X=str(x), Y=int(y)) for x, y in zip(X_train, y_train)]
	test = [TextExample(X=str(x), Y=int(y)) for x, y in zip(X_test, y_test)]
	res = bench.benchmark_text_classification(model, train, test)
	for err in res["errors"]:
		utils.log.warning(f"stream error: {err}")

	sk = make_pipeline(CountVectorizer(), MultinomialNB())
	times = {}
	with bench.timer("fit", store=times):
		sk.fit(X_train, y_train)
	with bench.timer("predict", store=times):
		y_pred = sk.predict(X_test)
	res_sci = {"times": times, "errors": [], "acc": float(np.mean(y_pred == y_test)) if len(y_test) else 0.0}

	plot.print_classification_report([res, res_sci], ["NaiveBayes", "MultinomialNB_scikit"])
	print(f"\n{model}")

	if args.save:
		model.persist_to_file(args.save)
		print(f"model saved to {args.save}")

if __name__ == "__main__":
	main()
