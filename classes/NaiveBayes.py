#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
import logging
import math
import numbers
import os
import threading
import yaml
from typing import Callable, Dict, List, Optional

from classes.Base import TextExample
from classes.Channel import Channel
from classes.Errors import ConfigurationError, DataShapeError, PersistenceError

log = logging.getLogger(__name__)

Sanitizer = Callable[[str], bool]


def drop_punctuation(ch: str) -> bool:
	return not (ch.isalnum() or ch.isspace())


class NaiveBayes:
	"""
	Multinomial Naive Bayes text classifier trained online from a stream of
	TextExample(X=document, Y=class).

	Bayes rule gives P(y|x) ∝ P(x|y) * P(y). Assuming words independent given
	the class, and working in log space to avoid underflow:

		Class(x) = argmax_c { log P(y = c) + Σ_w log P(w | y = c) }

	with Laplace smoothing P(w|c) = (n_wc + 1) / (n_c + |V|), where n_wc is the
	number of times w was seen in class c, n_c the number of words seen in c
	and |V| the dictionary size. Words never seen in training are ignored.

	Parameters
	----------
	stream : Channel or None
		Stream of TextExample consumed by `online_learn`.
	classes : int
		Number of classes; labels must be in {0, ..., classes-1}.
	sanitize : callable or None
		Predicate on one character, True for characters to drop before
		tokenizing. Defaults to dropping anything neither alphanumeric nor
		whitespace.

	Attributes
	----------
	words : dict
		word -> per class counts.
	count : list
		Documents seen per class.
	word_count : list
		Words seen per class.
	typ : str
		'c' indicating a classification task.
	"""

	typ = 'c'

	def __init__(self, stream: Optional[Channel] = None, classes: int = 2, sanitize: Optional[Sanitizer] = None):
		if int(classes) < 2:
			raise ConfigurationError(f"NaiveBayes needs at least 2 classes, got {classes}")
		self.classes = int(classes)
		self.words: Dict[str, List[int]] = {}
		self.count: List[int] = [0] * self.classes
		self.word_count: List[int] = [0] * self.classes
		self.sanitize = sanitize or drop_punctuation
		self.stream = stream
		self._lock = threading.Lock()

	def update_stream(self, stream: Channel) -> None:
		self.stream = stream

	def update_sanitize(self, sanitize: Sanitizer) -> None:
		self.sanitize = sanitize

	@property
	def dict_size(self) -> int:
		return len(self.words)

	def tokenize(self, text: str) -> List[str]:
		clean = "".join(ch for ch in text if not self.sanitize(ch))
		return clean.lower().split()

	# ---------- training ----------
	def _learn_one(self, example) -> None:
		if not isinstance(example, TextExample):
			raise DataShapeError(f"expected a TextExample, got {type(example).__name__}")
		y = example.Y
		if isinstance(y, bool) or not isinstance(y, numbers.Integral) or not 0 <= y < self.classes:
			raise DataShapeError(f"class {y!r} out of range for {self.classes} classes")
		if example.X is not None and not isinstance(example.X, str):
			raise DataShapeError(f"document must be a string, got {type(example.X).__name__}")
		tokens = self.tokenize(example.X or "")
		with self._lock:
			self.count[y] += 1
			for word in tokens:
				counts = self.words.setdefault(word, [0] * self.classes)
				counts[y] += 1
				self.word_count[y] += 1

	def _run(self, errors: Channel) -> None:
		if self.stream is None:
			log.error("NaiveBayes online learning started without a data stream")
			errors.put(ConfigurationError("online learning needs a data stream, got None"))
			errors.close()
			return
		seen = 0
		try:
			for example in self.stream:
				try:
					self._learn_one(example)
				except DataShapeError as e:
					log.warning(f"skipping document: {e}")
					errors.put(e)
					continue
				seen += 1
		finally:
			log.debug(f"NaiveBayes learned {seen} documents, {self.dict_size} words")
			errors.close()

	def online_learn(self, errors: Channel) -> threading.Thread:
		"""Consume the model stream on a background thread; `errors` is closed when done."""
		worker = threading.Thread(target=self._run, args=(errors,), name="naive-bayes-learner", daemon=True)
		worker.start()
		return worker

	# ---------- prediction ----------
	def _log_scores(self, text: str) -> List[float]:
		tokens = self.tokenize(text)
		with self._lock:
			total = sum(self.count)
			vocab = len(self.words)
			scores = []
			for c in range(self.classes):
				if self.count[c] == 0:
					scores.append(-math.inf)
					continue
				score = math.log(self.count[c] / total)
				denom = self.word_count[c] + vocab
				for word in tokens:
					counts = self.words.get(word)
					if counts is None:
						continue
					score += math.log((counts[c] + 1) / denom)
				scores.append(score)
		return scores

	def predict(self, text: str) -> int:
		scores = self._log_scores(text)
		return max(range(self.classes), key=lambda c: scores[c])

	def probability(self, text: str) -> tuple[int, float]:
		"""Most likely class and its normalized posterior probability."""
		scores = self._log_scores(text)
		best = max(range(self.classes), key=lambda c: scores[c])
		if scores[best] == -math.inf:
			return best, 1.0 / self.classes
		total = sum(math.exp(s - scores[best]) for s in scores if s != -math.inf)
		return best, 1.0 / total

	# ---------- persistence ----------
	def persist_to_file(self, path: str) -> None:
		if not path:
			raise PersistenceError("cannot persist the model to an empty path")
		with self._lock:
			state = {
				"classes": self.classes,
				"count": list(self.count),
				"word_count": list(self.word_count),
				"words": {w: list(c) for w, c in self.words.items()},
			}
		os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
		with open(path, "w") as fp:
			yaml.safe_dump(state, fp, sort_keys=True, allow_unicode=True)

	def restore_from_file(self, path: str) -> None:
		if not path:
			raise PersistenceError("cannot restore the model from an empty path")
		with open(path, "r") as fp:
			try:
				state = yaml.safe_load(fp)
			except yaml.YAMLError as e:
				raise PersistenceError(f"{path}: malformed model file: {e}") from e
		if not isinstance(state, dict) or any(k not in state for k in ("classes", "count", "word_count", "words")):
			raise PersistenceError(f"{path}: model file must define classes, count, word_count and words")
		try:
			classes = int(state["classes"])
			count = [int(v) for v in state["count"]]
			word_count = [int(v) for v in state["word_count"]]
			words = {str(w): [int(v) for v in c] for w, c in (state["words"] or {}).items()}
		except (TypeError, ValueError, AttributeError) as e:
			raise PersistenceError(f"{path}: invalid model file: {e}") from e
		if len(count) != classes or len(word_count) != classes or any(len(c) != classes for c in words.values()):
			raise PersistenceError(f"{path}: counts do not match {classes} classes")

		with self._lock:
			self.classes = classes
			self.count = count
			self.word_count = word_count
			self.words = words

	def __str__(self) -> str:
		return (f"h(θ) = argmax_c{{log(P(y = c)) + Σlog(P(x|y = c))}}\n"
				f"\tClasses: {self.classes}\n\tWords evaluated in model: {self.dict_size}\n")
