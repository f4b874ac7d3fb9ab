#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
"""Exceptions raised (or sent on error channels) by the learners."""


class LearningError(Exception):
	"""Base exception for the models."""


class ConfigurationError(LearningError):
	"""Unknown optimization method or penalty, bad hyperparameter, or no data stream."""


class EmptyDatasetError(LearningError):
	"""Batch training was asked to run on zero examples."""


class DataShapeError(LearningError):
	"""A training example does not match the model's declared dimensions."""


class LabelDimensionError(DataShapeError):
	"""A label vector is missing or its length is not the output dimension (1)."""


class DimensionError(LearningError):
	"""A feature vector given for scoring has the wrong length or an out of range index."""


class PersistenceError(LearningError):
	"""A model file path is empty or its content cannot be restored."""
