#!/usr/bin/python3
# -*- Mode: Python; tab-width: 4; indent-tabs-mode: t; c-basic-offset: 4 -*- #
import queue
from threading import Lock


class ChannelClosed(Exception):
	"""Raised by `put`/`close` on a closed channel and by `get` once it is drained."""


_CLOSED = object()


class Channel:
	"""
	Closable FIFO between one producer and one consumer.

	Used both for the stream of training examples (caller -> learner) and for
	the error sink (learner -> caller). Closing is how the producer says
	"nothing more is coming": the consumer still receives everything queued
	before the close, then iteration stops.

	Parameters
	----------
	maxsize : int
		Capacity. 0 means unbounded. With a bounded channel `put` blocks while
		the channel is full, so a learner whose error sink is never drained
		stalls.
	"""

	def __init__(self, maxsize: int = 0):
		self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
		self._lock = Lock()
		self._closed = False

	@property
	def closed(self) -> bool:
		return self._closed

	def put(self, item) -> None:
		if self._closed:
			raise ChannelClosed("put on a closed channel")
		self._queue.put(item)

	def close(self) -> None:
		with self._lock:
			if self._closed:
				raise ChannelClosed("channel already closed")
			self._closed = True
		self._queue.put(_CLOSED)

	def get(self, timeout: float | None = None):
		"""Next item; raises `ChannelClosed` when closed and drained, `queue.Empty` on timeout."""
		item = self._queue.get(timeout=timeout)
		if item is _CLOSED:
			# leave the marker for the next reader
			self._queue.put(_CLOSED)
			raise ChannelClosed("channel closed")
		return item

	def __iter__(self):
		while True:
			try:
				yield self.get()
			except ChannelClosed:
				return
