"""
Call-by-need needs a cell that computes its value at most once.

The producer and its arguments are held as plain values, not captured in a closure,
and dropped as soon as the value exists. A cell asked for its value while it is busy
computing that very value is a cycle, and says so.
"""
import enum
from typing import Any, Callable
from .errors import CircularDependency

class State(enum.Enum):
	UNEVALUATED = "unevaluated"
	IN_PROGRESS = "in-progress"
	EVALUATED = "evaluated"

class Thunk:
	""" A kind of not-yet-value which can be forced. """
	__slots__ = ("state", "value", "_producer", "_args")

	def __init__(self, producer:Callable[..., Any], *args):
		self.state = State.UNEVALUATED
		self.value = None
		self._producer = producer
		self._args = args

	def __repr__(self):
		if self.state is State.EVALUATED:
			return "<Thunk = %r>" % (self.value,)
		return "<Thunk %s>" % self.state.value

	@property
	def in_progress(self) -> bool:
		return self.state is State.IN_PROGRESS

	def force(self):
		if self.state is State.EVALUATED:
			return self.value
		if self.state is State.IN_PROGRESS:
			raise CircularDependency()
		self.state = State.IN_PROGRESS
		try:
			value = self._producer(*self._args)
		except BaseException:
			self.state = State.UNEVALUATED
			raise
		self.value = value
		self.state = State.EVALUATED
		self._producer = self._args = None
		return value

def force(it:Any) -> Any:
	"""
	Force repeatedly until the result is no longer a thunk, then return that result.
	This simulates tail-call elimination, since closures promptly return thunks.
	"""
	while isinstance(it, Thunk): it = it.force()
	return it
