"""
Lexical scopes, with an explicit link to whatever encloses them.

A module activation owns the root of its chain. Function calls hang a child scope
off the scope their function was defined in. Lookup follows the chain and nothing else.
"""
from typing import Any, Iterator, Optional
from .errors import UndefinedName

class _Placeholder:
	""" What a declared name holds before its value has been assigned. """
	def __repr__(self): return "<uninitialized>"

UNINITIALIZED = _Placeholder()

class Scope:
	_bindings: dict[str, Any]

	def __init__(self, address:str, parent:Optional["Scope"]=None):
		self.address = address
		self.parent = parent
		self._bindings = {}

	def __repr__(self):
		return "<Scope %s: %s>" % (self.address, ", ".join(self._bindings))

	def declare(self, name:str):
		self._bindings[name] = UNINITIALIZED

	def assign(self, name:str, value:Any):
		self._bindings[name] = value
		return value

	def update(self, pairs): self._bindings.update(pairs)

	def lookup(self, name:str) -> Any:
		scope = self
		while scope is not None:
			if name in scope._bindings:
				return scope._bindings[name]
			scope = scope.parent
		raise UndefinedName(name, self.names())

	def names(self) -> list[str]:
		""" Everything visible from here, innermost first, no duplicates. """
		seen = {}
		for scope in self._chain():
			for name in scope._bindings:
				seen.setdefault(name, None)
		return list(seen)

	def _chain(self) -> Iterator["Scope"]:
		scope = self
		while scope is not None:
			yield scope
			scope = scope.parent

	def child(self) -> "Scope":
		return Scope(self.address, self)
