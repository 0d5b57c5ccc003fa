"""
The evaluation engine: from an address to that module's one and only value.

Imports become thunks, so a dependency gets evaluated only if somebody actually
looks at it, and only once no matter how many modules import it. Declarations
bind in two passes -- every name first, then every value -- so siblings can
refer to one another (and to themselves) regardless of the order they're written in.
"""
import enum
from typing import Any, Callable, Protocol

from . import syntax
from .diagnostics import Report
from .errors import Yuck, SemanticError, CyclicImport
from .lazy import Thunk
from .modularity import ModuleParser
from .scope import Scope

class State(enum.Enum):
	UNPARSED = "unparsed"
	PARSED = "parsed"
	EVALUATING = "evaluating"
	EVALUATED = "evaluated"
	FAILED = "failed"

class Evaluator(Protocol):
	""" What the engine needs from an expression evaluator. """
	def evaluate(self, expr:syntax.Expr, scope:Scope) -> Any: ...
	def force(self, value:Any) -> Any: ...

class Engine:
	def __init__(self, parser:ModuleParser, evaluator:Evaluator, report:Report):
		self._parser = parser
		self._evaluator = evaluator
		self._report = report
		self.values:dict[str, Any] = {}
		self._evaluating:list[str] = []
		self._failed:set[str] = set()

	def state_of(self, address:str) -> State:
		if address in self._failed: return State.FAILED
		if address in self.values: return State.EVALUATED
		if address in self._evaluating: return State.EVALUATING
		if address in self._parser: return State.PARSED
		return State.UNPARSED

	def evaluate(self, address:str) -> Any:
		if address in self.values:
			return self.values[address]
		try: module = self._parser.parse(address)
		except Yuck:
			self._failed.add(address)
			raise
		self._report.info("Evaluating", address)
		self._evaluating.append(address)
		try:
			scope = Scope(address)
			for name, dep in module.imports:
				scope.assign(name, Thunk(self._import, address, name, dep))
			for decl in module.declarations:
				scope.declare(decl.name)
			evaluator = self._evaluator
			for decl in module.declarations:
				scope.assign(decl.name, evaluator.evaluate(decl.expr, scope))
			if module.body is None:
				value = None
			else:
				value = evaluator.force(evaluator.evaluate(module.body, scope))
		except SemanticError as ex:
			self._failed.add(address)
			self._blame(ex, address)
		except Yuck:
			self._failed.add(address)
			raise
		finally:
			self._evaluating.pop()
		self.values[address] = value
		return value

	def render(self, address:str, finish:Callable[[Any], str]) -> str:
		"""
		Evaluate the module, then finish the job, e.g. by printing its value.
		A value may still hold thunks that fail when finally forced;
		failures there get the same treatment as any other.
		"""
		value = self.evaluate(address)
		try:
			return finish(value)
		except SemanticError as ex:
			self._blame(ex, address)

	def _blame(self, ex:SemanticError, address:str):
		ex.blame(self._report, ex.address or address)
		raise Yuck("evaluate") from ex

	def _import(self, importer:str, local_name:str, address:str) -> Any:
		""" What an import thunk does when forced. """
		if address in self._evaluating:
			raise self._cycle(importer, local_name, address)
		return self.evaluate(address)

	def _cycle(self, importer:str, local_name:str, address:str) -> CyclicImport:
		"""
		Blame the import that closed the loop. The importer is usually the module
		evaluating right now, but a thunk from a module that has already finished
		can close it just as well.
		"""
		cycle = self._evaluating[self._evaluating.index(address):]
		if cycle[-1] != importer:
			cycle.append(importer)
		return CyclicImport(importer, local_name, cycle + [address])
