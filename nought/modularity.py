"""
Here find the module system -- such as it is.

Focus very specifically on getting from an address to a Module record:
load the text, read the import section, parse the rest, and resolve
each import against the importing module's own address. Each address
gets this treatment at most once.
"""
from typing import Callable, NamedTuple, Optional, Sequence

from . import syntax
from .addressing import resolve
from .content import ContentCache
from .diagnostics import Report
from .errors import Yuck
from .front_end import parse_text, extract_imports

class Module(NamedTuple):
	address: str
	imports: Sequence[tuple[str, str]]
	declarations: Sequence[syntax.Declaration]
	body: Optional[syntax.Expr]

	def importer_of(self, address:str) -> Optional[str]:
		""" The local name under which this module imports the given address, if it does. """
		for name, dep in self.imports:
			if dep == address: return name
		return None

class ModuleParser:
	"""
	The grammar and the import-extractor are collaborators handed in from outside,
	which is mainly so that tests can count how often they get called.
	"""
	def __init__(
		self, cache:ContentCache, report:Report,
		grammar:Callable[[str], syntax.ParseOutcome]=parse_text,
		import_extractor:Callable[[str], syntax.ImportOutcome]=extract_imports,
	):
		self._cache = cache
		self._report = report
		self._grammar = grammar
		self._import_extractor = import_extractor
		self.modules:dict[str, Module] = {}

	def __contains__(self, address:str) -> bool:
		return address in self.modules

	def parse(self, address:str) -> Module:
		""" I/O failures from the content cache go straight through, unhandled. """
		if address in self.modules:
			return self.modules[address]
		text = self._cache.get_or_load(address)
		found = self._import_extractor(text)
		directives = found.value if found.success else ()
		outcome = self._grammar(text)
		if not outcome.success:
			if outcome.error is not None:
				self._report.internal_error(address, outcome.error)
			else:
				self._report.syntax_error(address, outcome.rest, outcome.shortest_rest)
			raise Yuck("parse")
		if outcome.rest:
			self._report.syntax_error(address, outcome.rest, outcome.shortest_rest)
			raise Yuck("parse")
		imports = tuple((d.name, self._resolve(address, d)) for d in directives)
		module = Module(address, imports, tuple(outcome.value.declarations), outcome.value.body)
		self.modules[address] = module
		return module

	def _resolve(self, address:str, directive:syntax.ImportDirective) -> str:
		try:
			return resolve(address, directive.specifier)
		except ValueError as ex:
			message = "Cannot import %r: %s" % (directive.specifier, ex)
			self._report.semantic_error(address, message, directive.name)
			raise Yuck("parse") from ex
