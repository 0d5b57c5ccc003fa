"""
The closed family of things that can go wrong while bringing a program to a value.

Each semantic variant knows which diagnostic procedure tells its story,
so nobody upstream has to go sniffing for optional fields on a generic error.
"""
from typing import Optional, Sequence

class Yuck(Exception):
	"""
	Raised once a fatal problem has been reported.
	The first argument names the phase fraught with error.
	The end-user might not care about this, but it's handy for testing.
	"""
	pass

class ParseFault(Exception):
	""" The parser itself fell over while building a tree. Carries a stack-like trace. """
	def __init__(self, message:str, stack:str=""):
		super().__init__(message)
		self.message = message
		self.stack = stack

class SemanticError(Exception):
	""" Something the evaluator can blame on a particular bit of source text. """
	address: Optional[str] = None

	def blame(self, report, address:str):
		raise NotImplementedError(type(self))

	def at(self, address:Optional[str]) -> "SemanticError":
		""" Remember which module was running, unless somebody already did. """
		if self.address is None:
			self.address = address
		return self

class UndefinedName(SemanticError):
	def __init__(self, name:str, available:Sequence[str]=()):
		super().__init__("Name not found: %s" % name)
		self.name = name
		self.available = list(available)

	def blame(self, report, address:str):
		report.undefined_name(address, self.name, self.available)

class Complaint(SemanticError):
	""" A message plus some word in the source that ought to be highlighted. """
	def __init__(self, message:str, search_term:str, extra:Sequence[str]=(), near:Optional[int]=None):
		super().__init__(message)
		self.message = message
		self.search_term = search_term
		self.extra = list(extra)
		self.near = near

	def blame(self, report, address:str):
		report.semantic_error(address, self.message, self.search_term, self.extra, self.near)

class Grievance(SemanticError):
	""" Just a message. Nothing in particular to point at. """
	def __init__(self, message:str, extra:Sequence[str]=()):
		super().__init__(message)
		self.message = message
		self.extra = list(extra)

	def blame(self, report, address:str):
		report.plain_error(address, self.message, self.extra)

class CircularDependency(Complaint):
	def __init__(self, name:Optional[str]=None):
		if name is None:
			# Nothing to point at, so this one degrades to a plain message.
			super().__init__("This value depends on itself.", "")
		else:
			super().__init__("The value of '%s' depends on itself." % name, name)

	def blame(self, report, address:str):
		if self.search_term:
			super().blame(report, address)
		else:
			report.plain_error(address, self.message, self.extra)

class CyclicImport(Complaint):
	def __init__(self, importer:str, local_name:str, cycle:Sequence[str]):
		message = "Here begins a cycle of imports."
		extra = ["The full cycle is:"] + ["    " + address for address in cycle]
		super().__init__(message, local_name, extra)
		self.address = importer
		self.cycle = list(cycle)
