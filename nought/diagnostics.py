"""
Everything that tells the user what went wrong, and where.

A Report renders exactly one positioned complaint per fatal problem.
It does not decide whether to carry on; by convention whoever calls it
raises `Yuck` right afterwards.
"""
import enum
import re
import sys
import traceback
from typing import Mapping, NamedTuple, Optional, Sequence

from boozetools.support.failureprone import SourceText

SEMANTIC_HIGHLIGHT = "\x1b[43m"
SYNTAX_HIGHLIGHT = "\x1b[41m"
PLAIN = "\x1b[0m"

_OPENERS = "([{"
_CLOSERS = ")]}"

class Kind(enum.Enum):
	INTERNAL = "internal"
	SYNTAX = "syntax"
	SEMANTIC_NAMED = "semantic-named"
	SEMANTIC_GENERIC = "semantic-generic"
	SEMANTIC_MESSAGE = "semantic-message"

class Diagnostic(NamedTuple):
	address: str
	kind: Kind
	message: str
	position: Optional[int] = None
	width: int = 0
	extra: Sequence[str] = ()

###############################################################################
#
#  Finding the spot.
#

def row_col(source:SourceText, offset:int) -> tuple[int, int]:
	""" Both one-based, where SourceText counts columns from zero. """
	row, col = source.find_row_col(offset)
	return row, col + 1

def _term_pattern(term:str) -> str:
	# Word-boundaries only make sense next to word characters.
	pattern = re.escape(term)
	if re.match(r"\w", term[0]): pattern = r"\b" + pattern
	if re.match(r"\w", term[-1]): pattern = pattern + r"\b"
	return pattern

def find_term(text:str, term:str, near:Optional[int]=None) -> Optional[int]:
	"""
	Where the term shows up. A hint that already sits on the term wins;
	otherwise it's the first whole-word occurrence, or None.
	"""
	if not term or "\n" in term:
		return None
	if near is not None and text.startswith(term, near):
		return near
	match = re.search(_term_pattern(term), text)
	return match.start() if match else None

def _stray_closer(line:str) -> Optional[int]:
	""" Index of the first closing delimiter in the line with no opener to match. """
	stack = []
	in_string = escaped = False
	for index, c in enumerate(line):
		if in_string:
			if escaped: escaped = False
			elif c == "\\": escaped = True
			elif c == '"': in_string = False
		elif c == '"': in_string = True
		elif c in _OPENERS: stack.append(_CLOSERS[_OPENERS.index(c)])
		elif c in _CLOSERS:
			if not stack or stack.pop() != c:
				return index
	return None

def syntax_error_offset(text:str, rest:str, shortest_rest:Optional[str]=None) -> int:
	"""
	The naive answer is wherever the parser gave up. But if the leftovers open
	more delimiters than they close, or hold an odd number of unescaped quotes,
	then something was opened and never closed: blame the last non-blank line.
	"""
	unparsed = shortest_rest or rest
	position = len(text) - len(unparsed)
	opening = sum(rest.count(c) for c in _OPENERS)
	closing = sum(rest.count(c) for c in _CLOSERS)
	unterminated = len(re.findall(r'(?<!\\)"', rest)) % 2 == 1
	if opening <= closing and not unterminated:
		return position
	lines = text.split("\n")
	last = len(lines) - 1
	while last >= 0 and not lines[last].strip():
		last -= 1
	if last < 0:
		return position
	start = sum(len(line) + 1 for line in lines[:last])
	line = lines[last]
	stray = _stray_closer(line)
	if stray is not None and not unterminated:
		return start + stray
	return start + len(line.rstrip(" \t"))

###############################################################################

class Report:
	"""
	Sources are looked up by address in whatever mapping the content cache
	keeps of the text it has loaded so far.
	"""
	def __init__(self, *, verbose:bool=False, sources:Optional[Mapping[str, str]]=None, stream=None):
		self._verbose = bool(verbose)
		self._sources = sources if sources is not None else {}
		self._stream = stream
		self.kinds:list[Kind] = []

	@property
	def verbose(self): return self._verbose

	def attach(self, sources:Mapping[str, str]):
		self._sources = sources

	def ok(self): return not self.kinds
	def sick(self): return bool(self.kinds)

	def _print(self, *args):
		print(*args, file=self._stream or sys.stderr)

	def info(self, *args):
		if self._verbose:
			self._print(*args)

	def _source(self, address:str) -> SourceText:
		return SourceText(self._sources.get(address, ""), filename=address)

	# The three procedures the rest of the system relies on:

	def undefined_name(self, address:str, name:str, available:Sequence[str]):
		self.semantic_error(address, "Name not found: %s" % name, name, available, kind=Kind.SEMANTIC_NAMED)

	def semantic_error(self, address:str, message:str, search_term:str, extra:Sequence[str]=(), near:Optional[int]=None, kind=Kind.SEMANTIC_GENERIC):
		position = find_term(self._source(address).content, search_term, near)
		self._emit(Diagnostic(address, kind, message, position, len(search_term), tuple(extra)))

	def syntax_error(self, address:str, rest:str, shortest_rest:Optional[str]=None):
		text = self._source(address).content
		position = syntax_error_offset(text, rest, shortest_rest)
		self._emit(Diagnostic(address, Kind.SYNTAX, "Syntax error.", position, 1))

	# Plus a few less-positioned ones:

	def plain_error(self, address:str, message:str, extra:Sequence[str]=()):
		self._emit(Diagnostic(address, Kind.SEMANTIC_MESSAGE, message, extra=tuple(extra)))

	def internal_error(self, address:str, fault):
		extra = [fault.stack.rstrip()] if self._verbose and fault.stack else []
		self._emit(Diagnostic(address, Kind.INTERNAL, fault.message, extra=extra))

	def unexpected(self, ex:BaseException):
		""" For anything nobody classified. Terse unless asked otherwise. """
		if self._verbose:
			self._print("".join(traceback.format_exception(type(ex), ex, ex.__traceback__)).rstrip())
		else:
			self._print("Error: %s" % (str(ex) or type(ex).__name__))

	# Rendering:

	def _emit(self, diagnostic:Diagnostic):
		self.kinds.append(diagnostic.kind)
		self._print(self._render(diagnostic))
		(self._stream or sys.stderr).flush()

	def _render(self, d:Diagnostic) -> str:
		heading = d.message if d.kind is Kind.SYNTAX else "Error: " + d.message
		if d.position is None:
			return "\n".join([heading, d.address, *d.extra])
		source = self._source(d.address)
		row, col = row_col(source, d.position)
		line = source.line_of_text(row).rstrip("\r\n")
		if d.kind is Kind.SYNTAX:
			glyph = line[col - 1:col] or " "
			marked = line[:col - 1] + SYNTAX_HIGHLIGHT + glyph + PLAIN + line[col:]
		else:
			term = line[col - 1:col - 1 + d.width]
			marked = line[:col - 1] + SEMANTIC_HIGHLIGHT + term + PLAIN + line[col - 1 + d.width:]
		prefix = "%d:%d: " % (row, col)
		lines = [heading, d.address, prefix + marked]
		padding = " " * (len(prefix) + col - 1)
		lines.extend(padding + item for item in d.extra)
		return "\n".join(lines)
