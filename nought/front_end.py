"""
The front end: a scanner and LR(1) parser generated by booze-tools from Nought.md,
and the separate little reader for a module's import section.

The parser reports where it stopped rather than raising. The module system
decides what to make of a failure.
"""
import re
import sys
import traceback
from pathlib import Path
from typing import Iterator, Optional

from boozetools.macroparse.runtime import TypicalApplication, make_tables
from boozetools.scanning.engine import IterableScanner
from boozetools.scanning.interface import ScannerBlocked
from boozetools.parsing.interface import ParseError, END_OF_TOKENS
from boozetools.support.failureprone import SourceText

from . import syntax
from .errors import ParseFault

class NoughtParseError(ParseError):
	pass

_tables = make_tables(Path(__file__).parent/"Nought.md")
_parse_table = _tables['parser']
RESERVED = frozenset(t for t in _parse_table["terminals"] if t.isupper() and t.isalpha())

CONSTANTS = {"true": True, "false": False, "nil": None}
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\", "0": "\0"}

# After one of these, an opener on the same line continues the phrase.
_VALUE_ENDS = frozenset(["name", "literal", "string", ")", "]", "}"])
_CONTINUING = {"(": "apply", "[": "index", "-": "-"}
_OPENING = {"(": "(", "[": "[", "-": "negate"}

def _unescape(literal:str) -> str:
	def replace(match):
		code = match.group(1)
		if code not in _ESCAPES:
			raise ValueError("Unknown escape sequence \\%s" % code)
		return _ESCAPES[code]
	return re.sub(r"\\(.)", replace, literal[1:-1])

class NoughtParser(TypicalApplication):
	"""
	Not re-entrant: a parse keeps a little state between scan actions.
	`previous` is the kind of the last token scanned, which the layout rule needs.
	`settled` is where the statement in progress began, or None if that
	will be wherever the next token turns up.
	"""
	previous: Optional[str]
	settled: Optional[int]

	def bind_scan_actions(self, each_action):
		self.scan_bindings = super().bind_scan_actions(each_action)
		return self.scan_bindings

	def _reset(self, text:str):
		self.source = SourceText(text)
		self.previous, self.settled = None, 0

	def parse(self, text:str, **kwargs):
		self._reset(text)
		return super().parse(text, **kwargs)

	def tokens(self, text:str) -> Iterator[tuple]:
		""" Just the scanner, for those who only need a peek at the front of a module. """
		self._reset(text)
		self.yy = IterableScanner(text, self.dfa, self.scan_bindings)
		return iter(self.yy)

	def _emit(self, yy:IterableScanner, kind:str, semantic):
		if self.settled is None: self.settled = yy.left
		self.previous = kind
		yy.token(kind, semantic)

	def _first_on_line(self, offset:int) -> bool:
		text = self.source.content
		return not text[text.rfind("\n", 0, offset) + 1:offset].strip()

	def _settle(self, last:int):
		""" A statement just ended with the token at `last`. """
		self.settled = self.yy.left if self.yy.left > last else None

	# Scan actions:

	def scan_ignore(self, yy:IterableScanner): pass

	def scan_punctuation(self, yy:IterableScanner):
		punctuation = sys.intern(yy.match())
		self._emit(yy, punctuation, syntax.Token(punctuation, yy.left))

	def scan_opener(self, yy:IterableScanner):
		text = yy.match()
		if self.previous in _VALUE_ENDS and not self._first_on_line(yy.left):
			kind = _CONTINUING[text]
		else:
			kind = _OPENING[text]
		self._emit(yy, kind, syntax.Token(text, yy.left))

	def scan_number(self, yy:IterableScanner):
		text = yy.match()
		value = float(text) if any(c in text for c in ".eE") else int(text)
		self._emit(yy, "literal", syntax.Literal(value, yy.left))

	def scan_string(self, yy:IterableScanner):
		self._emit(yy, "string", syntax.Literal(_unescape(yy.match()), yy.left))

	def scan_word(self, yy:IterableScanner):
		word = yy.match()
		if word.islower() and word.upper() in RESERVED:
			self._emit(yy, word.upper(), syntax.Token(word, yy.left))
		elif word in CONSTANTS:
			self._emit(yy, "literal", syntax.Literal(CONSTANTS[word], yy.left))
		else:
			self._emit(yy, "name", syntax.Token(sys.intern(word), yy.left))

	# Parse actions, mostly putting tokens' text and offsets where the nodes want them:

	def parse_import(self, name, string):
		self._settle(string.start)
		return syntax.ImportDirective(name.text, string.value)

	@staticmethod
	def parse_nothing(): return syntax.ModuleSyntax((), None)
	@staticmethod
	def parse_body_only(body): return syntax.ModuleSyntax((), body)
	@staticmethod
	def parse_declarations_only(declarations): return syntax.ModuleSyntax(declarations, None)

	def parse_declaration(self, name, expr):
		self._settle(name.start)
		return syntax.Declaration(name.text, expr)

	@staticmethod
	def parse_empty(): return ()
	@staticmethod
	def parse_first(item): return [item]
	@staticmethod
	def parse_more(some, another):
		some.append(another)
		return some

	@staticmethod
	def parse_shortcut(lhs, op, rhs): return syntax.ShortCutExp(lhs, op.text, rhs, op.start)
	@staticmethod
	def parse_binary(lhs, op, rhs): return syntax.BinExp(lhs, op.text, rhs, op.start)
	@staticmethod
	def parse_negate(op, arg): return syntax.UnaryExp(op.text, arg, op.start)
	@staticmethod
	def parse_conditional(keyword, if_part, then_part, else_part):
		return syntax.Cond(if_part, then_part, else_part, keyword.start)

	@staticmethod
	def parse_lambda_one(name, arrow, body): return syntax.LambdaForm([name.text], body, arrow.start)
	@staticmethod
	def parse_lambda_none(arrow, body): return syntax.LambdaForm([], body, arrow.start)
	@staticmethod
	def parse_lambda_many(first, more, arrow, body):
		return syntax.LambdaForm([first.text] + [n.text for n in more], body, arrow.start)

	def parse_lambda_paren(self, inner, arrow, body):
		""" Only a lone name may stand in parentheses before an arrow. """
		if not isinstance(inner, syntax.Lookup):
			raise NoughtParseError(["parenthesized"], "=>", arrow.start)
		return syntax.LambdaForm([inner.name], body, arrow.start)

	@staticmethod
	def parse_call(fn_exp, paren, args): return syntax.Call(fn_exp, args, paren.start)
	@staticmethod
	def parse_field(lhs, name): return syntax.FieldReference(lhs, name.text, name.start)
	@staticmethod
	def parse_subscript(lhs, bracket, index): return syntax.Subscript(lhs, index, bracket.start)
	@staticmethod
	def parse_lookup(name): return syntax.Lookup(name.text, name.start)
	@staticmethod
	def parse_list(bracket, elts): return syntax.ExplicitList(elts, bracket.start)
	@staticmethod
	def parse_record(brace, fields):
		return syntax.RecordLiteral([(name.text, expr) for name, expr in fields], brace.start)

	@staticmethod
	def default_parse(ctor, *args):
		return getattr(syntax, ctor)(*args)

	# Trouble:

	def unexpected_token(self, kind, semantic, pds):
		offset = len(self.source.content) if kind == END_OF_TOKENS else self.yy.left
		raise NoughtParseError(self.stack_symbols(pds), kind, offset)

	def on_stuck(self, yy:IterableScanner):
		raise ScannerBlocked(yy.left, yy.condition)

	def exception_parsing(self, ex:Exception, constructor_id:int, args):
		raise ex from None

nought_parser = NoughtParser(_tables)

def _stopped(text:str, offset:int) -> syntax.ParseOutcome:
	settled = nought_parser.settled
	if settled is None or settled > offset: settled = offset
	return syntax.ParseOutcome(False, None, text[settled:], text[offset:])

def parse_text(text:str) -> syntax.ParseOutcome:
	""" Submit text to the parser; report how far it got. """
	try:
		module = nought_parser.parse(text)
	except NoughtParseError as ex:
		stack_symbols, lookahead, offset = ex.args
		return _stopped(text, offset)
	except ScannerBlocked as ex:
		return _stopped(text, ex.position)
	except Exception as ex:
		fault = ParseFault(str(ex) or type(ex).__name__, traceback.format_exc())
		return syntax.ParseOutcome(False, None, text, None, fault)
	return syntax.ParseOutcome(True, module, "", "")

def extract_imports(text:str) -> syntax.ImportOutcome:
	"""
	The import section is the run of `name "specifier"` pairs at the top.
	A specifier that will not unescape means no imports at all.
	"""
	found = []
	stream = nought_parser.tokens(text)
	try:
		for (kind, name), (next_kind, specifier) in zip(stream, stream):
			if kind != "name" or next_kind != "string": break
			found.append(syntax.ImportDirective(name.text, specifier.value))
	except ScannerBlocked:
		pass
	except ValueError:
		return syntax.ImportOutcome(False, [])
	return syntax.ImportOutcome(True, found)
