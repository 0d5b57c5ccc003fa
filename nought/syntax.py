"""
The set of parse-nodes in simple form, plus the shapes the front end hands back.
The parser calls these constructors bottom-up as it recognizes each phrase.
Each node remembers the offset where it starts, which is handy when debugging the parser.
"""
from typing import NamedTuple, Optional, Sequence, Any
from .errors import ParseFault

class Expr:
	start: int = 0

class Literal(Expr):
	def __init__(self, value:Any, start:int=0):
		self.value, self.start = value, start
	def __repr__(self): return "<lit %r>" % (self.value,)

class Lookup(Expr):
	def __init__(self, name:str, start:int=0):
		self.name, self.start = name, start
	def __repr__(self): return "<ref:%s>" % self.name

class BinExp(Expr):
	def __init__(self, lhs:Expr, op:str, rhs:Expr, start:int=0):
		self.lhs, self.op, self.rhs, self.start = lhs, op, rhs, start
	def __repr__(self): return "(%r %s %r)" % (self.lhs, self.op, self.rhs)

class ShortCutExp(Expr):
	def __init__(self, lhs:Expr, op:str, rhs:Expr, start:int=0):
		self.lhs, self.op, self.rhs, self.start = lhs, op, rhs, start
	def __repr__(self): return "(%r %s %r)" % (self.lhs, self.op, self.rhs)

class UnaryExp(Expr):
	def __init__(self, op:str, arg:Expr, start:int=0):
		self.op, self.arg, self.start = op, arg, start
	def __repr__(self): return "(%s%r)" % (self.op, self.arg)

class Call(Expr):
	def __init__(self, fn_exp:Expr, args:Sequence[Expr], start:int=0):
		self.fn_exp, self.args, self.start = fn_exp, tuple(args), start
	def __repr__(self): return "%r%r" % (self.fn_exp, self.args)

class FieldReference(Expr):
	def __init__(self, lhs:Expr, field_name:str, start:int=0):
		self.lhs, self.field_name, self.start = lhs, field_name, start
	def __repr__(self): return "%r.%s" % (self.lhs, self.field_name)

class Subscript(Expr):
	def __init__(self, lhs:Expr, index:Expr, start:int=0):
		self.lhs, self.index, self.start = lhs, index, start
	def __repr__(self): return "%r[%r]" % (self.lhs, self.index)

class Cond(Expr):
	def __init__(self, if_part:Expr, then_part:Expr, else_part:Expr, start:int=0):
		self.if_part, self.then_part, self.else_part = if_part, then_part, else_part
		self.start = start
	def __repr__(self): return "<if %r then %r else %r>" % (self.if_part, self.then_part, self.else_part)

class LambdaForm(Expr):
	def __init__(self, params:Sequence[str], body:Expr, start:int=0):
		self.params, self.body, self.start = tuple(params), body, start
	def __repr__(self): return "<(%s) => %r>" % (", ".join(self.params), self.body)

class ExplicitList(Expr):
	def __init__(self, elts:Sequence[Expr], start:int=0):
		self.elts, self.start = tuple(elts), start
	def __repr__(self): return "<list %r>" % (self.elts,)

class RecordLiteral(Expr):
	def __init__(self, fields:Sequence[tuple[str, Expr]], start:int=0):
		self.fields, self.start = tuple(fields), start
	def __repr__(self): return "<record %r>" % (self.fields,)

###############################################################################

class Token(NamedTuple):
	""" The semantic value the scanner gives names, keywords and punctuation. """
	text: str
	start: int

class Declaration(NamedTuple):
	name: str
	expr: Expr

class ImportDirective(NamedTuple):
	name: str
	specifier: str

class ModuleSyntax(NamedTuple):
	""" What the grammar makes of a whole module, minus the imports. """
	declarations: Sequence[Declaration]
	body: Optional[Expr]

class ParseOutcome(NamedTuple):
	"""
	On success, `value` is the ModuleSyntax and nothing is left over.
	On failure, `rest` runs from the start of the statement the parser gave up on,
	and `shortest_rest` from the token it could not accept. An `error` means the
	parser broke.
	"""
	success: bool
	value: Optional[ModuleSyntax]
	rest: str
	shortest_rest: Optional[str] = None
	error: Optional[ParseFault] = None

class ImportOutcome(NamedTuple):
	success: bool
	value: Sequence[ImportDirective]
