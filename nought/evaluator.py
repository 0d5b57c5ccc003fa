"""
Call-By-Need with Direct Interpretation.

The module engine only ever calls `evaluate` and `force`. Everything else here is
the business of turning expressions into values, lazily: `evaluate` hands back
a thunk for anything worth delaying, and `strict` is what actually does the work.

Primitive values play themselves: numbers, strings, booleans, and None for nil.
Lists are tuples of lazy values. Records are dictionaries of lazy values.
"""
import operator
from typing import Any, Union

from boozetools.support.foundation import Visitor

from . import syntax
from .errors import Complaint, UndefinedName, CircularDependency
from .lazy import Thunk, force
from .scope import Scope, UNINITIALIZED

class Closure:
	""" A lambda tied to the scope it was born in. """
	def __init__(self, form:syntax.LambdaForm, scope:Scope):
		self.form = form
		self.scope = scope

	def __repr__(self): return "<function>"

	@property
	def arity(self): return len(self.form.params)

	def apply(self, walker:"TreeWalker", args) -> Any:
		inner = self.scope.child()
		inner.update(zip(self.form.params, args))
		# Handing back a thunk instead of a value keeps deep recursion off the Python stack.
		return walker.evaluate(self.form.body, inner)

STRICT_VALUE = Union[int, float, str, bool, None, tuple, dict, Closure]
LAZY_VALUE = Union[STRICT_VALUE, Thunk]

_ARITHMETIC = {
	"-": operator.sub,
	"*": operator.mul,
	"/": operator.truediv,
	"%": operator.mod,
}
_ORDERING = {
	"<": operator.lt,
	"<=": operator.le,
	">": operator.gt,
	">=": operator.ge,
}
_SHORTCUT = {"&&": False, "||": True}

# For these, there is no profit to delay:
_NO_DELAY = (syntax.Literal, syntax.LambdaForm)

def _is_number(x): return isinstance(x, (int, float)) and not isinstance(x, bool)

def type_name(x:STRICT_VALUE) -> str:
	if x is None: return "nil"
	if isinstance(x, bool): return "flag"
	if _is_number(x): return "number"
	if isinstance(x, str): return "string"
	if isinstance(x, tuple): return "list"
	if isinstance(x, dict): return "record"
	if isinstance(x, Closure): return "function"
	return type(x).__name__

class TreeWalker(Visitor):
	"""
	The expression evaluator. It never catches the semantic errors it raises;
	it just makes sure each one knows which module's text to blame.
	"""

	def evaluate(self, expr:syntax.Expr, scope:Scope) -> LAZY_VALUE:
		if isinstance(expr, _NO_DELAY): return self.visit(expr, scope)
		return Thunk(self.strict, expr, scope)

	@staticmethod
	def force(value:LAZY_VALUE) -> STRICT_VALUE:
		return force(value)

	def strict(self, expr:syntax.Expr, scope:Scope) -> STRICT_VALUE:
		return force(self.visit(expr, scope))

	def deep(self, value:LAZY_VALUE) -> STRICT_VALUE:
		""" Force all the way down, for comparisons. """
		value = force(value)
		if isinstance(value, tuple): return tuple(self.deep(v) for v in value)
		if isinstance(value, dict): return {k: self.deep(v) for k, v in value.items()}
		return value

	def visit_Literal(self, expr:syntax.Literal, scope:Scope):
		return expr.value

	def visit_Lookup(self, expr:syntax.Lookup, scope:Scope):
		try: value = scope.lookup(expr.name)
		except UndefinedName as ex: raise ex.at(scope.address)
		if value is UNINITIALIZED:
			message = "'%s' is used before it has a value." % expr.name
			raise Complaint(message, expr.name, near=expr.start).at(scope.address)
		if isinstance(value, Thunk) and value.in_progress:
			raise CircularDependency(expr.name).at(scope.address)
		return value

	def visit_LambdaForm(self, expr:syntax.LambdaForm, scope:Scope):
		return Closure(expr, scope)

	def _mismatch(self, expr, scope, *operands):
		kinds = " and ".join(type_name(x) for x in operands)
		message = "Operator '%s' does not work on %s." % (expr.op, kinds)
		return Complaint(message, expr.op, near=expr.start).at(scope.address)

	def visit_BinExp(self, expr:syntax.BinExp, scope:Scope):
		a = self.strict(expr.lhs, scope)
		b = self.strict(expr.rhs, scope)
		op = expr.op
		if op == "==": return self.deep(a) == self.deep(b)
		if op == "!=": return self.deep(a) != self.deep(b)
		if op == "+":
			if _is_number(a) and _is_number(b): return a + b
			if isinstance(a, str) and isinstance(b, str): return a + b
			if isinstance(a, tuple) and isinstance(b, tuple): return a + b
			raise self._mismatch(expr, scope, a, b)
		if op in _ORDERING:
			if (_is_number(a) and _is_number(b)) or (isinstance(a, str) and isinstance(b, str)):
				return _ORDERING[op](a, b)
			raise self._mismatch(expr, scope, a, b)
		if not (_is_number(a) and _is_number(b)):
			raise self._mismatch(expr, scope, a, b)
		try: return _ARITHMETIC[op](a, b)
		except ZeroDivisionError:
			raise Complaint("Division by zero.", op, near=expr.start).at(scope.address)

	def visit_ShortCutExp(self, expr:syntax.ShortCutExp, scope:Scope):
		lhs = self.strict(expr.lhs, scope)
		if not isinstance(lhs, bool): raise self._mismatch(expr, scope, lhs)
		if lhs == _SHORTCUT[expr.op]: return lhs
		rhs = self.strict(expr.rhs, scope)
		if not isinstance(rhs, bool): raise self._mismatch(expr, scope, rhs)
		return rhs

	def visit_UnaryExp(self, expr:syntax.UnaryExp, scope:Scope):
		arg = self.strict(expr.arg, scope)
		if expr.op == "-" and _is_number(arg): return -arg
		if expr.op == "!" and isinstance(arg, bool): return not arg
		raise self._mismatch(expr, scope, arg)

	def visit_Cond(self, expr:syntax.Cond, scope:Scope):
		if_part = self.strict(expr.if_part, scope)
		if not isinstance(if_part, bool):
			message = "A condition must be a flag, not a %s." % type_name(if_part)
			raise Complaint(message, "if", near=expr.start).at(scope.address)
		sequel = expr.then_part if if_part else expr.else_part
		return self.evaluate(sequel, scope)

	def visit_Call(self, expr:syntax.Call, scope:Scope):
		function = self.strict(expr.fn_exp, scope)
		blame = expr.fn_exp.name if isinstance(expr.fn_exp, syntax.Lookup) else "("
		near = expr.fn_exp.start if isinstance(expr.fn_exp, syntax.Lookup) else expr.start
		if not isinstance(function, Closure):
			message = "A %s cannot be called like a function." % type_name(function)
			raise Complaint(message, blame, near=near).at(scope.address)
		if function.arity != len(expr.args):
			plural = "" if function.arity == 1 else "s"
			message = "This takes %d argument%s, but got %d instead." % (function.arity, plural, len(expr.args))
			raise Complaint(message, blame, near=near).at(scope.address)
		args = [self.evaluate(a, scope) for a in expr.args]
		return function.apply(self, args)

	def visit_FieldReference(self, expr:syntax.FieldReference, scope:Scope):
		lhs = self.strict(expr.lhs, scope)
		key = expr.field_name
		if not isinstance(lhs, dict):
			message = "A %s has no fields; in particular not '%s'." % (type_name(lhs), key)
			raise Complaint(message, key, near=expr.start).at(scope.address)
		try: return lhs[key]
		except KeyError:
			message = "This record has no field called '%s'." % key
			extra = ["It does have: " + ", ".join(lhs)] if lhs else []
			raise Complaint(message, key, extra, near=expr.start).at(scope.address) from None

	def visit_Subscript(self, expr:syntax.Subscript, scope:Scope):
		lhs = self.strict(expr.lhs, scope)
		index = self.strict(expr.index, scope)
		if isinstance(lhs, (tuple, str)) and isinstance(index, int) and not isinstance(index, bool):
			if -len(lhs) <= index < len(lhs): return lhs[index]
			message = "Index %d is out of range for a %s of length %d." % (index, type_name(lhs), len(lhs))
			raise Complaint(message, "[", near=expr.start).at(scope.address)
		if isinstance(lhs, dict) and isinstance(index, str):
			if index in lhs: return lhs[index]
			message = "This record has no field called '%s'." % index
			raise Complaint(message, "[", near=expr.start).at(scope.address)
		message = "Cannot index a %s with a %s." % (type_name(lhs), type_name(index))
		raise Complaint(message, "[", near=expr.start).at(scope.address)

	def visit_ExplicitList(self, expr:syntax.ExplicitList, scope:Scope):
		return tuple(self.evaluate(e, scope) for e in expr.elts)

	def visit_RecordLiteral(self, expr:syntax.RecordLiteral, scope:Scope):
		return {name: self.evaluate(e, scope) for name, e in expr.fields}

###############################################################################

def _quote(text:str) -> str:
	escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n").replace("\t", "\\t")
	return '"%s"' % escaped

def display(value:LAZY_VALUE) -> str:
	"""
	Render a value in the language's own notation, forcing as it goes.
	Text stands bare at top level but gets quotes inside containers.
	"""
	value = force(value)
	if isinstance(value, str): return value
	return _show(value, set())

def _show(value:LAZY_VALUE, busy:set) -> str:
	value = force(value)
	if value is None: return "nil"
	if isinstance(value, bool): return "true" if value else "false"
	if isinstance(value, str): return _quote(value)
	if _is_number(value): return repr(value)
	if isinstance(value, (tuple, dict)):
		if id(value) in busy: return "..."
		busy.add(id(value))
		try:
			if isinstance(value, tuple):
				return "[%s]" % ", ".join(_show(v, busy) for v in value)
			return "{%s}" % ", ".join("%s: %s" % (k, _show(v, busy)) for k, v in value.items())
		finally:
			busy.discard(id(value))
	return repr(value)
