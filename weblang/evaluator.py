"""
A straightforward tree-walking evaluator. Strict application, lazy record fields.

Each syntax class gets an `_eval_...` function, and each pattern class a `_bind_...`
function; the tables at the bottom find them by their annotations.
Nothing here recovers from an error: every failure propagates to the caller.
"""
from .stacking import Environment
from .values import (
	Procedure, LazyRecord, Tagged, TagConstructor, IMPORT_FAILED, apply, field,
	UnboundName, UnhandledTag, ImportFailed,
)
from .primitive import OPS
from . import syntax

ENV = Environment

def evaluate(expr:syntax.Expression, env:ENV):
	try: fn = EVALUATE[type(expr)]
	except KeyError: raise NotImplementedError(type(expr), expr)
	else: return fn(expr, env)

def bind_pattern(env:ENV, pattern:syntax.Pattern, value) -> ENV:
	bindings = {}
	_collect(pattern, value, bindings)
	return env.extend(bindings)

def _collect(pattern, value, bindings:dict):
	try: fn = BIND[type(pattern)]
	except KeyError: raise NotImplementedError(type(pattern), pattern)
	else: fn(pattern, value, bindings)

###############################################################################

class Closure(Procedure):
	""" A lambda tied to its natal environment """
	def __init__(self, env:ENV, lam:syntax.Lambda):
		self._env = env
		self._lam = lam
	def apply(self, arg):
		return evaluate(self._lam.body, bind_pattern(self._env, self._lam.pattern, arg))
	def __repr__(self): return "<closure %s>" % self._lam

class Dispatcher(Procedure):
	""" The value of a variant literal: picks a handler by the tag of its argument """
	def __init__(self, env:ENV, handlers:dict):
		self._env = env
		self._handlers = handlers
	def apply(self, arg):
		if not isinstance(arg, Tagged) or arg.label not in self._handlers:
			raise UnhandledTag(arg)
		handler = evaluate(self._handlers[arg.label], self._env)
		return apply(handler, arg.value)

###############################################################################

def _eval_number(expr:syntax.Number, env:ENV): return expr.value

def _eval_char(expr:syntax.Char, env:ENV): return expr.value

def _eval_var(expr:syntax.Var, env:ENV):
	try: return env.fetch(expr.name)
	except KeyError: raise UnboundName(expr.name) from None

def _eval_op(expr:syntax.Op, env:ENV): return OPS[expr.name].native

def _eval_lambda(expr:syntax.Lambda, env:ENV): return Closure(env, expr)

def _eval_apply(expr:syntax.Apply, env:ENV):
	procedure = evaluate(expr.fn, env)
	arg = evaluate(expr.arg, env)
	return apply(procedure, arg)

def _eval_list(expr:syntax.ListExp, env:ENV):
	return [evaluate(e, env) for e in expr.elts]

def _eval_record(expr:syntax.RecordExp, env:ENV):
	if expr.positional:
		return LazyRecord(expr.fields, lambda e, _: evaluate(e, env))
	return LazyRecord(expr.fields, lambda e, this: evaluate(e, env.extend({"this": this})))

def _eval_variant(expr:syntax.VariantExp, env:ENV): return Dispatcher(env, expr.handlers)

def _eval_tag(expr:syntax.Tag, env:ENV): return TagConstructor(expr.label)

def _eval_import(expr:syntax.Import, env:ENV):
	value = env.resolver(expr.name)
	if value is IMPORT_FAILED: raise ImportFailed(expr.name)
	return value

def _eval_ascription(expr:syntax.Ascription, env:ENV): return evaluate(expr.expr, env)

def _eval_let(expr:syntax.Let, env:ENV):
	value = evaluate(expr.bound, env)
	return evaluate(expr.body, bind_pattern(env, expr.pattern, value))

###############################################################################

def _bind_var(pattern:syntax.BindVar, value, bindings:dict):
	bindings[pattern.name] = value

def _bind_wildcard(pattern:syntax.Wildcard, value, bindings:dict):
	pass

def _bind_row(pattern:syntax.RowPattern, value, bindings:dict):
	for label, sub in pattern.fields.items():
		_collect(sub, field(value, label), bindings)

###############################################################################

def _table(prefix, key):
	table = {}
	for _k, _v in list(globals().items()):
		if _k.startswith(prefix):
			_t = _v.__annotations__[key]
			assert isinstance(_t, type), (_k, _t)
			table[_t] = _v
	return table

EVALUATE = _table("_eval_", "expr")
BIND = _table("_bind_", "pattern")
