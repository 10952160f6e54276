"""
Build the primitive namespace: every operator the language knows,
with its run-time behavior, its type scheme in surface syntax,
and the way the grammar lets you write it.
"""
import operator
from typing import NamedTuple
from .values import Primitive, Procedure, Tagged, UnhandledTag, apply, flag, field

ADDITIVE = "additive"
MULTIPLICATIVE = "multiplicative"
PREFIX = "prefix"
WORD = "word"

class Operator(NamedTuple):
	native: Procedure
	scheme: str
	fixity: str

def _binary(fn, name):
	return Primitive(lambda pair: fn(field(pair, "0"), field(pair, "1")), name)

def _curried(arity, fn, name):
	def collect(args):
		if len(args) == arity: return fn(*args)
		return Primitive(lambda arg: collect(args + (arg,)), name)
	return collect(())

def _map(fn:Procedure, xs):
	return [apply(fn, x) for x in xs]

def _filter(fn:Procedure, xs):
	return [x for x in xs if _truth(apply(fn, x))]

def _truth(verdict) -> bool:
	if not isinstance(verdict, Tagged) or verdict.label not in ("true", "false"):
		raise UnhandledTag(verdict)
	return verdict.label == "true"

def _fold(fn:Procedure, acc, xs):
	for x in xs:
		acc = apply(apply(fn, acc), x)
	return acc

def _count_up(n):
	return list(range(int(n)))

ARITHMETIC = "(N, N) -> N"
COMPARISON = "(N, N) -> <false: {}, true: {}>"

OPS = {
	"+": Operator(_binary(operator.add, "+"), ARITHMETIC, ADDITIVE),
	"-": Operator(_binary(operator.sub, "-"), ARITHMETIC, ADDITIVE),
	"++": Operator(_binary(operator.add, "++"), "forall a. ([a], [a]) -> [a]", ADDITIVE),
	"*": Operator(_binary(operator.mul, "*"), ARITHMETIC, MULTIPLICATIVE),
	"/": Operator(_binary(operator.truediv, "/"), ARITHMETIC, MULTIPLICATIVE),
	"%": Operator(_binary(operator.mod, "%"), ARITHMETIC, MULTIPLICATIVE),
	"#": Operator(Primitive(len, "#"), "forall a. [a] -> N", PREFIX),
	"&": Operator(Primitive(_count_up, "&"), "N -> [N]", PREFIX),
	"map": Operator(_curried(2, _map, "map"), "forall a. forall b. (a -> b) -> [a] -> [b]", WORD),
	"filter": Operator(_curried(2, _filter, "filter"), "forall a. (a -> <false: {}, true: {}>) -> [a] -> [a]", WORD),
	"fold": Operator(_curried(3, _fold, "fold"), "forall a. forall b. (b -> a -> b) -> b -> [a] -> b", WORD),
	"eq": Operator(_binary(lambda x, y: flag(x == y), "eq"), COMPARISON, WORD),
	"lt": Operator(_binary(lambda x, y: flag(x < y), "lt"), COMPARISON, WORD),
	"ord": Operator(Primitive(ord, "ord"), "C -> N", WORD),
	"chr": Operator(Primitive(lambda n: chr(int(n)), "chr"), "N -> C", WORD),
}

def symbols(*fixities) -> list[str]:
	""" Operator spellings with the given fixities, longest first so `++` beats `+` """
	found = [name for name, op in OPS.items() if op.fixity in fixities and not name.isalpha()]
	return sorted(found, key=len, reverse=True)

WORD_OPS = frozenset(name for name, op in OPS.items() if op.fixity == WORD)
