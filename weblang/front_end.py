"""
The grammar, written with the combinators, plus some advice for when it fails.

Precedence, loosest first:
	let-binding and sequencing
	lambda and ascription
	the additive operators, then the multiplicative ones
	application by juxtaposition
	atoms with trailing projections
"""
import math, re
from functools import reduce
from . import syntax, primitive
from .rows import positional
from .algebra import (
	NUMBER, CHAR, UNIT, EMPTY, TypeVariable, Arrow, ListType, RecordType, VariantType, MuType, ForallType,
)
from .combinators import (
	pure, fail, fmap, bind, seq, then, lazy, choice, biased_choice,
	many, many1, sep_by, optional, token, literal, brackets, parse_all,
)

RESERVED = frozenset(["let", "import", "forall", "mu"])

def _reject_reserved(word):
	return fail() if word in RESERVED else pure(word)

def keyword(word:str):
	return token(word + r"(?![a-zA-Z])")

identifier = bind(token(r"[a-zA-Z]+"), _reject_reserved)
label = token(r"[a-zA-Z]+|[0-9]+")

def _number(text):
	# No infinities: they would print as `inf`, which is a name.
	if not any(c in text for c in ".eE"): return pure(syntax.Number(int(text)))
	value = float(text)
	return pure(syntax.Number(value)) if math.isfinite(value) else fail()

def _row_of(item):
	""" Fields in braces or angles; `{x}` is short for `{x: x}` """
	return fmap(dict, sep_by(literal(","), item))

def _field(value, pun=None):
	explicit = seq(label, then(literal(":"), value))
	if pun is None: return explicit
	return biased_choice(explicit, fmap(lambda name: (name, pun(name)), identifier))

###############################################################################
# Types

def _tuple_or_group(items):
	return items[0] if len(items) == 1 else RecordType(positional(items), UNIT)

def _row_type(opener, closer, make, end):
	body = seq(_row_of(_field(lazy(lambda: type_expr))), optional(then(literal("|"), lazy(lambda: type_expr)), end))
	return fmap(lambda pair: make(*pair), brackets(opener, body, closer))

type_variable = fmap(lambda s: TypeVariable(ord(s) - 97), token(r"[a-z](?![a-zA-Z])"))

type_atom = biased_choice(
	fmap(lambda _: NUMBER, keyword("N")),
	fmap(lambda _: CHAR, keyword("C")),
	fmap(ListType, brackets("[", lazy(lambda: type_expr), "]")),
	fmap(_tuple_or_group, brackets("(", sep_by(literal(","), lazy(lambda: type_expr)), ")")),
	_row_type("{", "}", RecordType, UNIT),
	_row_type("<", ">", VariantType, EMPTY),
	type_variable,
)

def _binder(word, make):
	body = seq(then(keyword(word), type_variable), then(literal("."), lazy(lambda: type_expr)))
	return fmap(lambda pair: make(pair[0].nr, pair[1]), body)

def _maybe_arrow(arg):
	return optional(fmap(lambda res: Arrow(arg, res), then(literal("->"), lazy(lambda: type_expr))), arg)

type_expr = biased_choice(
	_binder("forall", ForallType),
	_binder("mu", MuType),
	bind(type_atom, _maybe_arrow),
)

###############################################################################
# Patterns

def _paren_pattern(items):
	return items[0] if len(items) == 1 else syntax.RowPattern(positional(items))

pattern = biased_choice(
	fmap(lambda _: syntax.Wildcard(), token(r"_(?![a-zA-Z])")),
	fmap(syntax.BindVar, identifier),
	fmap(_paren_pattern, brackets("(", sep_by(literal(","), lazy(lambda: pattern)), ")")),
	fmap(syntax.RowPattern, brackets("{", _row_of(_field(lazy(lambda: pattern), syntax.BindVar)), "}")),
)

###############################################################################
# Expressions

expression = lazy(lambda: full_expression)

def _word(name):
	return syntax.Op(name) if name in primitive.WORD_OPS else syntax.Var(name)

def _paren(items):
	return items[0] if len(items) == 1 else syntax.tuple_exp(items)

def _symbol_parser(spellings):
	return biased_choice(*[fmap(lambda _, s=s: s, literal(s)) for s in spellings])

prefix_symbol = token(r"#(?![a-zA-Z])|&")

atom = biased_choice(
	fmap(syntax.Op, brackets("(", _symbol_parser(primitive.symbols(primitive.ADDITIVE, primitive.MULTIPLICATIVE, primitive.PREFIX)), ")")),
	fmap(_paren, brackets("(", sep_by(literal(","), expression), ")")),
	choice(
		bind(token(r"-?(0|[1-9]\d*)(\.\d+)?([eE][+-]?\d+)?"), _number),
		fmap(lambda s: syntax.Char(s[1]), token(r"'.'")),
		fmap(lambda s: syntax.string(s[1:-1]), token(r'"[^"]*"')),
		fmap(lambda s: syntax.Tag(s[1:]), token(r"#[a-zA-Z]+")),
		fmap(syntax.Op, prefix_symbol),
		fmap(syntax.Import, then(keyword("import"), identifier)),
		fmap(_word, identifier),
		fmap(syntax.ListExp, brackets("[", sep_by(literal(","), expression), "]")),
		fmap(syntax.RecordExp, brackets("{", _row_of(_field(expression, syntax.Var)), "}")),
		fmap(syntax.VariantExp, brackets("<", _row_of(_field(expression)), ">")),
	),
)

def _project(subject, labels):
	return reduce(syntax.projection, labels, subject)

projected = bind(atom, lambda subject: fmap(lambda labels: _project(subject, labels), many(then(token(r"\."), label))))

application = fmap(lambda items: reduce(syntax.Apply, items), many1(projected))

def _infix_level(operand, spellings):
	step = seq(_symbol_parser(spellings), operand)
	def fold(first, steps):
		return reduce(lambda lhs, step: syntax.infix(step[0], lhs, step[1]), steps, first)
	return bind(operand, lambda first: fmap(lambda steps: fold(first, steps), many(step)))

multiplicative = _infix_level(application, primitive.symbols(primitive.MULTIPLICATIVE))
additive = _infix_level(multiplicative, primitive.symbols(primitive.ADDITIVE))

let_expression = fmap(
	lambda parts: syntax.Let(*parts),
	seq(
		then(keyword("let"), pattern),
		then(token(r"=(?!>)"), lazy(lambda: no_let)),
		then(literal(";"), expression),
	),
)

# A lambda or ascription body may be a let-expression, which extends as far as possible,
# but a bare sequence after a lambda belongs to the enclosing expression.
body = biased_choice(let_expression, lazy(lambda: no_let))

no_let = biased_choice(
	fmap(lambda parts: syntax.Ascription(*parts), seq(type_expr, then(literal(":"), body))),
	fmap(lambda parts: syntax.Lambda(*parts), seq(pattern, then(literal("=>"), body))),
	additive,
)

def _maybe_sequence(first):
	return optional(fmap(lambda rest: syntax.sequence(first, rest), then(literal(";"), expression)), first)

full_expression = biased_choice(let_expression, bind(no_let, _maybe_sequence))

###############################################################################

def parse_text(text:str) -> syntax.Expression:
	""" Raises some ParseFailure if there is not exactly one complete reading. """
	return parse_all(expression, text)

def parse_type(text:str):
	return parse_all(type_expr, text)

def parse_pattern(text:str):
	return parse_all(pattern, text)

##########################
#
#  Some advice for common parse errors, keyed on what the parser got stuck at.
#

_advice = []

def _hint(pattern_text, advice):
	_advice.append((re.compile(pattern_text), advice))

def best_hint(remainder:str):
	for regex, advice in _advice:
		if regex.match(remainder):
			return "Here's my best guess:\n\t" + advice

_hint(r"\)", "There seems to be a closing parenthesis without a matching opener.")
_hint(r"[\]}>]", "A bracket closes here that was not opened, or was opened as a different kind.")
_hint(r"=>", "The left side of `=>` must be a pattern: a name, `_`, a tuple, or a record of patterns.")
_hint(r"=", "Only `let` binds a name with `=`. Write `let x = value; body`.")
_hint(r";\s*$", "Sequencing needs an expression after the semicolon.")
_hint(r"->", "Arrows belong in types. Functions are written `pattern => body`.")
_hint(r"[-+*/%]", "An infix operator needs an operand on each side.")
_hint(r":", "A type ascription reads `type : expression`, and the type must come first.")
