"""
The set of parse-nodes in simple form.
The grammar in front_end.py calls these constructors with subordinate
semantic-values in a bottom-up tree transduction, and performs the few
desugarings the language has (strings, tuples, projections, sequencing,
infix operators) on the way.

Every node can show itself in surface syntax that parses back to an equal
node. Precedence levels for `show`:
	0: anything, including let and sequencing
	1: lambda and ascription
	2, 3: operands of the additive and multiplicative operators
	4: the function position of an application
	5: an atom
"""
from typing import Sequence
from .ontology import Expression, Pattern, Term
from .rows import bracket, is_positional, positional, sorted_values
from . import primitive

LET, LAMBDA, ADDITIVE, MULTIPLICATIVE, APPLICATION, ATOM = range(6)

###############################################################################
# Patterns

class BindVar(Pattern):
	_fields = ("name",)
	def __init__(self, name:str): self.name = name
	def show(self): return self.name

class Wildcard(Pattern):
	def show(self): return "_"

class RowPattern(Pattern):
	_fields = ("fields",)
	def __init__(self, fields:dict[str, Pattern]):
		self.fields = fields
	def show(self):
		if is_positional(self.fields) and len(self.fields) != 1:
			return "(%s)" % ", ".join(p.show() for p in sorted_values(self.fields))
		return "{%s}" % ", ".join("%s: %s" % (k, p.show()) for k, p in self.fields.items())

###############################################################################
# Expressions

class Number(Expression):
	_fields = ("value",)
	def __init__(self, value): self.value = value
	def show(self, prec=0): return repr(self.value)

class Char(Expression):
	_fields = ("value",)
	def __init__(self, value:str):
		assert len(value) == 1, value
		self.value = value
	def show(self, prec=0): return "'%s'" % self.value

class Var(Expression):
	_fields = ("name",)
	def __init__(self, name:str): self.name = name
	def show(self, prec=0): return self.name

class Op(Expression):
	""" Reference to an entry in the primitive operator table """
	_fields = ("name",)
	def __init__(self, name:str):
		assert name in primitive.OPS, name
		self.name = name
	def show(self, prec=0):
		return self.name if self.name.isalpha() else "(%s)" % self.name

class Lambda(Expression):
	_fields = ("pattern", "body")
	def __init__(self, pattern:Pattern, body:Expression):
		self.pattern, self.body = pattern, body
	def show(self, prec=0):
		return bracket("%s => %s" % (self.pattern.show(), self.body.show(LAMBDA)), prec > LAMBDA)

class Apply(Expression):
	_fields = ("fn", "arg")
	def __init__(self, fn:Expression, arg:Expression):
		self.fn, self.arg = fn, arg

	def show(self, prec=0):
		label = projected_label(self)
		if label is not None:
			subject = self.arg.show(ATOM)
			if isinstance(self.arg, Number): subject = "(%s)" % subject
			return subject + "." + label
		level = infix_level(self)
		if level is not None:
			lhs, rhs = self.arg.fields["0"], self.arg.fields["1"]
			text = "%s %s %s" % (lhs.show(level), self.fn.name, rhs.show(level + 1))
			return bracket(text, prec > level)
		return bracket("%s %s" % (self.fn.show(APPLICATION), self.arg.show(ATOM)), prec > APPLICATION)

class ListExp(Expression):
	_fields = ("elts",)
	def __init__(self, elts:Sequence[Expression]):
		self.elts = list(elts)
	def show(self, prec=0):
		if self.elts and all(isinstance(e, Char) and e.value != '"' for e in self.elts):
			return '"%s"' % "".join(e.value for e in self.elts)
		return "[%s]" % ", ".join(e.show() for e in self.elts)

class RecordExp(Expression):
	"""
	Brace-records bind `this` for their fields.
	Positional records come from tuple syntax and from infix operands; they do not.
	"""
	_fields = ("fields", "positional")
	def __init__(self, fields:dict[str, Expression], positional:bool=False):
		self.fields, self.positional = fields, positional
	def show(self, prec=0):
		if self.positional and len(self.fields) != 1:
			return "(%s)" % ", ".join(e.show() for e in self.fields.values())
		return "{%s}" % ", ".join("%s: %s" % (k, e.show()) for k, e in self.fields.items())

class VariantExp(Expression):
	""" A case-dispatcher: one handler function per tag """
	_fields = ("handlers",)
	def __init__(self, handlers:dict[str, Expression]):
		self.handlers = handlers
	def show(self, prec=0):
		return "<%s>" % ", ".join("%s: %s" % (k, e.show()) for k, e in self.handlers.items())

class Tag(Expression):
	_fields = ("label",)
	def __init__(self, label:str): self.label = label
	def show(self, prec=0): return "#" + self.label

class Import(Expression):
	_fields = ("name",)
	def __init__(self, name:str): self.name = name
	def show(self, prec=0): return "import " + self.name

class Ascription(Expression):
	_fields = ("declared", "expr")
	def __init__(self, declared:Term, expr:Expression):
		self.declared, self.expr = declared, expr
	def show(self, prec=0):
		return bracket("%s : %s" % (self.declared, self.expr.show(LAMBDA)), prec > LAMBDA)

class Let(Expression):
	_fields = ("pattern", "bound", "body")
	def __init__(self, pattern:Pattern, bound:Expression, body:Expression):
		self.pattern, self.bound, self.body = pattern, bound, body
	def show(self, prec=0):
		if isinstance(self.pattern, Wildcard):
			text = "%s; %s" % (self.bound.show(LAMBDA), self.body.show())
		else:
			text = "let %s = %s; %s" % (self.pattern.show(), self.bound.show(LAMBDA), self.body.show())
		return bracket(text, prec > LET)

###############################################################################
# Desugaring helpers shared by the grammar and the printer

def projection_variable(label:str) -> str:
	return label if label.isalpha() else "it"

def projection(subject:Expression, label:str) -> Apply:
	""" e.l == ({l: v} => v) e """
	v = projection_variable(label)
	return Apply(Lambda(RowPattern({label: BindVar(v)}), Var(v)), subject)

def projected_label(expr:Apply):
	fn = expr.fn
	if isinstance(fn, Lambda) and isinstance(fn.pattern, RowPattern) and len(fn.pattern.fields) == 1:
		[(label, p)] = fn.pattern.fields.items()
		v = projection_variable(label)
		if p == BindVar(v) and fn.body == Var(v):
			return label

def infix(op:str, lhs:Expression, rhs:Expression) -> Apply:
	return Apply(Op(op), RecordExp({"0": lhs, "1": rhs}, positional=True))

def infix_level(expr:Apply):
	fn, arg = expr.fn, expr.arg
	if isinstance(fn, Op) and isinstance(arg, RecordExp) and arg.positional and sorted(arg.fields) == ["0", "1"]:
		fixity = primitive.OPS[fn.name].fixity
		if fixity == primitive.ADDITIVE: return ADDITIVE
		if fixity == primitive.MULTIPLICATIVE: return MULTIPLICATIVE

def sequence(first:Expression, then:Expression) -> Let:
	return Let(Wildcard(), first, then)

def string(text:str) -> ListExp:
	return ListExp([Char(c) for c in text])

def tuple_exp(items:Sequence[Expression]) -> RecordExp:
	return RecordExp(positional(items), positional=True)
