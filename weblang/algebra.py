"""
Type terms, with a straight-up substitution model of computation.

Type variables are identified by number. The surface syntax writes them as
single lower-case letters, which take the numbers 0 through 25; the checker
mints fresh ones from 26 upward, so there can be no capture.

There are two ways to print a type:
	`str(t)` gives every variable its own stable name and lists row labels in order, so that equal types
	print equally. The constraint solver keys its memo and equations on this.
	`t.pretty()` renames the variables a, b, c ... in order of appearance.
"""
from .ontology import Term
from .rows import bracket, is_positional, row_map, sorted_items, sorted_values, row_union_with

def _name_variable(n):
	name = ""
	while n:
		n, remainder = divmod(n-1, 26)
		name = chr(97+remainder) + name
	return name

class Type(Term):
	def substitute(self, gamma:dict) -> "Type": return self
	def free_variables(self) -> set: return set()
	def flatten(self) -> "Type": return self
	def render(self, delta, prec:int=0) -> str:
		"""
		delta is None for each variable's own name, or else a dictionary
		in which to remember the names handed out so far.
		"""
		raise NotImplementedError(type(self))
	def pretty(self) -> str: return self.render({})
	def __str__(self): return self.render(None)

class _Opaque(Type):
	_text = "?"
	def render(self, delta, prec=0): return self._text

class NumberType(_Opaque): _text = "N"
class CharType(_Opaque): _text = "C"
class UnitType(_Opaque): _text = "{}"
class EmptyType(_Opaque): _text = "<>"

NUMBER, CHAR, UNIT, EMPTY = NumberType(), CharType(), UnitType(), EmptyType()

class TypeVariable(Type):
	_fields = ("nr",)
	def __init__(self, nr:int): self.nr = nr
	def substitute(self, gamma): return gamma.get(self.nr, self)
	def free_variables(self): return {self.nr}
	def render(self, delta, prec=0):
		if delta is None:
			return chr(97 + self.nr) if self.nr < 26 else str(self.nr)
		if self.nr not in delta:
			delta[self.nr] = _name_variable(len(delta) + 1)
		return delta[self.nr]

class Arrow(Type):
	_fields = ("arg", "res")
	def __init__(self, arg:Type, res:Type):
		self.arg, self.res = arg, res
	def substitute(self, gamma):
		return Arrow(self.arg.substitute(gamma), self.res.substitute(gamma)) if gamma else self
	def free_variables(self): return self.arg.free_variables() | self.res.free_variables()
	def flatten(self): return Arrow(self.arg.flatten(), self.res.flatten())
	def render(self, delta, prec=0):
		return bracket("%s -> %s" % (self.arg.render(delta, 1), self.res.render(delta)), prec > 0)

class ListType(Type):
	_fields = ("elt",)
	def __init__(self, elt:Type): self.elt = elt
	def substitute(self, gamma): return ListType(self.elt.substitute(gamma)) if gamma else self
	def free_variables(self): return self.elt.free_variables()
	def flatten(self): return ListType(self.elt.flatten())
	def render(self, delta, prec=0): return "[%s]" % self.elt.render(delta)

class RowType(Type):
	"""
	Labeled fields plus a tail. A closed row ends in the unit (for records)
	or the empty type (for variants). An open row ends in a variable.
	A tail that is itself the same kind of row extends this one.
	"""
	_fields = ("fields", "tail")
	_open, _close, _end = "", "", None
	def __init__(self, fields:dict, tail:Type):
		self.fields, self.tail = fields, tail

	def substitute(self, gamma):
		if not gamma: return self
		return type(self)(row_map(lambda t: t.substitute(gamma), self.fields), self.tail.substitute(gamma))

	def free_variables(self):
		result = self.tail.free_variables()
		for t in self.fields.values(): result |= t.free_variables()
		return result

	def flatten(self):
		# On a label collision, the field deeper in the chain wins.
		fields, tail = dict(self.fields), self.tail
		while type(tail) is type(self):
			fields = row_union_with(lambda outer, inner: inner, fields, tail.fields)
			tail = tail.tail
		return type(self)(row_map(lambda t: t.flatten(), fields), tail.flatten())

	def is_closed(self): return self.tail == self._end

	def render(self, delta, prec=0):
		if len(self.fields) > 1 and is_positional(self.fields) and self.is_closed() and self._open == "{":
			return "(%s)" % ", ".join(t.render(delta) for t in sorted_values(self.fields))
		text = ", ".join("%s: %s" % (k, t.render(delta)) for k, t in sorted_items(self.fields))
		if not self.is_closed():
			text += " | " + self.tail.render(delta)
		return self._open + text + self._close

class RecordType(RowType):
	_open, _close, _end = "{", "}", UNIT

class VariantType(RowType):
	_open, _close, _end = "<", ">", EMPTY

class BinderType(Type):
	""" Either kind of type that binds a variable in its body """
	_fields = ("nr", "body")
	_keyword = "?"
	def __init__(self, nr:int, body:Type):
		self.nr, self.body = nr, body
	def substitute(self, gamma):
		if self.nr in gamma:
			gamma = {k: v for k, v in gamma.items() if k != self.nr}
		return type(self)(self.nr, self.body.substitute(gamma)) if gamma else self
	def free_variables(self): return self.body.free_variables() - {self.nr}
	def flatten(self): return type(self)(self.nr, self.body.flatten())
	def render(self, delta, prec=0):
		v = TypeVariable(self.nr).render(delta)
		return bracket("%s %s. %s" % (self._keyword, v, self.body.render(delta)), prec > 0)

class MuType(BinderType):
	""" Equi-recursive: mu a. T is interchangeable with T[a := mu a. T] """
	_keyword = "mu"
	def unfold(self) -> Type:
		return self.body.substitute({self.nr: self})

class ForallType(BinderType):
	_keyword = "forall"
	def instantiate(self, fresh:TypeVariable) -> Type:
		return self.body.substitute({self.nr: fresh})
