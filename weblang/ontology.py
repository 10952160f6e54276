"""
These most-fundamental classes in the syntax class hierarchy
are separate from the rest to avoid various circular-import
scenarios. The grammar builds Expression and Pattern nodes,
the type algebra builds Term nodes, and both the evaluator and
the type-checker dispatch on the concrete classes.

The root of the exception hierarchy lives here too, because
every pass raises something derived from it.
"""

class Node:
	"""
	Syntax and type nodes are immutable once built, and two nodes
	are equal when they have the same class and the same parts.
	Subclasses list their parts in `_fields`.
	"""
	_fields: tuple[str, ...] = ()

	def _parts(self):
		return tuple(getattr(self, f) for f in self._fields)

	def __eq__(self, other):
		return type(self) is type(other) and self._parts() == other._parts()

	def __ne__(self, other):
		return not self == other

	def __hash__(self):
		return hash((type(self), tuple(_hashable(p) for p in self._parts())))

	def __repr__(self):
		return "%s(%s)" % (type(self).__name__, ", ".join(map(repr, self._parts())))

def _hashable(part):
	if isinstance(part, dict): return tuple(sorted(part.items()))
	if isinstance(part, list): return tuple(part)
	return part

class Pattern(Node):
	""" Left-hand side of a lambda or a let-binding """
	def show(self) -> str: raise NotImplementedError(type(self))
	def __str__(self): return self.show()

class Expression(Node):
	def show(self, prec:int=0) -> str:
		"""
		Render in surface syntax that parses back to the same tree.
		The precedence levels are listed in syntax.py.
		"""
		raise NotImplementedError(type(self))
	def __str__(self): return self.show()

class Term(Node):
	""" Base class for type terms; see algebra.py """
	pass

#######################################################################

class WeblangError(Exception):
	"""
	Everything the session boundary knows how to explain to the user.
	Subclasses with a meaningful position in the source text set `offset`.
	"""
	offset = None
