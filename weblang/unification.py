"""
The unification approach to type-inference, with row polymorphism and equi-recursive types.

The solver works in two phases. While the deduction engine walks a tree,
`equate` takes apart whatever structure it can see right away and defers
each equality that pins down a variable. Then `solve` eliminates those
deferred equations one variable at a time, until none remain or no more
progress is possible.

The solver's state (fresh-variable counter, pending equations, memo of
equalities already considered) belongs to one query. Make a new solver
for each.
"""
from .ontology import WeblangError
from .algebra import Type, TypeVariable, Arrow, ListType, RowType, BinderType, MuType, ForallType
from .rows import row_intersect_with, row_difference_with
from . import diagnostics

MAX_UNFOLDINGS = 100
MAX_PASSES = 10_000
FIRST_FRESH = 26  # Type variables below this are the letters of the surface syntax.

class TypeCheckError(WeblangError):
	pass

class TypeMismatch(TypeCheckError):
	def __init__(self, this:Type, that:Type):
		delta = {}
		super().__init__("Type error: cannot match %s with %s" % (this.render(delta), that.render(delta)))
		self.this, self.that = this, that

class DivergenceError(TypeCheckError):
	pass

class ConstraintSolver:
	"""
	Equations are kept in insertion order, keyed by their printed form,
	so that the same equation is only ever recorded once.
	`last_type` is the type of the expression under study, which each
	step of solving brings up to date.
	"""

	def __init__(self, report:diagnostics.Report):
		self._report = report
		self._counter = FIRST_FRESH
		self._visited = set()
		self.equations = {}
		self.last_type = None

	def fresh(self) -> TypeVariable:
		v = TypeVariable(self._counter)
		self._counter += 1
		return v

	def instantiate(self, typ:Type) -> Type:
		""" Strip the outermost quantifiers, giving each a fresh variable. """
		gamma = {}
		while isinstance(typ, ForallType):
			gamma[typ.nr] = self.fresh()
			typ = typ.body
		return typ.substitute(gamma)

	def _open(self, typ:BinderType) -> Type:
		if isinstance(typ, MuType): return typ.unfold().flatten()
		return typ.instantiate(self.fresh()).flatten()

	def equate(self, this:Type, that:Type):
		key = "%s == %s" % (this, that)
		if key in self._visited: return
		self._visited.add(key)
		self._report.info(key)
		this, that = this.flatten(), that.flatten()

		if isinstance(this, TypeVariable):
			if this != that: self._defer(this.nr, that)
			return
		if isinstance(that, TypeVariable):
			self._defer(that.nr, this)
			return

		if isinstance(this, BinderType) or isinstance(that, BinderType):
			for _ in range(MAX_UNFOLDINGS):
				if isinstance(this, BinderType): this = self._open(this)
				elif isinstance(that, BinderType): that = self._open(that)
				else: break
			else:
				raise DivergenceError("Recursive type unfolds without end: %s" % key)
			return self.equate(this, that)

		if type(this) is not type(that):
			raise TypeMismatch(this, that)
		if isinstance(this, Arrow):
			self.equate(this.arg, that.arg)
			self.equate(this.res, that.res)
		elif isinstance(this, ListType):
			self.equate(this.elt, that.elt)
		elif isinstance(this, RowType):
			self._equate_rows(this, that)
		# Otherwise both are the same opaque type, which is fine.

	def _equate_rows(self, this:RowType, that:RowType):
		row_intersect_with(self.equate, this.fields, that.fields)
		only_this = row_difference_with(lambda t: t, this.fields, that.fields)
		only_that = row_difference_with(lambda t: t, that.fields, this.fields)
		make = type(this)
		if only_this and only_that:
			# Each side's tail must supply what the other side has and it lacks.
			shared = self.fresh()
			self.equate(that.tail, make(only_this, shared))
			self.equate(this.tail, make(only_that, shared))
		elif only_this:
			self.equate(that.tail, make(only_this, this.tail))
		elif only_that:
			self.equate(this.tail, make(only_that, that.tail))
		else:
			self.equate(this.tail, that.tail)

	def _defer(self, nr:int, typ:Type):
		key = "%s = %s" % (TypeVariable(nr), typ)
		self.equations[key] = (nr, typ)

	def solve_step(self):
		"""
		One round of elimination. The first pending equation binds its variable,
		and every other pending equation is re-examined in light of that binding.
		If anything goes wrong, the pending equations are as they were before.
		"""
		self._visited.clear()
		pending, self.equations = self.equations, {}
		gamma = {}
		try:
			for nr, typ in pending.values():
				if typ == TypeVariable(nr): continue
				if gamma:
					self.equate(TypeVariable(nr).substitute(gamma), typ.substitute(gamma))
					continue
				if nr in typ.free_variables():
					placeholder = self.fresh()
					typ = MuType(placeholder.nr, typ.substitute({nr: placeholder}))
				gamma[nr] = typ
				self._report.info("Bind %s := %s" % (TypeVariable(nr), typ))
			if self.last_type is not None:
				self.last_type = self.last_type.substitute(gamma).flatten()
		except WeblangError:
			self.equations = pending
			raise

	def solve(self):
		for nr_passes in range(1, MAX_PASSES + 1):
			before = list(self.equations)
			self.solve_step()
			if not self.equations or list(self.equations) == before:
				self._report.info("Solved in %d pass(es)" % nr_passes)
				return
		raise DivergenceError("Maximum iterations exceeded")

	def equation_log(self) -> list[str]:
		return ["TYPE EQUALITIES:"] + list(self.equations)
