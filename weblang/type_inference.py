"""
The deduction engine walks an expression, computing a type for each node
and telling the constraint solver which types must agree.

Contexts are plain dictionaries from name to type. A name bound by a let
or a lambda has one type for the whole of its scope; only the operators
and explicit `forall` types get a fresh instance at each use.
"""
from boozetools.support.foundation import Visitor
from . import syntax
from .algebra import Type, NUMBER, CHAR, UNIT, EMPTY, Arrow, ListType, RecordType, VariantType
from .front_end import parse_type
from .primitive import OPS
from .rows import row_map
from .unification import ConstraintSolver, TypeCheckError

OP_TYPES = {name: parse_type(op.scheme) for name, op in OPS.items()}

class UnboundVariable(TypeCheckError):
	def __init__(self, name):
		super().__init__("Unbound variable: %s" % name)
		self.name = name

def infer_type(expr:syntax.Expression, solver:ConstraintSolver) -> Type:
	""" The raw type of `expr`, with whatever equations that implies left pending in `solver`. """
	return DeductionEngine(solver).visit(expr, {})

class DeductionEngine(Visitor):
	def __init__(self, solver:ConstraintSolver):
		self._solver = solver

	def visit_Number(self, expr:syntax.Number, ctx:dict): return NUMBER
	def visit_Char(self, expr:syntax.Char, ctx:dict): return CHAR

	def visit_Var(self, expr:syntax.Var, ctx:dict):
		try: typ = ctx[expr.name]
		except KeyError: raise UnboundVariable(expr.name) from None
		return self._solver.instantiate(typ)

	def visit_Op(self, expr:syntax.Op, ctx:dict):
		return self._solver.instantiate(OP_TYPES[expr.name])

	def visit_Lambda(self, expr:syntax.Lambda, ctx:dict):
		inner, arg = self.visit(expr.pattern, ctx)
		return Arrow(arg, self.visit(expr.body, inner))

	def visit_Apply(self, expr:syntax.Apply, ctx:dict):
		fn = self.visit(expr.fn, ctx)
		arg = self.visit(expr.arg, ctx)
		res = self._solver.fresh()
		self._solver.equate(fn, Arrow(arg, res))
		return res

	def visit_ListExp(self, expr:syntax.ListExp, ctx:dict):
		elt = self._solver.fresh()
		for e in expr.elts:
			self._solver.equate(elt, self.visit(e, ctx))
		return ListType(elt)

	def visit_RecordExp(self, expr:syntax.RecordExp, ctx:dict):
		if expr.positional:
			return RecordType(row_map(lambda e: self.visit(e, ctx), expr.fields), UNIT)
		this = self._solver.fresh()
		inner = dict(ctx, this=this)
		typ = RecordType(row_map(lambda e: self.visit(e, inner), expr.fields), UNIT)
		self._solver.equate(this, typ)
		return typ

	def visit_VariantExp(self, expr:syntax.VariantExp, ctx:dict):
		# A case-dispatcher handles exactly the tags it lists.
		res = self._solver.fresh()
		def argument_of(handler:syntax.Expression):
			arg = self._solver.fresh()
			self._solver.equate(self.visit(handler, ctx), Arrow(arg, res))
			return arg
		return Arrow(VariantType(row_map(argument_of, expr.handlers), EMPTY), res)

	def visit_Tag(self, expr:syntax.Tag, ctx:dict):
		payload = self._solver.fresh()
		return Arrow(payload, VariantType({expr.label: payload}, self._solver.fresh()))

	def visit_Import(self, expr:syntax.Import, ctx:dict):
		return self._solver.fresh()

	def visit_Ascription(self, expr:syntax.Ascription, ctx:dict):
		actual = self.visit(expr.expr, ctx)
		self._solver.equate(self._solver.instantiate(expr.declared), actual)
		return expr.declared

	def visit_Let(self, expr:syntax.Let, ctx:dict):
		bound = self.visit(expr.bound, ctx)
		return self.visit(expr.body, self._bind(expr.pattern, bound, ctx))

	def _bind(self, pattern:syntax.Pattern, typ:Type, ctx:dict) -> dict:
		if isinstance(pattern, syntax.BindVar): return dict(ctx, **{pattern.name: typ})
		if isinstance(pattern, syntax.Wildcard): return ctx
		inner, shape = self.visit(pattern, ctx)
		self._solver.equate(shape, typ)
		return inner

	# Patterns produce the extended context and the type they accept.

	def visit_BindVar(self, pattern:syntax.BindVar, ctx:dict):
		typ = self._solver.fresh()
		return dict(ctx, **{pattern.name: typ}), typ

	def visit_Wildcard(self, pattern:syntax.Wildcard, ctx:dict):
		return ctx, self._solver.fresh()

	def visit_RowPattern(self, pattern:syntax.RowPattern, ctx:dict):
		fields = {}
		for label, sub in pattern.fields.items():
			ctx, fields[label] = self.visit(sub, ctx)
		return ctx, RecordType(fields, self._solver.fresh())
