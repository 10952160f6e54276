"""
The outer surface a host program (an editor, the command line, a test) talks to.

Every query takes source text and returns text: a pretty type, a JSON value,
or else the message of whatever went wrong. Each failure is also recorded
in the session's Report, with a picture of where it happened if that's known.
"""
from typing import Callable
from . import syntax
from .diagnostics import Report
from .evaluator import evaluate
from .front_end import parse_text, best_hint
from .combinators import PartialParse
from .ontology import WeblangError
from .stacking import Environment
from .type_inference import infer_type
from .unification import ConstraintSolver
from .values import refuse_imports, to_json

class NestedTooDeeply(WeblangError):
	def __init__(self):
		super().__init__("This is nested too deeply for me to follow.")

class Session:
	def __init__(self, resolver:Callable=None, report:Report=None):
		self.resolver = resolver or refuse_imports
		self.report = report or Report(verbose=0)
		self.reset()

	def reset(self):
		""" Forget everything about the last type query. """
		self.solver = ConstraintSolver(self.report)

	def parse(self, text:str) -> syntax.Expression:
		return parse_text(text)

	def type_of(self, text:str, solve:bool=True) -> str:
		"""
		With solve=False, the raw type comes back with its equations still pending,
		to be worked off by `solve_step` or `solve_full`.
		"""
		self.reset()
		self.report.reset()
		try:
			self.solver.last_type = infer_type(parse_text(text), self.solver)
			if solve: self.solver.solve()
			return self.solver.last_type.pretty()
		except WeblangError as ex:
			return self._complain(text, ex)
		except RecursionError:
			return self._complain(text, NestedTooDeeply())

	def solve_step(self) -> str:
		return self._solving(self.solver.solve_step)

	def solve_full(self) -> str:
		return self._solving(self.solver.solve)

	def _solving(self, method) -> str:
		if self.solver.last_type is None: return ""
		try:
			method()
			return self.solver.last_type.pretty()
		except RecursionError:
			return self._solving_failed(NestedTooDeeply())
		except WeblangError as ex:
			return self._solving_failed(ex)

	def _solving_failed(self, ex:WeblangError) -> str:
		self.report.explain("", ex)
		return str(ex)

	def equation_log(self) -> list[str]:
		return self.solver.equation_log()

	def evaluate(self, text:str) -> str:
		self.report.reset()
		try:
			value = evaluate(parse_text(text), Environment.root(self.resolver))
			return to_json(value)
		except WeblangError as ex:
			return self._complain(text, ex)
		except RecursionError:
			return self._complain(text, NestedTooDeeply())

	def _complain(self, text:str, ex:WeblangError) -> str:
		hint = best_hint(ex.remainder) if isinstance(ex, PartialParse) else None
		self.report.explain(text, ex, hint)
		return str(ex)
