"""
Here find the module system, such as it is.

A module is just an expression in a file called `<name>.wl`, or else text
defined directly in the library. Importing a module evaluates it and
produces its value. Nothing about imports is checked statically: the
type-checker gives every `import` a fresh type variable.
"""
from pathlib import Path
from typing import Callable, Optional

from .combinators import ParseFailure, PartialParse
from .diagnostics import Report
from .evaluator import evaluate
from .front_end import parse_text, best_hint
from .stacking import Environment
from .values import IMPORT_FAILED

EXTENSION = ".wl"

class Library:
	"""
	Knows where module texts come from.
	Each call to `resolver()` begins a fresh cache, which then serves
	every import made while evaluating one top-level program.
	"""

	def __init__(self, report:Report, folder:Optional[Path]=None):
		self._report = report
		self._folder = folder
		self._defined = {}

	def define(self, name:str, text:str):
		self._defined[name] = text

	def source(self, name:str) -> Optional[str]:
		if name in self._defined:
			return self._defined[name]
		if self._folder is None:
			return None
		path = self._folder / (name + EXTENSION)
		try:
			with open(path, "r", encoding="utf-8") as fh:
				return fh.read()
		except OSError:
			return None

	def resolver(self) -> Callable:
		report = self._report
		loaded = {}
		construction_stack = []

		def resolve(name:str):
			if name in loaded:
				return loaded[name]
			if name in construction_stack:
				depth = construction_stack.index(name)
				report.cyclic_import(name, construction_stack[depth:])
				return IMPORT_FAILED
			text = self.source(name)
			if text is None:
				report.no_such_module(name, self._folder)
				return IMPORT_FAILED
			report.info("Loading", name)
			try:
				tree = parse_text(text)
			except ParseFailure as ex:
				hint = best_hint(ex.remainder) if isinstance(ex, PartialParse) else None
				report.broken_module(name, text, ex, hint)
				return IMPORT_FAILED
			construction_stack.append(name)
			try:
				loaded[name] = evaluate(tree, Environment.root(resolve))
			finally:
				construction_stack.pop()
			return loaded[name]

		return resolve
