"""
This module defines the specialized value-types that the evaluator operates in terms of.
Numbers, characters, and lists play themselves, but records, tagged values,
and the several kinds of callable value need more help.
"""
import json
from collections.abc import Mapping
from typing import Any, Callable, NamedTuple
from .ontology import WeblangError
from .rows import LazyRow

class EvaluationError(WeblangError):
	pass

class UnboundName(EvaluationError):
	def __init__(self, name):
		super().__init__("Unbound variable: %s" % name)
		self.name = name

class NotAProcedure(EvaluationError):
	def __init__(self, value):
		super().__init__("Cannot apply a non-function: %s" % describe(value))

class MissingField(EvaluationError):
	def __init__(self, label, value):
		super().__init__("No field %r in %s" % (label, describe(value)))
		self.label = label

class UnhandledTag(EvaluationError):
	def __init__(self, value):
		super().__init__("No case for %s" % describe(value))

class SelfReferentialField(EvaluationError):
	def __init__(self, label):
		super().__init__("Field %r depends on itself" % label)
		self.label = label

class ImportFailed(EvaluationError):
	def __init__(self, name):
		super().__init__("Cannot import %r" % name)
		self.name = name

class PrimitiveFailure(EvaluationError):
	def __init__(self, name, ex:Exception):
		super().__init__("%s failed: %s" % (name, ex))

###############################################################################

IMPORT_FAILED = object()

def refuse_imports(name):
	""" The resolver for a session that has no library behind it """
	return IMPORT_FAILED

class Procedure:
	""" A run-time object that can be applied to one argument. """
	def apply(self, arg): raise NotImplementedError(type(self))

def apply(procedure, arg):
	if not isinstance(procedure, Procedure):
		raise NotAProcedure(procedure)
	return procedure.apply(arg)

class Primitive(Procedure):
	def __init__(self, fn:Callable, name:str):
		self._fn = fn
		self._name = name

	def apply(self, arg):
		try:
			return self._fn(arg)
		except (ArithmeticError, ValueError, TypeError, KeyError) as ex:
			raise PrimitiveFailure(self._name, ex) from ex

	def __repr__(self): return "<primitive %s>" % self._name

class TagConstructor(Procedure):
	""" The value of `#label`: wraps its argument under that label """
	def __init__(self, label:str): self.label = label
	def apply(self, arg): return Tagged(self.label, arg)
	def __repr__(self): return "#" + self.label

class Tagged(NamedTuple):
	label: str
	value: Any

class LazyRecord(LazyRow):
	def circular(self, label):
		raise SelfReferentialField(label)

EMPTY_RECORD = LazyRecord({}, None)

def flag(b:bool) -> Tagged:
	return Tagged("true" if b else "false", EMPTY_RECORD)

def field(value, label:str):
	if not isinstance(value, Mapping) or label not in value:
		raise MissingField(label, value)
	return value[label]

def describe(value) -> str:
	if isinstance(value, Procedure): return "a function"
	if isinstance(value, Tagged): return "#%s" % value.label
	if isinstance(value, Mapping): return "a record"
	if isinstance(value, list): return "a list"
	return repr(value)

###############################################################################

FUNCTION = "<function>"
CYCLE = "<cycle>"

def to_json(value) -> str:
	""" The value, as indented JSON text """
	return json.dumps(jsonable(value, []), indent=2)

def jsonable(value, path:list):
	"""
	Records become objects, tagged values become [label, value] pairs,
	and functions become a marker string. A record met again inside
	itself becomes the cycle marker.
	"""
	if isinstance(value, Tagged):
		return [value.label, jsonable(value.value, path)]
	if isinstance(value, list):
		return [jsonable(x, path) for x in value]
	if isinstance(value, Mapping):
		if any(value is p for p in path): return CYCLE
		inner = path + [value]
		return {label: jsonable(value[label], inner) for label in value}
	if isinstance(value, Procedure):
		return FUNCTION
	if isinstance(value, float) and value.is_integer():
		return int(value)
	return value
