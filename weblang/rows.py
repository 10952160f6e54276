"""
Label-to-value mappings: the common currency of record types, variant types,
record patterns, record literals, and evaluated records.

A row is an ordinary dict from label to whatever. Labels are strings:
either identifiers or the decimal positions of a tuple.
"""
from collections.abc import Mapping
from typing import Callable, Iterable, TypeVar

A = TypeVar("A")
B = TypeVar("B")
Row = dict[str, A]

def positional(items:Iterable[A]) -> Row:
	""" The row of a tuple: labels are "0", "1", ... """
	return {str(i): x for i, x in enumerate(items)}

def is_positional(row:Mapping) -> bool:
	return set(row) == {str(i) for i in range(len(row))}

def label_key(label:str):
	# Positions sort numerically and ahead of names.
	return (0, int(label), "") if label.isdigit() else (1, 0, label)

def sorted_items(row:Mapping[str, A]) -> list[tuple[str, A]]:
	return [(k, row[k]) for k in sorted(row, key=label_key)]

def sorted_values(row:Mapping[str, A]) -> list[A]:
	return [row[k] for k in sorted(row, key=label_key)]

def row_map(fn:Callable[[A], B], row:Mapping[str, A]) -> Row:
	return {k: fn(v) for k, v in row.items()}

def row_difference_with(fn:Callable[[A], B], row:Mapping[str, A], other:Mapping[str, A]) -> Row:
	""" Labels of `row` absent from `other`, with `fn` applied to their values """
	return {k: fn(v) for k, v in row.items() if k not in other}

def row_intersect_with(fn:Callable[[A, A], B], row:Mapping[str, A], other:Mapping[str, A]) -> Row:
	""" Labels common to both, mapped through `fn(left, right)` """
	return {k: fn(v, other[k]) for k, v in row.items() if k in other}

def row_union_with(fn:Callable[[A, A], A], row:Mapping[str, A], other:Mapping[str, A]) -> Row:
	""" Every label of either; where both have it, `fn(left, right)` """
	result = dict(row)
	for k, v in other.items():
		result[k] = fn(result[k], v) if k in result else v
	return result

def bracket(text:str, put_brackets:bool) -> str:
	return "(" + text + ")" if put_brackets else text

ABSENT = object()
IN_PROGRESS = object()

class LazyRow(Mapping):
	"""
	A row whose values are computed on first access and then remembered.
	The computation receives the row itself, so a value may refer back
	to its own row (or even be that row) without any fixpoint machinery.
	"""
	def __init__(self, initializers:Mapping[str, A], compute:Callable[[A, "LazyRow"], B]):
		self._initializers = dict(initializers)
		self._compute = compute
		self._values = {k: ABSENT for k in self._initializers}

	def __getitem__(self, label:str):
		value = self._values[label]
		if value is IN_PROGRESS:
			return self.circular(label)
		if value is ABSENT:
			self._values[label] = IN_PROGRESS
			try:
				value = self._compute(self._initializers[label], self)
			finally:
				if self._values[label] is IN_PROGRESS:
					self._values[label] = ABSENT
			self._values[label] = value
		return value

	def __iter__(self): return iter(self._initializers)
	def __contains__(self, label): return label in self._initializers
	def __len__(self): return len(self._initializers)

	def is_computed(self, label:str) -> bool:
		return self._values[label] not in (ABSENT, IN_PROGRESS)

	def circular(self, label:str):
		""" A value asked for itself while being computed. Subclasses explain. """
		raise RecursionError(label)

	def __eq__(self, other): return self is other
	def __hash__(self): return id(self)
	def __repr__(self):
		return "{%s}" % ", ".join(
			"%s: %s" % (k, repr(self._values[k]) if self.is_computed(k) else "...")
			for k in self._initializers
		)
