"""
A small backtracking parser-combinator kit.

A parser is a function from an input string to a list of (result, remaining-input)
pairs. The empty list means failure. More than one pair means the input admits
more than one reading up to that point.

Two flavors of alternation exist on purpose:
	`choice` collects every alternative's readings, so the caller can notice ambiguity.
	`biased_choice` commits to the first alternative that succeeds at all.
The repetition combinators are greedy and committed, like `biased_choice`.
"""
import re
from typing import Any, Callable, TypeVar
from .ontology import WeblangError

A = TypeVar("A")
B = TypeVar("B")
Parser = Callable[[str], list[tuple[Any, str]]]

class ParseFailure(WeblangError):
	""" Base for the three ways a top-level parse can go wrong """
	pass

class NoParse(ParseFailure):
	def __init__(self):
		super().__init__("Parse error")

class PartialParse(ParseFailure):
	def __init__(self, remainder:str, offset:int):
		super().__init__('Parse error at: "%s"' % remainder)
		self.remainder, self.offset = remainder, offset

class AmbiguousParse(ParseFailure):
	def __init__(self, readings:list):
		super().__init__("Ambiguous parse! (%d readings)" % len(readings))
		self.readings = readings

def pure(x) -> Parser:
	return lambda text: [(x, text)]

def fail() -> Parser:
	return lambda text: []

def fmap(fn:Callable, p:Parser) -> Parser:
	return lambda text: [(fn(x), rest) for x, rest in p(text)]

def bind(p:Parser, fn:Callable[[Any], Parser]) -> Parser:
	def parse(text):
		return [reading for x, rest in p(text) for reading in fn(x)(rest)]
	return parse

def app(pf:Parser, px:Parser) -> Parser:
	""" Apply the function that `pf` reads to the value that `px` reads next """
	return bind(pf, lambda f: fmap(f, px))

def seq(*ps:Parser) -> Parser:
	""" Read each in turn; produce the tuple of their results """
	def step(i, acc):
		if i == len(ps): return pure(tuple(acc))
		return bind(ps[i], lambda x: step(i+1, acc+[x]))
	return lambda text: step(0, [])(text)

def then(p:Parser, q:Parser) -> Parser:
	""" Read p, discard it, then read q """
	return bind(p, lambda _: q)

def skip(p:Parser, q:Parser) -> Parser:
	""" Read p, then q, but keep only p's result """
	return bind(p, lambda x: fmap(lambda _: x, q))

def lazy(make:Callable[[], Parser]) -> Parser:
	""" Grammars are recursive; this defers building a parser until it runs. """
	return lambda text: make()(text)

def choice(*ps:Parser) -> Parser:
	return lambda text: [reading for p in ps for reading in p(text)]

def biased_choice(*ps:Parser) -> Parser:
	def parse(text):
		for p in ps:
			readings = p(text)
			if readings: return readings
		return []
	return parse

def many(p:Parser) -> Parser:
	def parse(text):
		items = []
		while True:
			readings = p(text)
			if not readings: return [(items, text)]
			if len(readings) > 1:
				# Each reading may continue differently; keep them all.
				return [
					([*items, x, *more], tail)
					for x, rest in readings
					for more, tail in many(p)(rest)
				]
			x, rest = readings[0]
			if rest == text: return [(items, text)]
			items.append(x)
			text = rest
	return parse

def many1(p:Parser) -> Parser:
	return bind(p, lambda x: fmap(lambda xs: [x, *xs], many(p)))

def sep_by1(sep:Parser, p:Parser) -> Parser:
	return bind(p, lambda x: fmap(lambda xs: [x, *xs], many(then(sep, p))))

def sep_by(sep:Parser, p:Parser) -> Parser:
	return biased_choice(sep_by1(sep, p), pure([]))

def optional(p:Parser, default=None) -> Parser:
	return biased_choice(p, pure(default))

def sat(pattern:str) -> Parser:
	""" Match a regular pattern anchored at the current position """
	regex = re.compile(pattern)
	def parse(text):
		m = regex.match(text)
		return [(m.group(), text[m.end():])] if m else []
	return parse

WHITESPACE = sat(r"\s*")

def token(pattern:str) -> Parser:
	return then(WHITESPACE, sat(pattern))

def literal(text:str) -> Parser:
	return token(re.escape(text))

def brackets(open_bracket:str, p:Parser, close_bracket:str) -> Parser:
	return skip(then(literal(open_bracket), p), literal(close_bracket))

def parse_all(p:Parser, text:str):
	"""
	Succeed only if exactly one reading consumes the whole text.
	Trailing whitespace is fine.
	"""
	readings = skip(p, WHITESPACE)(text)
	complete = [x for x, rest in readings if not rest]
	if len(complete) == 1:
		return complete[0]
	if len(complete) > 1:
		raise AmbiguousParse(complete)
	if not readings:
		raise NoParse()
	# Blame the reading that got furthest.
	rest = min((rest for x, rest in readings), key=len).lstrip()
	raise PartialParse(rest, len(text) - len(rest))
