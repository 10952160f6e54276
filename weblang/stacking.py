"""
Environments for the evaluator: a chain of small frames, innermost first.
Extending an environment never disturbs the one it extends, so closures
may capture whatever frame they are born in.

The root frame holds no names. It carries the import resolver,
which every frame in the chain can reach.
"""
from typing import Callable

class Environment:
	_bindings : dict
	static_link : "Environment"

	@staticmethod
	def root(resolver:Callable) -> "Environment":
		return RootFrame(resolver)

	def extend(self, bindings:dict) -> "Environment":
		return Activation(self, bindings) if bindings else self

	def fetch(self, name:str):
		frame = self
		while frame is not None:
			if name in frame._bindings: return frame._bindings[name]
			frame = frame.static_link
		raise KeyError(name)

	@property
	def resolver(self) -> Callable: return self._resolver

class RootFrame(Environment):
	static_link = None
	def __init__(self, resolver:Callable):
		self._bindings = {}
		self._resolver = resolver

class Activation(Environment):
	def __init__(self, static_link:Environment, bindings:dict):
		self._bindings = dict(bindings)
		self.static_link = static_link
		self._resolver = static_link._resolver
