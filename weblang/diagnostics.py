import sys, random
from typing import Any, Optional
from pathlib import Path
from boozetools.support.failureprone import SourceText, illustration

class TooManyIssues(Exception):
	pass

def _outburst():
	particle = ["Oh, ", "Well, ", "Aw, ", "", ""]

	minced_oaths = [
		'Ack', 'ARGH', 'Blargh', 'Confound it', 'Crud', 'Curses', "Crikey",
		'Dag Nabbit', 'Drat', 'Fiddlesticks', 'Good Grief', "Great Scott",
		'Heavens', "Mercy", 'Nuts', 'Rats', 'Woe is me',
	]

	resignations = [
		'I am undone.',
		'I cannot continue.',
		'I have no idea what the right answer is.',
		'I need to ask for help.',
	]

	return "%s%s! %s"%tuple(map(random.choice, (particle, minced_oaths, resignations)))

class Report:
	"""
	Collects the issues that turn up while working on a query.
	The verbose setting controls whether `info` has anything to say.
	"""
	_issues : list["Pic"]

	def __init__(self, *, verbose:int=0, max_issues=10):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._max_issues = max_issues

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)
	def issues(self) -> list["Pic"]: return list(self._issues)

	def issue(self, it:Any):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def reset(self):
		self._issues.clear()

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

	# The session calls this when a query fails:
	def explain(self, text:str, ex:Exception, hint:Optional[str]=None, filename:str=None) -> "Pic":
		intro = str(ex)
		offset = getattr(ex, "offset", None)
		if offset is not None and offset < len(text):
			source = SourceText(text, filename=filename)
			problem = [Annotation(source, offset, _width(text, offset), "Stuck here")]
		else:
			problem = []
		pic = Pic(intro, problem, [hint] if hint else ())
		self.issue(pic)
		return pic

	# Methods the import mechanism invokes:

	def no_such_module(self, name:str, where:Optional[Path]):
		intro = "I see no module called %r" % name
		footer = ["(I looked in %s)" % where] if where else ["(No folder of modules was given.)"]
		self.issue(Pic(intro, [], footer))

	def cyclic_import(self, name:str, cycle:list[str]):
		intro = "Importing %r would begin a cycle of imports. That is an error." % name
		footer = [" - The full cycle is:"]
		footer.extend('     '+str(step) for step in cycle + [name])
		self.issue(Pic(intro, [], footer))

	def broken_module(self, name:str, text:str, ex:Exception, hint:Optional[str]=None):
		intro = "Module %r could not be loaded: %s" % (name, ex)
		offset = getattr(ex, "offset", None)
		if offset is not None and offset < len(text):
			source = SourceText(text, filename=name)
			problem = [Annotation(source, offset, _width(text, offset), "Stuck here")]
		else:
			problem = []
		self.issue(Pic(intro, problem, [hint] if hint else ()))

def _width(text:str, offset:int) -> int:
	""" Underline up to the next whitespace, but at least one character. """
	end = offset
	while end < len(text) and not text[end].isspace(): end += 1
	return max(1, end - offset)

class Annotation:
	source: SourceText
	offset: int
	width: int
	caption: str
	def __init__(self, source:SourceText, offset:int, width:int=1, caption:str=""):
		self.source = source
		self.offset = offset
		self.width = width
		self.caption = caption
	def illustrate(self):
		row, col = self.source.find_row_col(self.offset)
		single_line = self.source.line_of_text(row)
		return illustration(single_line, col, self.width, prefix='% 6d |' % row, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self._intro, self._anns, self._footer = intro, anns, footer
	def intro(self) -> str: return self._intro
	def as_text(self):
		lines = [self._intro]
		if self._anns or self._footer: lines.append("")
		for ann in self._anns:
			lines.append(ann.illustrate())
		lines.extend(self._footer)
		return '\n'.join(lines)

def _bemoan(issues):
	""" Emit all the issues to the console. """
	if issues:
		print("*"*60, file=sys.stderr)
		print(_outburst(), file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()
