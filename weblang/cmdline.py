"""
This is an interpreter for the weblang expression language.

{0}

For example:

    weblang program.wl

will parse, type, and evaluate program.wl if possible, or else try to explain why not.

    weblang -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

parser = argparse.ArgumentParser(
	prog="weblang",
	description="Interpreter for the weblang expression language.",
)
parser.add_argument("program", help="try examples/stream.wl for example.")
parser.add_argument('-c', "--check", action="store_true", help="Parse and type the program but do not evaluate it.")
parser.add_argument('-l', "--log", action="store_true", help="Print the type equalities that remain before solving.")
parser.add_argument('-v', "--verbose", action="count", help="Trace the type-checker's activity on the console. Repeat for more.")
parser.add_argument('-I', "--include", help="Folder in which to look for imported modules. Defaults to the program's folder.")

def run(args):
	from .diagnostics import Report, TooManyIssues
	from .modularity import Library
	from .session import Session
	report = Report(verbose=args.verbose)
	path = Path.cwd() / args.program
	try:
		with open(path, "r", encoding="utf-8") as fh:
			text = fh.read()
	except OSError:
		print("I see no file called %s" % path, file=sys.stderr)
		return 1
	folder = Path(args.include) if args.include else path.parent
	library = Library(report, folder)
	session = Session(resolver=library.resolver(), report=report)
	try:
		session.type_of(text, solve=False)
		if report.sick():
			report.complain_to_console()
			return 1
		print("Parse:", session.parse(text))
		if args.log:
			for line in session.equation_log(): print(line)
		typ = session.solve_full()
		if report.sick():
			report.complain_to_console()
			return 1
		print("Type:", typ)
		if args.check:
			print("Looks plausible to me.", file=sys.stderr)
			return 0
		result = session.evaluate(text)
		if report.sick():
			report.complain_to_console()
			return 1
		print("Result:", result)
		return 0
	except TooManyIssues:
		report.complain_to_console()
		print(" *"*35, file=sys.stderr)
		print("Giving up after a few issues. One crisis at a time, eh?", file=sys.stderr)
		return 1

def main():
	if len(sys.argv) > 1:
		exit(run(parser.parse_args()))
	else:
		print(__doc__.strip().format(parser.format_usage()))
