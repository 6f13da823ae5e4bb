"""
This is the driver for the PLC teaching language.

{0}

For example:

    plc program.plc

will run program.plc if possible, or else try to explain why not.

    plc -t program.plc

will print the equivalent Java program instead.
"""
import sys, argparse
from pathlib import Path

parser = argparse.ArgumentParser(
	prog="plc",
	description="Parser, checker, and reference interpreter for the PLC teaching language.",
)
parser.add_argument("program", help="path to a program, e.g. examples/hello.plc")
parser.add_argument('-c', "--check", action="store_true", help="Check the program but do not actually run it.")
parser.add_argument('-t', "--translate", action="store_true", help="Translate the checked program into Java on standard output.")
parser.add_argument('-v', "--verbose", action="count", help="Say what is happening along the way.")

def run(args) -> int:
	from .diagnostics import Report, Pic
	from .errors import ParseError, SemanticError, PlcRuntimeError
	from .front_end import parse_text
	from .analyzer import analyze
	report = Report(verbose=args.verbose)
	path = Path(args.program)
	try: text = path.read_text(encoding="utf-8")
	except OSError as ex:
		report.issue(Pic("I see no readable file called %s (%s)."%(path, ex.strerror), []))
		report.complain_to_console()
		return 1
	try:
		report.info("Parse", path)
		source = parse_text(text)
		report.info("Analyze", path)
		analyze(source, require_main=True)
	except ParseError as ex:
		report.parse_error(text, str(path), ex)
	except SemanticError as ex:
		report.semantic_error(text, str(path), ex)
	if report.sick():
		report.complain_to_console()
		return 1
	if args.check:
		print("Looks plausible to me.", file=sys.stderr)
		return 0
	if args.translate:
		from .generator import generate
		print(generate(source))
		return 0
	from .interpreter import Interpreter
	from .values import NIL, render
	report.info("Run", path)
	try: result = Interpreter().run(source)
	except PlcRuntimeError as ex:
		report.runtime_error(ex)
		report.complain_to_console()
		return 1
	if result is not NIL:
		print(render(result))
	return 0

def main(argv=None):
	argv = sys.argv[1:] if argv is None else argv
	if argv:
		sys.exit(run(parser.parse_args(argv)))
	else:
		print(__doc__.strip().format(parser.format_usage()))
