"""
Telling the user what went wrong, and where.
Every pass fails fast with an exception; the driver hands that exception to a
Report, which draws a picture of the offending line and says its piece on the
standard-error stream.
"""
import sys
from typing import Sequence
from boozetools.support.failureprone import SourceText, illustration
from .errors import ParseError, SemanticError, PlcRuntimeError

class Annotation:
	def __init__(self, source:SourceText, offset:int, caption:str=""):
		self.source = source
		self.offset = offset
		self.caption = caption
	def illustrate(self):
		row, col = self.source.find_row_col(self.offset)
		single_line = self.source.line_of_text(row)
		return illustration(single_line, col, 1, prefix='% 6d |' % row, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:Sequence[Annotation], footer=()):
		self._intro, self._anns, self._footer = intro, list(anns), footer
	def as_text(self):
		lines = [self._intro, ""]
		lines.extend(ann.illustrate() for ann in self._anns)
		lines.extend(self._footer)
		return '\n'.join(lines)

class Report:
	""" Collects what went wrong and, if asked, a running commentary. """
	_issues : list[Pic]
	
	def __init__(self, *, verbose:int=0):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
	
	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)
	
	@property
	def issues(self) -> list[Pic]: return list(self._issues)
	
	def issue(self, it:Pic):
		self._issues.append(it)
	
	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)
	
	def parse_error(self, text:str, filename:str, ex:ParseError):
		intro = "Syntax error in %s: %s" % (filename, ex.message)
		self.issue(Pic(intro, [_annotate(text, filename, ex.offset, "got confused here")]))
	
	def semantic_error(self, text:str, filename:str, ex:SemanticError):
		intro = "This program does not check out: %s" % ex.message
		self.issue(Pic(intro, [_annotate(text, filename, ex.offset)]))
	
	def runtime_error(self, ex:PlcRuntimeError):
		intro = "The program failed while running (%s)." % type(ex).__name__
		self.issue(Pic(intro, [], [str(ex)]))
	
	def complain_to_console(self):
		""" Emit all the issues to the console. """
		for pic in self._issues:
			print("  -"*20, file=sys.stderr)
			print(pic.as_text(), file=sys.stderr)
		sys.stderr.flush()

def _annotate(text:str, filename:str, offset:int, caption:str="") -> Annotation:
	# An error at end-of-input points just past the last character.
	offset = max(0, min(offset, len(text) - 1))
	return Annotation(SourceText(text, filename=filename), offset, caption)
