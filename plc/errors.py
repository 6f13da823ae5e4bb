"""
The three families of failure, one per pass.
Each pass stops at its first problem and raises; nobody downstream catches
and carries on. Presentation is the driver's business (see diagnostics.py).
"""

class PlcError(Exception):
	""" Something wrong with the program text, found before it ever runs. """
	def __init__(self, message:str, offset:int):
		super().__init__(message, offset)
		self.message = message
		self.offset = offset
	def __str__(self): return "%s (at offset %d)"%(self.message, self.offset)

class ParseError(PlcError):
	pass

class SemanticError(PlcError):
	pass

class PlcRuntimeError(Exception):
	""" Raised while the interpreter walks the tree. None of these are recoverable. """
	pass

class RuntimeTypeError(PlcRuntimeError):
	def __init__(self, expected:str, actual:str):
		super().__init__("Expected type %s, received %s."%(expected, actual))
		self.expected = expected
		self.actual = actual

class UnresolvedName(PlcRuntimeError):
	def __init__(self, name:str, arity=None):
		if arity is None: text = "The name %r is not defined."%name
		else: text = "No function %r takes %d argument(s)."%(name, arity)
		super().__init__(text)
		self.name = name
		self.arity = arity

class DivisionByZero(PlcRuntimeError):
	def __init__(self):
		super().__init__("Cannot divide by zero.")

class StackOverflow(PlcRuntimeError):
	def __init__(self):
		super().__init__("The program recursed too deeply.")
