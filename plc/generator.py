"""
Print an analyzed program as a Java class called Main.

This is a straightforward printer: all the thinking happened in the analyzer,
whose bindings supply the Java names of types, variables and functions.
"""
import io
from decimal import Decimal
from typing import TextIO
from boozetools.support.foundation import Visitor
from . import syntax

INDENT = "    "

_JAVA_ESCAPES = {"\b":"\\b", "\n":"\\n", "\r":"\\r", "\t":"\\t", "'":"\\'", '"':'\\"', "\\":"\\\\"}

def _escape(text:str, quote:str) -> str:
	special = {quote, "\\", "\b", "\n", "\r", "\t"}
	return quote + "".join(_JAVA_ESCAPES[c] if c in special else c for c in text) + quote

_JAVA_OPERATORS = {"AND": "&&", "OR": "||"}

class Generator(Visitor):
	def __init__(self, writer:TextIO):
		self._writer = writer
		self._indent = 0
	
	def generate(self, source:syntax.Source):
		self.visit(source)
	
	def _print(self, *items):
		for item in items:
			if isinstance(item, syntax.Phrase): self.visit(item)
			else: self._writer.write(str(item))
	
	def _newline(self, indent:int):
		self._writer.write("\n" + INDENT * indent)
	
	def _block(self, statements):
		""" Statements on their own lines, one level in; nothing at all if there are none. """
		if statements:
			self._indent += 1
			for stmt in statements:
				self._newline(self._indent)
				self._print(stmt)
			self._indent -= 1
			self._newline(self._indent)
	
	def visit_Source(self, source:syntax.Source):
		self._print("public class Main {")
		self._newline(0)
		if source.fields:
			self._indent += 1
			for field in source.fields:
				self._newline(self._indent)
				self._print(field)
			self._indent -= 1
			self._newline(self._indent)
		self._indent += 1
		self._newline(self._indent)
		self._print("public static void main(String[] args) {")
		self._indent += 1
		self._newline(self._indent)
		self._print("System.exit(new Main().main());")
		self._indent -= 1
		self._newline(self._indent)
		self._print("}")
		self._indent -= 1
		self._newline(self._indent)
		for method in source.methods:
			self._indent += 1
			self._newline(self._indent)
			self._print(method)
			self._indent -= 1
			self._newline(self._indent)
		self._newline(0)
		self._print("}")
	
	def visit_Field(self, field:syntax.Field):
		variable = field.variable
		self._print(variable.type.jvm_name, " ", variable.jvm_name)
		if field.initializer is not None:
			self._print(" = ", field.initializer)
		self._print(";")
	
	def visit_Method(self, method:syntax.Method):
		function = method.function
		params = ", ".join(
			"%s %s"%(param_type.jvm_name, name)
			for param_type, name in zip(function.param_types, method.params)
		)
		self._print(function.return_type.jvm_name, " ", function.jvm_name, "(", params, ") {")
		self._block(method.body)
		self._print("}")
	
	def visit_Expression(self, stmt:syntax.Expression):
		self._print(stmt.expr, ";")
	
	def visit_Declaration(self, stmt:syntax.Declaration):
		self._print(stmt.variable.type.jvm_name, " ", stmt.variable.jvm_name)
		if stmt.initializer is not None:
			self._print(" = ", stmt.initializer)
		self._print(";")
	
	def visit_Assignment(self, stmt:syntax.Assignment):
		self._print(stmt.receiver, " = ", stmt.value, ";")
	
	def visit_If(self, stmt:syntax.If):
		self._print("if (", stmt.condition, ") {")
		self._block(stmt.then_part)
		self._print("}")
		if stmt.else_part:
			self._print(" else {")
			self._block(stmt.else_part)
			self._print("}")
	
	def visit_For(self, stmt:syntax.For):
		self._print("for (int ", stmt.name, " : ", stmt.iterable, ") {")
		self._block(stmt.body)
		self._print("}")
	
	def visit_While(self, stmt:syntax.While):
		self._print("while (", stmt.condition, ") {")
		self._block(stmt.body)
		self._print("}")
	
	def visit_Return(self, stmt:syntax.Return):
		self._print("return ", stmt.value, ";")
	
	def visit_Literal(self, expr:syntax.Literal):
		value = expr.value
		if value is None: self._print("null")
		elif isinstance(value, bool): self._print("true" if value else "false")
		elif isinstance(value, syntax.Character): self._print(_escape(value, "'"))
		elif isinstance(value, str): self._print(_escape(value, '"'))
		elif isinstance(value, (int, Decimal)): self._print(value)
		else: raise ValueError(value)
	
	def visit_Group(self, expr:syntax.Group):
		self._print("(", expr.inner, ")")
	
	def visit_Binary(self, expr:syntax.Binary):
		self._print(expr.left, " ", _JAVA_OPERATORS.get(expr.op, expr.op), " ", expr.right)
	
	def visit_Access(self, expr:syntax.Access):
		if expr.receiver is not None:
			self._print(expr.receiver, ".")
		self._print(expr.variable.jvm_name)
	
	def visit_Call(self, expr:syntax.Call):
		if expr.receiver is not None:
			self._print(expr.receiver, ".")
		self._print(expr.function.jvm_name, "(")
		for i, arg in enumerate(expr.args):
			if i: self._print(", ")
			self._print(arg)
		self._print(")")


def generate(source:syntax.Source) -> str:
	""" Java text for an already-analyzed program. """
	buffer = io.StringIO()
	Generator(buffer).generate(source)
	return buffer.getvalue()
