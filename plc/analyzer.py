"""
Static checking: types and name-bindings.

The analyzer walks the raw tree once, settling every type and binding slot,
and stops at the first problem with a SemanticError. The scope travels as
an explicit argument, so a block's frame simply falls out of use when the
visit returns, however it returns.
"""
from decimal import Decimal
from typing import Optional
from boozetools.support.foundation import Visitor
from . import syntax
from .ontology import (
	Type, Variable, Function, type_named, require_assignable,
	NIL, COMPARABLE, BOOLEAN, INTEGER, DECIMAL, CHARACTER, STRING, INTEGER_ITERABLE,
)
from .space import Scope, Absent, AlreadyExists
from .primitive import root_scope
from .errors import SemanticError

INTEGER_BITS = 32

def _stub(args):
	raise AssertionError("The analyzer never calls anything.")

class Analyzer(Visitor):
	"""
	One instance per program: the global scope is state of the instance.
	"""
	def __init__(self, parent:Optional[Scope]=None, *, require_main:bool=False):
		self.scope = (parent or root_scope()).child()
		self._require_main = require_main
	
	def analyze(self, source:syntax.Source) -> syntax.Source:
		self.visit(source, self.scope)
		return source
	
	def check(self, expr:syntax.Expr, scope:Scope) -> Type:
		self.visit(expr, scope)
		assert isinstance(expr.type, Type), expr
		return expr.type
	
	def tour(self, statements, scope:Scope):
		for stmt in statements: self.visit(stmt, scope)
	
	# Binding helpers that turn scope trouble into semantic errors:
	
	@staticmethod
	def _define_variable(scope:Scope, variable:Variable, site:syntax.Phrase) -> Variable:
		try: return scope.define_variable(variable)
		except AlreadyExists: raise SemanticError("%r is already defined in this scope."%variable.name, site.offset)
	
	@staticmethod
	def _define_function(scope:Scope, function:Function, site:syntax.Phrase) -> Function:
		try: return scope.define_function(function)
		except AlreadyExists: raise SemanticError("%s/%d is already defined."%(function.name, function.arity), site.offset)
	
	# Top level:
	
	def visit_Source(self, source:syntax.Source, scope:Scope):
		for field in source.fields: self.visit(field, scope)
		for method in source.methods: self.visit(method, scope)
		if self._require_main:
			try: main = scope.lookup_function("main", 0)
			except Absent: raise SemanticError("The program needs a main() method.", source.offset)
			require_assignable(INTEGER, main.return_type, source.offset)
	
	def visit_Field(self, field:syntax.Field, scope:Scope):
		declared = type_named(field.type_name, field.offset)
		if field.initializer is not None:
			require_assignable(declared, self.check(field.initializer, scope), field.initializer.offset)
		variable = self._define_variable(scope, Variable(field.name, declared), field)
		field.settle("variable", variable)
	
	def visit_Method(self, method:syntax.Method, scope:Scope):
		param_types = [type_named(name, method.offset) for name in method.param_type_names]
		if method.return_type_name is None: return_type = NIL
		else: return_type = type_named(method.return_type_name, method.offset)
		function = Function(method.name, param_types, return_type, _stub)
		method.settle("function", self._define_function(scope, function, method))
		inner = scope.child()
		for name, param_type in zip(method.params, param_types):
			self._define_variable(inner, Variable(name, param_type), method)
		self.tour(method.body, inner)
		if return_type is not NIL:
			for stmt in method.body:
				if isinstance(stmt, syntax.Return):
					require_assignable(return_type, stmt.value.type, stmt.offset)
	
	# Statements:
	
	def visit_Expression(self, stmt:syntax.Expression, scope:Scope):
		if not isinstance(stmt.expr, syntax.Call):
			raise SemanticError("Only a function call can stand alone as a statement.", stmt.offset)
		self.check(stmt.expr, scope)
	
	def visit_Declaration(self, stmt:syntax.Declaration, scope:Scope):
		if stmt.type_name is None and stmt.initializer is None:
			raise SemanticError("Declaring %r needs a type, a value, or both."%stmt.name, stmt.offset)
		if stmt.initializer is not None:
			value_type = self.check(stmt.initializer, scope)
		if stmt.type_name is None:
			declared = value_type
		else:
			declared = type_named(stmt.type_name, stmt.offset)
			if stmt.initializer is not None:
				require_assignable(declared, value_type, stmt.initializer.offset)
				# The variable takes the type of what it is initialized with.
				declared = value_type
		stmt.settle("variable", self._define_variable(scope, Variable(stmt.name, declared), stmt))
	
	def visit_Assignment(self, stmt:syntax.Assignment, scope:Scope):
		if not isinstance(stmt.receiver, syntax.Access):
			raise SemanticError("Only a variable or a field can be assigned.", stmt.offset)
		target = self.check(stmt.receiver, scope)
		require_assignable(target, self.check(stmt.value, scope), stmt.value.offset)
	
	def visit_If(self, stmt:syntax.If, scope:Scope):
		require_assignable(BOOLEAN, self.check(stmt.condition, scope), stmt.condition.offset)
		if not stmt.then_part:
			raise SemanticError("IF needs at least one statement before ELSE or END.", stmt.offset)
		self.tour(stmt.then_part, scope.child())
		self.tour(stmt.else_part, scope.child())
	
	def visit_For(self, stmt:syntax.For, scope:Scope):
		iterable = self.check(stmt.iterable, scope)
		if iterable is not INTEGER_ITERABLE:
			raise SemanticError("FOR needs an IntegerIterable, not %s."%iterable, stmt.iterable.offset)
		if not stmt.body:
			raise SemanticError("FOR needs at least one statement in its body.", stmt.offset)
		inner = scope.child()
		inner.define_variable(Variable(stmt.name, INTEGER))
		self.tour(stmt.body, inner)
	
	def visit_While(self, stmt:syntax.While, scope:Scope):
		require_assignable(BOOLEAN, self.check(stmt.condition, scope), stmt.condition.offset)
		self.tour(stmt.body, scope.child())
	
	def visit_Return(self, stmt:syntax.Return, scope:Scope):
		self.check(stmt.value, scope)
	
	# Expressions:
	
	def visit_Literal(self, expr:syntax.Literal, scope:Scope):
		value = expr.value
		if value is None: typ = NIL
		elif isinstance(value, bool): typ = BOOLEAN
		elif isinstance(value, syntax.Character): typ = CHARACTER
		elif isinstance(value, str): typ = STRING
		elif isinstance(value, int):
			if abs(value).bit_length() > INTEGER_BITS:
				raise SemanticError("Integer literal %d does not fit in %d bits."%(value, INTEGER_BITS), expr.offset)
			typ = INTEGER
		elif isinstance(value, Decimal):
			if abs(float(value)) == float("inf"):
				raise SemanticError("Decimal literal %s is out of range."%value, expr.offset)
			typ = DECIMAL
		else:
			raise SemanticError("No type for literal %r."%(value,), expr.offset)
		expr.settle("type", typ)
	
	def visit_Group(self, expr:syntax.Group, scope:Scope):
		if not isinstance(expr.inner, syntax.Binary):
			raise SemanticError("Parentheses may only enclose a binary expression.", expr.offset)
		expr.settle("type", self.check(expr.inner, scope))
	
	def visit_Binary(self, expr:syntax.Binary, scope:Scope):
		left = self.check(expr.left, scope)
		right = self.check(expr.right, scope)
		op = expr.op
		if op in ("AND", "OR"):
			require_assignable(BOOLEAN, left, expr.left.offset)
			require_assignable(BOOLEAN, right, expr.right.offset)
			typ = BOOLEAN
		elif op in ("<", "<=", ">", ">=", "==", "!="):
			require_assignable(COMPARABLE, left, expr.left.offset)
			require_assignable(COMPARABLE, right, expr.right.offset)
			if left is not right:
				raise SemanticError("Cannot compare %s with %s."%(left, right), expr.offset)
			typ = BOOLEAN
		elif op in ("+", "-", "*", "/"):
			if op == "+" and STRING in (left, right):
				typ = STRING
			elif left in (INTEGER, DECIMAL) and right is left:
				typ = left
			else:
				raise SemanticError("Operator %s cannot combine %s with %s."%(op, left, right), expr.offset)
		else:
			raise SemanticError("Unknown operator %r."%op, expr.offset)
		expr.settle("type", typ)
	
	def visit_Access(self, expr:syntax.Access, scope:Scope):
		if expr.receiver is None:
			try: variable = scope.lookup_variable(expr.name)
			except Absent: raise SemanticError("The name %r is not defined."%expr.name, expr.offset)
		else:
			variable = self.check(expr.receiver, scope).field(expr.name, expr.offset)
		expr.settle("variable", variable)
		expr.settle("type", variable.type)
	
	def visit_Call(self, expr:syntax.Call, scope:Scope):
		arg_types = [self.check(arg, scope) for arg in expr.args]
		arity = len(arg_types)
		if expr.receiver is None:
			try: function = scope.lookup_function(expr.name, arity)
			except Absent: raise SemanticError("No function %r takes %d argument(s)."%(expr.name, arity), expr.offset)
			param_types = function.param_types
		else:
			function = self.check(expr.receiver, scope).method(expr.name, arity, expr.offset)
			param_types = function.param_types[1:]
		for arg, need, got in zip(expr.args, param_types, arg_types):
			require_assignable(need, got, arg.offset)
		expr.settle("function", function)
		expr.settle("type", function.return_type)


def analyze(source:syntax.Source, scope:Optional[Scope]=None, *, require_main:bool=False) -> syntax.Source:
	return Analyzer(scope, require_main=require_main).analyze(source)
