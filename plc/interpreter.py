"""
The tree-walking run-time.

This pass trusts nothing the analyzer may have written into the tree: it keeps
its own scopes and checks the kind of every value as it goes. Dispatch is by
node class through the EXECUTE and EVALUATE tables at the bottom of the module.

Statements report how they finished: None for the ordinary case, or a
Returning record carrying the value of a RETURN up to the nearest call.
Every block runs in a fresh child scope handed down as an argument, so there
is never a "current scope" to restore on the way out.
"""
import operator, sys
from decimal import Decimal, Context, MAX_PREC, MAX_EMAX, MIN_EMIN
from fractions import Fraction
from collections.abc import Iterable
from typing import NamedTuple, Optional, Sequence
from . import syntax
from .ontology import Variable, Function, ANY
from .space import Scope, Absent, AlreadyExists
from .primitive import root_scope
from .values import PlcObject, Primitive, NIL, create, type_name, render
from .errors import PlcRuntimeError, RuntimeTypeError, UnresolvedName, DivisionByZero, StackOverflow

class Returning(NamedTuple):
	value: PlcObject

COMPLETION = Optional[Returning]

# Plenty of precision makes + - * exact on Decimal.
_EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)

# Each PLC call costs a dozen or so Python frames.
RECURSION_LIMIT = 10000

_NATIVE_NAMES = {
	bool: "Boolean",
	int: "Integer",
	Decimal: "Decimal",
	str: "String",
}

_ORDERED = frozenset([bool, int, Decimal, syntax.Character, str])

SHORTCUT = {
	"AND":False,
	"OR":True,
}

###############################################################################

def _native(obj:PlcObject):
	""" The payload of a primitive, or a sentinel that matches no native type. """
	return obj.value if isinstance(obj, Primitive) else obj

def _require(native:type, obj:PlcObject):
	value = _native(obj)
	if type(value) is native: return value
	raise RuntimeTypeError(_NATIVE_NAMES[native], type_name(obj))

def _bind(scope:Scope, variable:Variable) -> Variable:
	try: return scope.define_variable(variable)
	except AlreadyExists: raise PlcRuntimeError("%r is already defined in this scope."%variable.name)

def _lookup_variable(scope:Scope, name:str) -> Variable:
	try: return scope.lookup_variable(name)
	except Absent: raise UnresolvedName(name)

def _lookup_function(scope:Scope, name:str, arity:int) -> Function:
	try: return scope.lookup_function(name, arity)
	except Absent: raise UnresolvedName(name, arity)

###############################################################################

def execute(stmt:syntax.Stmt, scope:Scope) -> COMPLETION:
	try: fn = EXECUTE[type(stmt)]
	except KeyError: raise NotImplementedError(type(stmt), stmt)
	return fn(stmt, scope)

def execute_block(statements:Sequence[syntax.Stmt], scope:Scope) -> COMPLETION:
	for stmt in statements:
		outcome = execute(stmt, scope)
		if outcome is not None: return outcome
	return None

def evaluate(expr:syntax.Expr, scope:Scope) -> PlcObject:
	try: fn = EVALUATE[type(expr)]
	except KeyError: raise NotImplementedError(type(expr), expr)
	return fn(expr, scope)

###############################################################################

def declare_field(field:syntax.Field, scope:Scope):
	value = NIL if field.initializer is None else evaluate(field.initializer, scope)
	_bind(scope, Variable(field.name, ANY, value))

def declare_method(method:syntax.Method, scope:Scope) -> Function:
	""" The new function closes over the scope it is declared in. """
	def invoke(args:Sequence[PlcObject]) -> PlcObject:
		frame = scope.child()
		for name, arg in zip(method.params, args):
			_bind(frame, Variable(name, ANY, arg))
		outcome = execute_block(method.body, frame)
		return NIL if outcome is None else outcome.value
	
	function = Function(method.name, (ANY,) * len(method.params), ANY, invoke)
	try: return scope.define_function(function)
	except AlreadyExists: raise PlcRuntimeError("%s/%d is already defined."%(method.name, function.arity))

###############################################################################

def _exec_expression(stmt:syntax.Expression, scope:Scope) -> COMPLETION:
	evaluate(stmt.expr, scope)

def _exec_declaration(stmt:syntax.Declaration, scope:Scope) -> COMPLETION:
	value = NIL if stmt.initializer is None else evaluate(stmt.initializer, scope)
	_bind(scope, Variable(stmt.name, ANY, value))

def _exec_assignment(stmt:syntax.Assignment, scope:Scope) -> COMPLETION:
	target = stmt.receiver
	if not isinstance(target, syntax.Access):
		raise PlcRuntimeError("Only a variable or a field can be assigned.")
	if target.receiver is None:
		variable = _lookup_variable(scope, target.name)
		variable.value = evaluate(stmt.value, scope)
	else:
		receiver = evaluate(target.receiver, scope)
		receiver.set_field(target.name, evaluate(stmt.value, scope))

def _exec_if(stmt:syntax.If, scope:Scope) -> COMPLETION:
	if _require(bool, evaluate(stmt.condition, scope)):
		return execute_block(stmt.then_part, scope.child())
	else:
		return execute_block(stmt.else_part, scope.child())

def _iterate(obj:PlcObject):
	items = _native(obj)
	if isinstance(items, Iterable) and not isinstance(items, str):
		for item in items:
			yield item if isinstance(item, PlcObject) else create(item)
	else:
		raise RuntimeTypeError("Iterable", type_name(obj))

def _exec_for(stmt:syntax.For, scope:Scope) -> COMPLETION:
	for item in _iterate(evaluate(stmt.iterable, scope)):
		# A new binding each time around, so closures never share a loop variable.
		inner = scope.child()
		inner.define_variable(Variable(stmt.name, ANY, item))
		outcome = execute_block(stmt.body, inner)
		if outcome is not None: return outcome

def _exec_while(stmt:syntax.While, scope:Scope) -> COMPLETION:
	while _require(bool, evaluate(stmt.condition, scope)):
		outcome = execute_block(stmt.body, scope.child())
		if outcome is not None: return outcome

def _exec_return(stmt:syntax.Return, scope:Scope) -> COMPLETION:
	return Returning(evaluate(stmt.value, scope))

###############################################################################

def _equal(left:PlcObject, right:PlcObject) -> bool:
	if isinstance(left, Primitive) and isinstance(right, Primitive):
		a, b = left.value, right.value
		if type(a) is not type(b) or a != b: return False
		# Decimals must agree in scale too: 1.0 is not 1.00.
		return type(a) is not Decimal or a.as_tuple().exponent == b.as_tuple().exponent
	return left is right

def _compare(left:PlcObject, right:PlcObject) -> int:
	a, b = _native(left), _native(right)
	if type(a) not in _ORDERED: raise RuntimeTypeError("Comparable", type_name(left))
	if type(b) is not type(a): raise RuntimeTypeError(type_name(left), type_name(right))
	return (a > b) - (a < b)

RELATIONAL = {
	"<": lambda c: c < 0,
	"<=": lambda c: c <= 0,
	">": lambda c: c > 0,
	">=": lambda c: c >= 0,
}

def _integer_divide(a:int, b:int) -> int:
	""" Truncates toward zero. """
	if b == 0: raise DivisionByZero()
	quotient = abs(a) // abs(b)
	return quotient if (a < 0) == (b < 0) else -quotient

def _decimal_divide(a:Decimal, b:Decimal) -> Decimal:
	""" Keeps the scale of the dividend, rounding half to even. """
	if b == 0: raise DivisionByZero()
	exponent = a.as_tuple().exponent
	scaled = round(Fraction(a) / Fraction(b) / Fraction(10) ** exponent)
	return _EXACT.scaleb(Decimal(scaled), exponent)

ARITHMETIC = {
	int: {
		"+": operator.add,
		"-": operator.sub,
		"*": operator.mul,
		"/": _integer_divide,
	},
	Decimal: {
		"+": _EXACT.add,
		"-": _EXACT.subtract,
		"*": _EXACT.multiply,
		"/": _decimal_divide,
	},
}

def _is_string(obj:PlcObject) -> bool:
	return type(_native(obj)) is str

def _arithmetic(op:str, left:PlcObject, right:PlcObject) -> PlcObject:
	if op == "+" and (_is_string(left) or _is_string(right)):
		return create(render(left) + render(right))
	native = type(_native(left))
	if native not in ARITHMETIC: raise RuntimeTypeError("Integer or Decimal", type_name(left))
	return create(ARITHMETIC[native][op](_native(left), _require(native, right)))

def _eval_literal(expr:syntax.Literal, scope:Scope) -> PlcObject:
	return create(expr.value)

def _eval_group(expr:syntax.Group, scope:Scope) -> PlcObject:
	return evaluate(expr.inner, scope)

def _eval_binary(expr:syntax.Binary, scope:Scope) -> PlcObject:
	op = expr.op
	if op in SHORTCUT:
		left = _require(bool, evaluate(expr.left, scope))
		if left == SHORTCUT[op]: return create(left)
		return create(_require(bool, evaluate(expr.right, scope)))
	left = evaluate(expr.left, scope)
	right = evaluate(expr.right, scope)
	if op == "==": return create(_equal(left, right))
	if op == "!=": return create(not _equal(left, right))
	if op in RELATIONAL: return create(RELATIONAL[op](_compare(left, right)))
	return _arithmetic(op, left, right)

def _eval_access(expr:syntax.Access, scope:Scope) -> PlcObject:
	if expr.receiver is None:
		return _lookup_variable(scope, expr.name).value
	return evaluate(expr.receiver, scope).get_field(expr.name).value

def _eval_call(expr:syntax.Call, scope:Scope) -> PlcObject:
	args = [evaluate(arg, scope) for arg in expr.args]
	if expr.receiver is None:
		return _lookup_function(scope, expr.name, len(args)).invoke(args)
	return evaluate(expr.receiver, scope).call_method(expr.name, args)

###############################################################################

class Interpreter:
	"""
	Holds the global scope of one program run.
	Build a fresh one for each run.
	"""
	def __init__(self, parent:Optional[Scope]=None):
		self.scope = (parent or root_scope()).child()
	
	def run(self, source:syntax.Source) -> PlcObject:
		""" Define every field and method, then call main() and return what it returns. """
		old_limit = sys.getrecursionlimit()
		sys.setrecursionlimit(max(old_limit, RECURSION_LIMIT))
		try:
			for field in source.fields: declare_field(field, self.scope)
			for method in source.methods: declare_method(method, self.scope)
			return _lookup_function(self.scope, "main", 0).invoke(())
		except RecursionError:
			raise StackOverflow() from None
		finally:
			sys.setrecursionlimit(old_limit)
	
	def evaluate(self, expr:syntax.Expr) -> PlcObject:
		return evaluate(expr, self.scope)
	
	def execute(self, stmt:syntax.Stmt) -> COMPLETION:
		return execute(stmt, self.scope)

def run(source:syntax.Source, scope:Optional[Scope]=None) -> PlcObject:
	return Interpreter(scope).run(source)


EXECUTE = {}
EVALUATE = {}
for _k, _v in list(globals().items()):
	if _k.startswith("_exec_"):
		EXECUTE[_v.__annotations__["stmt"]] = _v
	elif _k.startswith("_eval_"):
		EVALUATE[_v.__annotations__["expr"]] = _v
