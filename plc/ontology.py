"""
Types, variables and functions: the records that scopes bind names to.

Both the analyzer and the interpreter deal in these same records. The analyzer
mostly cares about the types; the interpreter mostly cares about the value cell
of a Variable and the implementation of a Function.
"""
from typing import Callable, Sequence, Optional, Any
from .errors import SemanticError

class Variable:
	"""
	A named, typed cell. Closures share the very same Variable object,
	so assignment through any alias is visible through all the others.
	"""
	def __init__(self, name:str, type:"Type", value:Any=None, jvm_name:Optional[str]=None):
		self.name = name
		self.type = type
		self.value = value
		self.jvm_name = jvm_name or name
	def __repr__(self): return "<Variable %s:%s>"%(self.name, self.type)

class Function:
	"""
	Looked up by name and arity, never by parameter types.
	For a method on some type, param_types[0] is the receiver.
	"""
	def __init__(self, name:str, param_types:Sequence["Type"], return_type:"Type", implementation:Callable, jvm_name:Optional[str]=None):
		self.name = name
		self.param_types = tuple(param_types)
		self.return_type = return_type
		self.implementation = implementation
		self.jvm_name = jvm_name or name
	
	@property
	def arity(self) -> int: return len(self.param_types)
	
	def invoke(self, args:Sequence):
		return self.implementation(list(args))
	
	def __repr__(self): return "<Function %s/%d>"%(self.name, self.arity)

class Type:
	""" Nominal, and closed: the built-ins below are all there is. """
	def __init__(self, name:str, jvm_name:str):
		self.name = name
		self.jvm_name = jvm_name
		self.fields : dict[str, Variable] = {}
		self.methods : dict[tuple[str, int], Function] = {}
	
	def __repr__(self): return self.name
	
	def define_field(self, name:str, type:"Type") -> Variable:
		self.fields[name] = field = Variable(name, type)
		return field
	
	def define_method(self, name:str, param_types:Sequence["Type"], return_type:"Type", implementation:Callable) -> Function:
		""" Give param_types without the receiver; the receiver goes in front. """
		method = Function(name, (self, *param_types), return_type, implementation)
		self.methods[name, len(param_types)] = method
		return method
	
	def field(self, name:str, offset:int=0) -> Variable:
		try: return self.fields[name]
		except KeyError: raise SemanticError("Type %s has no field %r."%(self, name), offset)
	
	def method(self, name:str, arity:int, offset:int=0) -> Function:
		try: return self.methods[name, arity]
		except KeyError: raise SemanticError("Type %s has no method %r taking %d argument(s)."%(self, name, arity), offset)


ANY = Type("Any", "Object")
NIL = Type("Nil", "Void")
COMPARABLE = Type("Comparable", "Comparable")
BOOLEAN = Type("Boolean", "boolean")
INTEGER = Type("Integer", "int")
DECIMAL = Type("Decimal", "double")
CHARACTER = Type("Character", "char")
STRING = Type("String", "String")
INTEGER_ITERABLE = Type("IntegerIterable", "Iterable<Integer>")

BUILT_IN_TYPES = {t.name:t for t in (
	ANY, NIL, COMPARABLE, BOOLEAN, INTEGER, DECIMAL, CHARACTER, STRING, INTEGER_ITERABLE,
)}

COMPARABLE_TYPES = frozenset([INTEGER, DECIMAL, CHARACTER, STRING])

def type_named(name:str, offset:int=0) -> Type:
	try: return BUILT_IN_TYPES[name]
	except KeyError: raise SemanticError("There is no type called %r."%name, offset)

def is_assignable(target:Type, value:Type) -> bool:
	if target is value or target is ANY: return True
	return target is COMPARABLE and value in COMPARABLE_TYPES

def require_assignable(target:Type, value:Type, offset:int=0):
	if not is_assignable(target, value):
		raise SemanticError("Expected %s, received %s."%(target, value), offset)
