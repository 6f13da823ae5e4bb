"""
This module defines the run-time values the interpreter operates in terms of.

A value is either a Primitive, wrapping a native payload (None, bool,
Character, str, int, or Decimal), or a Structured object carrying its own
fields and methods. Field access and method calls go by that tag.
"""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Sequence
from .ontology import Variable, Function, ANY
from .errors import UnresolvedName
from .syntax import Character

class PlcObject(ABC):
	@abstractmethod
	def get_field(self, name:str) -> Variable: pass
	
	def set_field(self, name:str, value:"PlcObject"):
		self.get_field(name).value = value
	
	@abstractmethod
	def call_method(self, name:str, args:Sequence["PlcObject"]) -> "PlcObject": pass

class Primitive(PlcObject):
	""" Native data plays itself; it has no fields or methods to speak of. """
	def __init__(self, value:Any):
		self.value = value
	
	def __repr__(self): return "<Primitive %r>"%(self.value,)
	
	def get_field(self, name:str) -> Variable:
		raise UnresolvedName(name)
	
	def call_method(self, name:str, args:Sequence[PlcObject]) -> PlcObject:
		raise UnresolvedName(name, len(args))

class Structured(PlcObject):
	"""
	An object with a field map and a method table.
	Methods receive the object itself as their first argument,
	but are looked up by the number of arguments the caller supplies.
	"""
	def __init__(self, type_name:str="Object"):
		self.type_name = type_name
		self.fields : dict[str, Variable] = {}
		self.methods : dict[tuple[str, int], Function] = {}
	
	def __repr__(self): return "<%s>"%self.type_name
	
	def define_field(self, name:str, value:PlcObject) -> Variable:
		self.fields[name] = field = Variable(name, ANY, value)
		return field
	
	def define_method(self, name:str, arity:int, implementation) -> Function:
		method = Function(name, (ANY,) * (arity + 1), ANY, implementation)
		self.methods[name, arity] = method
		return method
	
	def get_field(self, name:str) -> Variable:
		try: return self.fields[name]
		except KeyError: raise UnresolvedName(name)
	
	def call_method(self, name:str, args:Sequence[PlcObject]) -> PlcObject:
		try: method = self.methods[name, len(args)]
		except KeyError: raise UnresolvedName(name, len(args))
		return method.invoke([self, *args])

NIL = Primitive(None)

def create(value:Any) -> PlcObject:
	return NIL if value is None else Primitive(value)

def type_name(value:Any) -> str:
	""" The language's name for the kind of a native payload. """
	if isinstance(value, PlcObject):
		if isinstance(value, Structured): return value.type_name
		value = value.value
	if value is None: return "Nil"
	if isinstance(value, bool): return "Boolean"
	if isinstance(value, int): return "Integer"
	if isinstance(value, Decimal): return "Decimal"
	if isinstance(value, Character): return "Character"
	if isinstance(value, str): return "String"
	return type(value).__name__

def render(obj:PlcObject) -> str:
	""" What print shows, and what gets glued onto a string. """
	if isinstance(obj, Structured): return repr(obj)
	value = obj.value
	if value is None: return "NIL"
	if value is True: return "TRUE"
	if value is False: return "FALSE"
	return str(value)
