"""
Nested scopes: a chain of binding frames with a parent link.
Variables and functions live in separate name-spaces; functions are keyed by
name and arity together. A frame refuses duplicates of its own, but happily
shadows whatever its ancestors define.
"""
from typing import Optional
from .ontology import Variable, Function

class AlreadyExists(KeyError): pass
class Absent(KeyError): pass

class Scope:
	def __init__(self, parent:Optional["Scope"]=None):
		self.parent = parent
		self._variables : dict[str, Variable] = {}
		self._functions : dict[tuple[str, int], Function] = {}
	
	def child(self) -> "Scope":
		return Scope(self)
	
	def define_variable(self, variable:Variable) -> Variable:
		if variable.name in self._variables:
			raise AlreadyExists(variable.name)
		self._variables[variable.name] = variable
		return variable
	
	def define_function(self, function:Function) -> Function:
		key = function.name, function.arity
		if key in self._functions:
			raise AlreadyExists(key)
		self._functions[key] = function
		return function
	
	def lookup_variable(self, name:str) -> Variable:
		scope = self
		while scope is not None:
			if name in scope._variables: return scope._variables[name]
			scope = scope.parent
		raise Absent(name)
	
	def lookup_function(self, name:str, arity:int) -> Function:
		key = name, arity
		scope = self
		while scope is not None:
			if key in scope._functions: return scope._functions[key]
			scope = scope.parent
		raise Absent(key)
	
	def holds_variable(self, name:str) -> bool:
		""" Only this frame; not the ancestors. """
		return name in self._variables
