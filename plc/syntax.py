"""
The set of parse-nodes in simple form.
The parser builds these once and nobody restructures them afterwards.
Class-level annotations name the slots that the analyzer fills in later;
each such slot starts out as None and gets settled exactly once.
"""
from typing import Optional, Sequence, Any
from .ontology import Type, Variable, Function

class AlreadyResolved(Exception):
	pass

class Character(str):
	""" A str of length one that knows it is not a String. """
	def __repr__(self): return "Character(%s)"%str.__repr__(self)

class Phrase:
	offset: int  # Where the first token of this phrase begins.
	
	def settle(self, slot:str, value):
		if getattr(self, slot) is not None:
			raise AlreadyResolved(self, slot)
		setattr(self, slot, value)
		return value

###############################################################################

class Expr(Phrase):
	type: Optional[Type] = None

class Literal(Expr):
	def __init__(self, value:Any, offset:int):
		self.value, self.offset = value, offset
	def __repr__(self): return "<Literal %r>"%(self.value,)

class Group(Expr):
	def __init__(self, inner:Expr, offset:int):
		self.inner, self.offset = inner, offset
	def __repr__(self): return "(%r)"%(self.inner,)

class Binary(Expr):
	def __init__(self, op:str, left:Expr, right:Expr, offset:int):
		self.op, self.left, self.right = op, left, right
		self.offset = offset
	def __repr__(self): return "<%r %s %r>"%(self.left, self.op, self.right)

class Access(Expr):
	variable: Optional[Variable] = None
	def __init__(self, receiver:Optional[Expr], name:str, offset:int):
		self.receiver, self.name, self.offset = receiver, name, offset
	def __repr__(self):
		if self.receiver is None: return "<ref:%s>"%self.name
		return "<%r.%s>"%(self.receiver, self.name)

class Call(Expr):
	function: Optional[Function] = None
	def __init__(self, receiver:Optional[Expr], name:str, args:Sequence[Expr], offset:int):
		self.receiver, self.name, self.args = receiver, name, list(args)
		self.offset = offset
	def __repr__(self): return "<call:%s/%d>"%(self.name, len(self.args))

###############################################################################

class Stmt(Phrase):
	pass

class Expression(Stmt):
	def __init__(self, expr:Expr, offset:int):
		self.expr, self.offset = expr, offset

class Declaration(Stmt):
	variable: Optional[Variable] = None
	def __init__(self, name:str, type_name:Optional[str], initializer:Optional[Expr], offset:int):
		self.name, self.type_name, self.initializer = name, type_name, initializer
		self.offset = offset

class Assignment(Stmt):
	def __init__(self, receiver:Expr, value:Expr, offset:int):
		self.receiver, self.value, self.offset = receiver, value, offset

class If(Stmt):
	def __init__(self, condition:Expr, then_part:Sequence[Stmt], else_part:Sequence[Stmt], offset:int):
		self.condition = condition
		self.then_part, self.else_part = list(then_part), list(else_part)
		self.offset = offset

class For(Stmt):
	def __init__(self, name:str, iterable:Expr, body:Sequence[Stmt], offset:int):
		self.name, self.iterable, self.body = name, iterable, list(body)
		self.offset = offset

class While(Stmt):
	def __init__(self, condition:Expr, body:Sequence[Stmt], offset:int):
		self.condition, self.body, self.offset = condition, list(body), offset

class Return(Stmt):
	def __init__(self, value:Expr, offset:int):
		self.value, self.offset = value, offset

###############################################################################

class Field(Phrase):
	variable: Optional[Variable] = None
	def __init__(self, name:str, type_name:str, initializer:Optional[Expr], offset:int):
		self.name, self.type_name, self.initializer = name, type_name, initializer
		self.offset = offset
	def __repr__(self): return "<LET %s:%s>"%(self.name, self.type_name)

class Method(Phrase):
	function: Optional[Function] = None
	def __init__(self, name:str, params:Sequence[str], param_type_names:Sequence[str], return_type_name:Optional[str], body:Sequence[Stmt], offset:int):
		assert len(params) == len(param_type_names)
		self.name = name
		self.params, self.param_type_names = list(params), list(param_type_names)
		self.return_type_name = return_type_name
		self.body = list(body)
		self.offset = offset
	def __repr__(self): return "<DEF %s/%d>"%(self.name, len(self.params))

class Source(Phrase):
	def __init__(self, fields:Sequence[Field], methods:Sequence[Method]):
		self.fields, self.methods = list(fields), list(methods)
		self.offset = 0
