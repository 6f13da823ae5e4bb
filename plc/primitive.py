"""
Build the primitive namespace.
There is no ambient global scope: each pass gets a fresh one from root_scope()
and builds its own global frame atop that.
"""
from .ontology import Function, ANY, NIL
from .space import Scope
from . import values

def _print(args):
	print(values.render(args[0]))
	return values.NIL

def root_scope() -> Scope:
	scope = Scope()
	scope.define_function(Function("print", (ANY,), NIL, _print, jvm_name="System.out.println"))
	return scope
