"""
The parser: recursive descent, one method per grammar production.

	source       ::= field* method*
	field        ::= LET name ':' type ('=' expression)? ';'
	method       ::= DEF name '(' (name ':' type (',' name ':' type)*)? ')' (':' type)? DO statement* END
	statement    ::= LET name (':' type)? ('=' expression)? ';'
	               | IF expression DO statement* (ELSE statement*)? END
	               | FOR name IN expression DO statement* END
	               | WHILE expression DO statement* END
	               | RETURN expression ';'
	               | expression ('=' expression)? ';'
	expression   ::= comparison ((AND | OR) comparison)*
	comparison   ::= additive (('<' | '<=' | '>' | '>=' | '==' | '!=') additive)*
	additive     ::= multiplicative (('+' | '-') multiplicative)*
	multiplicative ::= secondary (('*' | '/') secondary)*
	secondary    ::= primary ('.' name ('(' arguments? ')')?)*
	primary      ::= NIL | TRUE | FALSE | integer | decimal | character | string
	               | '(' expression ')' | name ('(' arguments? ')')?

The first problem aborts the parse. There is no recovery.
"""
import re
from decimal import Decimal
from typing import Optional, Sequence
from . import syntax
from .tokens import Token, IDENTIFIER, INTEGER, DECIMAL, STRING, CHARACTER, OPERATOR
from .errors import ParseError
from .lexer import lex

_KINDS = frozenset([IDENTIFIER, INTEGER, DECIMAL, STRING, CHARACTER, OPERATOR])

_ESCAPES = {"b":"\b", "n":"\n", "r":"\r", "t":"\t", "'":"'", '"':'"', "\\":"\\"}
_ESCAPE = re.compile(r"""\\([bnrt'"\\])""")

def unescape(body:str) -> str:
	return _ESCAPE.sub(lambda m: _ESCAPES[m.group(1)], body)

LOGICAL = ("AND", "OR")
COMPARISON = ("<", "<=", ">", ">=", "==", "!=")
ADDITIVE = ("+", "-")
MULTIPLICATIVE = ("*", "/")

class Parser:
	def __init__(self, tokens:Sequence[Token]):
		self._tokens = list(tokens)
		self._index = 0
	
	# Token-stream bits:
	
	def _has(self, offset:int=0) -> bool:
		return self._index + offset < len(self._tokens)
	
	def _get(self, offset:int=0) -> Token:
		return self._tokens[self._index + offset]
	
	def peek(self, *patterns) -> bool:
		"""
		True if the next tokens match the patterns, without consuming them.
		A pattern is either a token kind, which matches on kind,
		or anything else, which matches on literal text.
		"""
		for i, pattern in enumerate(patterns):
			if not self._has(i): return False
			token = self._get(i)
			if pattern in _KINDS:
				if token.kind != pattern: return False
			elif token.literal != pattern: return False
		return True
	
	def match(self, *patterns) -> bool:
		""" Like peek, but consumes the tokens on success. """
		if self.peek(*patterns):
			self._index += len(patterns)
			return True
		return False
	
	def _match_any(self, literals:Sequence[str]) -> Optional[str]:
		for literal in literals:
			if self.match(literal): return literal
	
	def _error(self, message:str) -> ParseError:
		if self._has(): return ParseError(message, self._get().offset)
		elif self._tokens: return ParseError(message, self._tokens[-1].end())
		else: return ParseError(message, 0)
	
	def _expect(self, pattern:str, message:str) -> Token:
		if self.match(pattern): return self._get(-1)
		raise self._error(message)
	
	def _name(self) -> str:
		return self._expect(IDENTIFIER, "Expected an identifier").literal
	
	def _type_name(self) -> str:
		return self._expect(IDENTIFIER, "Expected a type name").literal
	
	def _semicolon(self):
		self._expect(";", "Expected ';'")
	
	# Whole program:
	
	def parse_source(self) -> syntax.Source:
		fields, methods = [], []
		while self._has():
			if self.peek("LET"):
				if methods: raise self._error("Fields must all come before the first method")
				fields.append(self.parse_field())
			elif self.peek("DEF"):
				methods.append(self.parse_method())
			else:
				raise self._error("Expected a field (LET) or a method (DEF)")
		return syntax.Source(fields, methods)
	
	def parse_field(self) -> syntax.Field:
		start = self._expect("LET", "Expected LET").offset
		name = self._name()
		self._expect(":", "Expected ':' and a type name")
		type_name = self._type_name()
		initializer = self.parse_expression() if self.match("=") else None
		self._semicolon()
		return syntax.Field(name, type_name, initializer, start)
	
	def parse_method(self) -> syntax.Method:
		start = self._expect("DEF", "Expected DEF").offset
		name = self._name()
		self._expect("(", "Expected '('")
		params, param_type_names = [], []
		if not self.peek(")"):
			while True:
				params.append(self._name())
				self._expect(":", "Expected ':' and a type name")
				param_type_names.append(self._type_name())
				if not self.match(","): break
		self._expect(")", "Expected ',' or ')'")
		return_type_name = self._type_name() if self.match(":") else None
		self._expect("DO", "Expected DO")
		body = self._statements("END")
		self._expect("END", "Expected END")
		return syntax.Method(name, params, param_type_names, return_type_name, body, start)
	
	# Statements:
	
	def _statements(self, *stops:str) -> list[syntax.Stmt]:
		""" Parse statements up to (but not including) one of the stop words. """
		body = []
		while not any(self.peek(s) for s in stops):
			if not self._has(): raise self._error("Expected "+" or ".join(stops))
			body.append(self.parse_statement())
		return body
	
	def parse_statement(self) -> syntax.Stmt:
		if self.peek("LET"): return self.parse_declaration()
		if self.peek("IF"): return self.parse_if()
		if self.peek("FOR"): return self.parse_for()
		if self.peek("WHILE"): return self.parse_while()
		if self.peek("RETURN"): return self.parse_return()
		return self.parse_assignment()
	
	def parse_declaration(self) -> syntax.Declaration:
		start = self._expect("LET", "Expected LET").offset
		name = self._name()
		type_name = self._type_name() if self.match(":") else None
		initializer = self.parse_expression() if self.match("=") else None
		self._semicolon()
		return syntax.Declaration(name, type_name, initializer, start)
	
	def parse_assignment(self) -> syntax.Stmt:
		receiver = self.parse_expression()
		if self.match("="):
			value = self.parse_expression()
			self._semicolon()
			return syntax.Assignment(receiver, value, receiver.offset)
		self._semicolon()
		return syntax.Expression(receiver, receiver.offset)
	
	def parse_if(self) -> syntax.If:
		start = self._expect("IF", "Expected IF").offset
		condition = self.parse_expression()
		self._expect("DO", "Expected DO")
		then_part = self._statements("ELSE", "END")
		else_part = self._statements("END") if self.match("ELSE") else []
		self._expect("END", "Expected END")
		return syntax.If(condition, then_part, else_part, start)
	
	def parse_for(self) -> syntax.For:
		start = self._expect("FOR", "Expected FOR").offset
		name = self._name()
		self._expect("IN", "Expected IN")
		iterable = self.parse_expression()
		self._expect("DO", "Expected DO")
		body = self._statements("END")
		self._expect("END", "Expected END")
		return syntax.For(name, iterable, body, start)
	
	def parse_while(self) -> syntax.While:
		start = self._expect("WHILE", "Expected WHILE").offset
		condition = self.parse_expression()
		self._expect("DO", "Expected DO")
		body = self._statements("END")
		self._expect("END", "Expected END")
		return syntax.While(condition, body, start)
	
	def parse_return(self) -> syntax.Return:
		start = self._expect("RETURN", "Expected RETURN").offset
		value = self.parse_expression()
		self._semicolon()
		return syntax.Return(value, start)
	
	# Expressions, loosest binding first:
	
	def _left_associative(self, operators:Sequence[str], operand) -> syntax.Expr:
		left = operand()
		op = self._match_any(operators)
		while op is not None:
			right = operand()
			left = syntax.Binary(op, left, right, left.offset)
			op = self._match_any(operators)
		return left
	
	def parse_expression(self) -> syntax.Expr:
		return self.parse_logical()
	
	def parse_logical(self) -> syntax.Expr:
		return self._left_associative(LOGICAL, self.parse_comparison)
	
	def parse_comparison(self) -> syntax.Expr:
		return self._left_associative(COMPARISON, self.parse_additive)
	
	def parse_additive(self) -> syntax.Expr:
		return self._left_associative(ADDITIVE, self.parse_multiplicative)
	
	def parse_multiplicative(self) -> syntax.Expr:
		return self._left_associative(MULTIPLICATIVE, self.parse_secondary)
	
	def parse_secondary(self) -> syntax.Expr:
		expr = self.parse_primary()
		while self.match("."):
			name = self._name()
			if self.match("("):
				expr = syntax.Call(expr, name, self._arguments(), expr.offset)
			else:
				expr = syntax.Access(expr, name, expr.offset)
		return expr
	
	def _arguments(self) -> list[syntax.Expr]:
		""" Just after the open-paren; consumes through the close-paren. """
		args = []
		if self.match(")"): return args
		while True:
			args.append(self.parse_expression())
			if self.match(")"): return args
			self._expect(",", "Expected ',' or ')'")
	
	def parse_primary(self) -> syntax.Expr:
		if not self._has(): raise self._error("Expected an expression")
		token = self._get()
		start = token.offset
		if self.match("NIL"): return syntax.Literal(None, start)
		if self.match("TRUE"): return syntax.Literal(True, start)
		if self.match("FALSE"): return syntax.Literal(False, start)
		if self.match(INTEGER): return syntax.Literal(int(token.literal), start)
		if self.match(DECIMAL): return syntax.Literal(Decimal(token.literal), start)
		if self.match(STRING): return syntax.Literal(unescape(token.literal[1:-1]), start)
		if self.match(CHARACTER):
			body = unescape(token.literal[1:-1])
			if len(body) != 1: raise ParseError("A character literal holds exactly one character", start)
			return syntax.Literal(syntax.Character(body), start)
		if self.match("("):
			inner = self.parse_expression()
			self._expect(")", "Expected ')'")
			return syntax.Group(inner, start)
		if self.match(IDENTIFIER):
			if self.match("("):
				return syntax.Call(None, token.literal, self._arguments(), start)
			return syntax.Access(None, token.literal, start)
		raise self._error("Expected an expression")


def parse_source(tokens:Sequence[Token]) -> syntax.Source:
	return Parser(tokens).parse_source()

def parse_text(text:str) -> syntax.Source:
	""" Lex and parse in one go. Either stage may raise ParseError. """
	return parse_source(lex(text))
