"""
What the lexer hands to the parser.
Reserved words and punctuation share the OPERATOR kind; the parser tells them
apart by literal text.
"""
from typing import NamedTuple

IDENTIFIER = "identifier"
INTEGER = "integer"
DECIMAL = "decimal"
STRING = "string"
CHARACTER = "character"
OPERATOR = "operator"

RESERVED = frozenset("LET DEF DO END IF ELSE FOR IN WHILE RETURN TRUE FALSE NIL AND OR".split())

class Token(NamedTuple):
	kind: str
	literal: str
	offset: int
	
	def end(self) -> int:
		return self.offset + len(self.literal)
