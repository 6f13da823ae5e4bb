"""
Text to tokens, in one pass of a master regular expression.

Nothing clever happens here: escapes inside character and string literals are
left in the literal text for the parser to decode, and a minus sign sticks to
a number only where no operand could stand in front of it.
"""
import re
from .tokens import Token, IDENTIFIER, INTEGER, DECIMAL, STRING, CHARACTER, OPERATOR, RESERVED
from .errors import ParseError

_PATTERN = re.compile(r"""
	(?P<space>\s+)
	|(?P<decimal>-?(?:0|[1-9][0-9]*)\.[0-9]+)
	|(?P<integer>-?(?:0|[1-9][0-9]*))
	|(?P<word>[A-Za-z_][A-Za-z0-9_]*)
	|(?P<character>'(?:[^'\\\n\r]|\\[bnrt'"\\])')
	|(?P<string>"(?:[^"\\\n\r]|\\[bnrt'"\\])*")
	|(?P<operator><=|>=|==|!=|[<>=+\-*/(),.:;])
""", re.VERBOSE)

_KIND = {
	"decimal": DECIMAL,
	"integer": INTEGER,
	"character": CHARACTER,
	"string": STRING,
	"operator": OPERATOR,
}

_CLOSERS = frozenset([")", "TRUE", "FALSE", "NIL"])

def _ends_operand(token:Token) -> bool:
	if token.kind == OPERATOR: return token.literal in _CLOSERS
	return True

def lex(text:str) -> list[Token]:
	tokens = []
	pos = 0
	while pos < len(text):
		m = _PATTERN.match(text, pos)
		if m is None:
			if text[pos] in "'\"":
				raise ParseError("Malformed or unterminated literal", pos)
			raise ParseError("Unexpected character %r"%text[pos], pos)
		group, literal = m.lastgroup, m.group()
		if group == "space":
			pass
		elif group == "word":
			kind = OPERATOR if literal in RESERVED else IDENTIFIER
			tokens.append(Token(kind, literal, pos))
		elif literal.startswith("-") and tokens and _ends_operand(tokens[-1]):
			# Subtraction, not a negative literal.
			tokens.append(Token(OPERATOR, "-", pos))
			pos += 1
			continue
		else:
			tokens.append(Token(_KIND[group], literal, pos))
		pos = m.end()
	return tokens
