import unittest

from plc import syntax
from plc.analyzer import Analyzer, analyze
from plc.front_end import parse_text
from plc.ontology import Type, Variable, is_assignable, BUILT_IN_TYPES
from plc.ontology import NIL, BOOLEAN, INTEGER, DECIMAL, CHARACTER, STRING
from plc.primitive import root_scope
from plc.errors import SemanticError

def check(text, scope=None, **kwargs) -> syntax.Source:
	return analyze(parse_text(text), scope, **kwargs)

def in_main(body):
	return "DEF main(): Integer DO "+body+" RETURN 0; END"

class ScenarioTests(unittest.TestCase):
	
	def test_field_and_main(self):
		source = check("LET x: Integer = 5; DEF main(): Integer DO RETURN x; END", require_main=True)
		field, method = source.fields[0], source.methods[0]
		self.assertIs(INTEGER, field.variable.type)
		self.assertIs(INTEGER, field.initializer.type)
		self.assertIs(INTEGER, method.function.return_type)
		self.assertEqual((), method.function.param_types)
		ret = method.body[0]
		self.assertIs(field.variable, ret.value.variable)
		self.assertIs(INTEGER, ret.value.type)
	
	def test_string_into_integer_field(self):
		with self.assertRaises(SemanticError) as cm:
			check('LET x: Integer = "hi"; DEF main(): Integer DO RETURN 0; END')
		self.assertEqual(17, cm.exception.offset)
	
	def test_mixed_addition(self):
		with self.assertRaises(SemanticError) as cm:
			check("DEF main(): Integer DO RETURN 1 + 1.0; END")
		self.assertIn("Integer", cm.exception.message)
		self.assertIn("Decimal", cm.exception.message)
	
	def test_counting_loop(self):
		check("LET i: Integer = 0; DEF main(): Integer DO WHILE i < 3 DO i = i + 1; END RETURN i; END", require_main=True)
	
	def test_loop_program(self):
		check(in_main("LET a = 1; LET b = 2; WHILE a < 10 DO a = a + b; END"))
	
	def test_division_by_a_zero_literal_is_fine_statically(self):
		check("DEF main(): Integer DO RETURN 1 / 0; END")
	
	def test_every_binding_slot_is_settled(self):
		source = check("""
			LET n: Integer = 3;
			DEF twice(k: Integer): Integer DO RETURN k * 2; END
			DEF main(): Integer DO
				LET m = twice(n);
				print(m);
				RETURN m;
			END
		""")
		decl, stmt, ret = source.methods[1].body
		self.assertIs(INTEGER, decl.variable.type)
		self.assertIs(source.methods[0].function, decl.initializer.function)
		self.assertIs(NIL, stmt.expr.type)
		self.assertEqual("print", stmt.expr.function.name)
		self.assertIs(decl.variable, ret.value.variable)
	
	def test_analyzing_twice_is_an_error(self):
		source = check(in_main("print(1);"))
		with self.assertRaises(syntax.AlreadyResolved):
			analyze(source)

class MainTests(unittest.TestCase):
	
	def test_main_is_optional_by_default(self):
		check("DEF helper() DO END")
	
	def test_missing_main(self):
		with self.assertRaises(SemanticError):
			check("DEF helper() DO END", require_main=True)
	
	def test_main_must_return_integer(self):
		with self.assertRaises(SemanticError):
			check('DEF main(): String DO RETURN "x"; END', require_main=True)

class LiteralTests(unittest.TestCase):
	
	def test_literal_types(self):
		for text, typ in [("NIL", NIL), ("TRUE", BOOLEAN), ("1", INTEGER), ("1.5", DECIMAL), ("'c'", CHARACTER), ('"s"', STRING)]:
			with self.subTest(text):
				source = check("LET x: Any = "+text+";")
				self.assertIs(typ, source.fields[0].initializer.type)
	
	def test_integer_width(self):
		for text, fits in [("4294967295", True), ("-4294967295", True), ("4294967296", False), ("-4294967296", False)]:
			with self.subTest(text):
				program = "LET x: Integer = "+text+";"
				if fits: check(program)
				else: self.assertRaises(SemanticError, check, program)
	
	def test_huge_decimal(self):
		self.assertRaises(SemanticError, check, "LET x: Decimal = 1"+"0"*400+".0;")
		check("LET x: Decimal = 1"+"0"*300+".0;")
	
	def test_declarations_follow_assignability(self):
		literals = {NIL: "NIL", BOOLEAN: "TRUE", INTEGER: "1", DECIMAL: "1.0", CHARACTER: "'c'", STRING: '"s"'}
		for declared in BUILT_IN_TYPES.values():
			for typ, text in literals.items():
				with self.subTest(declared=declared, value=typ):
					program = in_main("LET x: %s = %s;"%(declared.name, text))
					if is_assignable(declared, typ): check(program)
					else: self.assertRaises(SemanticError, check, program)

class StatementTests(unittest.TestCase):
	
	def test_bad(self):
		for label, body in [
			("bare expression", "1;"),
			("bare name", "LET a = 1; a;"),
			("assign to a call", "print(1) = 2;"),
			("assign wrong type", 'LET a = 1; a = "s";'),
			("declaration without type or value", "LET a;"),
			("declaration with unknown type", "LET a: Float;"),
			("duplicate local", "LET a = 1; LET a = 2;"),
			("integer condition", "IF 1 DO print(1); END"),
			("empty then part", "IF TRUE DO ELSE print(1); END"),
			("while on integer", "WHILE 1 DO END"),
			("for over integer", "FOR i IN 3 DO print(i); END"),
			("block scope ends", "IF TRUE DO LET a = 1; END print(a);"),
			("for variable is local", "FOR i IN xs DO print(i); END print(i);"),
		]:
			with self.subTest(label):
				program = "LET xs: IntegerIterable; " + in_main(body)
				self.assertRaises(SemanticError, check, program)
	
	def test_good(self):
		for label, body in [
			("call statement", "print(1);"),
			("declared and initialized", "LET a: Decimal = 1.5;"),
			("declared only", "LET a: String; a = \"s\";"),
			("inferred", "LET a = 'c'; LET b: Character = a;"),
			("if else", "IF TRUE DO print(1); ELSE END"),
			("empty while", "WHILE FALSE DO END"),
			("for loop", "FOR i IN xs DO print(i + 1); END"),
			("shadow a field", "LET xs = 1;"),
			("shadow in a block", "LET a = 1; IF TRUE DO LET a = \"s\"; print(a); END"),
			("assign to Any", "LET a: Any; a = 1; a = \"s\";"),
		]:
			with self.subTest(label):
				check("LET xs: IntegerIterable; " + in_main(body))
	
	def test_empty_for_body(self):
		self.assertRaises(SemanticError, check, "LET xs: IntegerIterable; " + in_main("FOR i IN xs DO END"))
	
	def test_initialized_local_takes_the_initializer_type(self):
		source = check("DEF main(): Integer DO LET a: Any = 1; LET b: Any; RETURN a + 1; END")
		a, b = source.methods[0].body[:2]
		self.assertIs(INTEGER, a.variable.type)
		self.assertIs(BUILT_IN_TYPES["Any"], b.variable.type)
		check("DEF main(): Integer DO LET a: Comparable = 1; RETURN a; END")
		self.assertRaises(SemanticError, check, in_main('LET a: Any = 1; a = "s";'))
	
	def test_field_keeps_its_declared_type(self):
		source = check("LET g: Any = 1;")
		self.assertIs(BUILT_IN_TYPES["Any"], source.fields[0].variable.type)
	
	def test_for_variable_is_integer(self):
		source = check("LET xs: IntegerIterable; " + in_main("FOR i IN xs DO print(i); END"))
		loop = source.methods[0].body[0]
		self.assertIs(INTEGER, loop.body[0].expr.args[0].type)

class MethodTests(unittest.TestCase):
	
	def test_parameter_types_come_from_their_annotations(self):
		source = check("DEF f(x: String, y: Integer): Integer DO RETURN y; END")
		self.assertEqual((STRING, INTEGER), source.methods[0].function.param_types)
	
	def test_return_type_is_checked(self):
		self.assertRaises(SemanticError, check, 'DEF main(): Integer DO RETURN "x"; END')
	
	def test_only_top_level_returns_are_checked(self):
		check('DEF main(): Integer DO IF TRUE DO RETURN "x"; END RETURN 1; END')
	
	def test_no_return_type_means_nil(self):
		source = check("DEF f() DO RETURN 1; END")
		self.assertIs(NIL, source.methods[0].function.return_type)
	
	def test_argument_types(self):
		program = 'DEF f(x: Integer): Integer DO RETURN x; END DEF main(): Integer DO RETURN f(%s); END'
		check(program%"1")
		self.assertRaises(SemanticError, check, program%'"s"')
		self.assertRaises(SemanticError, check, program%"1, 2")
	
	def test_recursion(self):
		check("DEF f(n: Integer): Integer DO RETURN f(n - 1); END")
	
	def test_overload_by_arity(self):
		check("DEF f(): Integer DO RETURN 0; END DEF f(a: Integer): Integer DO RETURN a; END")
		self.assertRaises(SemanticError, check, "DEF f() DO END DEF f() DO END")
	
	def test_duplicate_parameter(self):
		self.assertRaises(SemanticError, check, "DEF f(a: Integer, a: Integer) DO END")
	
	def test_methods_see_fields_but_not_each_others_locals(self):
		check("LET g: Integer = 1; DEF f(): Integer DO RETURN g; END")
		self.assertRaises(SemanticError, check, "DEF f() DO LET a = 1; END DEF g(): Integer DO RETURN a; END")
	
	def test_print_takes_one_argument(self):
		self.assertRaises(SemanticError, check, in_main("print(1, 2);"))
		self.assertRaises(SemanticError, check, in_main("print();"))

class ExpressionTests(unittest.TestCase):
	
	def type_of(self, text):
		source = check("LET x: Any = "+text+";")
		return source.fields[0].initializer.type
	
	def test_good(self):
		for text, typ in [
			("1 + 2", INTEGER),
			("1.5 * 2.0", DECIMAL),
			('"a" + "b"', STRING),
			('"a" + 1', STRING),
			("1 + \"a\"", STRING),
			("'a' + \"b\"", STRING),
			("1 < 2", BOOLEAN),
			("'a' == 'b'", BOOLEAN),
			('"a" != "b"', BOOLEAN),
			("TRUE AND FALSE OR TRUE", BOOLEAN),
			("(1 + 2)", INTEGER),
		]:
			with self.subTest(text):
				self.assertIs(typ, self.type_of(text))
	
	def test_bad(self):
		for text in [
			"1 + 1.0",
			"1 < 1.0",
			"TRUE == TRUE",
			"NIL == NIL",
			"TRUE AND 1",
			"1 OR FALSE",
			"'a' + 'b'",
			'"a" - "b"',
			"TRUE + 1",
			"(1)",
			"(x)",
			"nowhere",
			"nothing()",
		]:
			with self.subTest(text):
				self.assertRaises(SemanticError, self.type_of, text)
	
	def test_group_takes_the_inner_type(self):
		source = check("LET x: Any = (1.0 / 2.0);")
		group = source.fields[0].initializer
		self.assertIsInstance(group, syntax.Group)
		self.assertIs(DECIMAL, group.type)
		self.assertIs(DECIMAL, group.inner.type)

class ReceiverTests(unittest.TestCase):
	"""
	The language has no way to declare a type with members,
	but a host program can supply one through the scope it hands over.
	"""
	def setUp(self):
		self.point = Type("Point", "Point")
		self.x = self.point.define_field("x", INTEGER)
		self.scale = self.point.define_method("scale", [INTEGER], INTEGER, None)
		self.scope = root_scope()
		self.scope.define_variable(Variable("p", self.point))
	
	def test_field_and_method(self):
		source = check(in_main("p.x = p.scale(p.x);"), self.scope)
		assignment = source.methods[0].body[0]
		self.assertIs(self.x, assignment.receiver.variable)
		self.assertIs(self.scale, assignment.value.function)
		self.assertIs(self.point, assignment.value.receiver.type)
	
	def test_arguments_skip_the_receiver(self):
		self.assertRaises(SemanticError, check, in_main('p.scale("s");'), self.scope)
	
	def test_unknown_members(self):
		self.assertRaises(SemanticError, check, in_main("print(p.y);"), self.scope)
		self.assertRaises(SemanticError, check, in_main("p.scale();"), self.scope)
		self.assertRaises(SemanticError, check, in_main("print(p.x.y);"), self.scope)
	
	def test_scope_is_not_modified(self):
		Analyzer(self.scope).analyze(parse_text("LET q: Integer;"))
		self.assertFalse(self.scope.holds_variable("q"))


if __name__ == '__main__':
	unittest.main()
