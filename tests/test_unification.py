import unittest
from unittest import mock
from weblang.diagnostics import Report
from weblang.front_end import parse_type
from weblang.session import Session
from weblang.algebra import NUMBER, UNIT, TypeVariable, RecordType, MuType
from weblang.unification import ConstraintSolver, TypeMismatch, DivergenceError, FIRST_FRESH

def solver():
	return ConstraintSolver(Report(verbose=0))

def type_of(text):
	return Session().type_of(text)

class FlatteningTests(unittest.TestCase):

	def test_inner_tail_wins_on_collision(self):
		nested = RecordType({"x": NUMBER}, RecordType({"x": TypeVariable(0), "y": NUMBER}, UNIT))
		self.assertEqual(RecordType({"x": TypeVariable(0), "y": NUMBER}, UNIT), nested.flatten())

	def test_flattening_reaches_inside(self):
		typ = parse_type("[{a: N | {b: C}}]")
		self.assertEqual("[{a: N, b: C}]", str(typ.flatten()))

	def test_substitution_respects_binders(self):
		typ = parse_type("mu a. {t: a, u: b}")
		self.assertEqual("mu a. {t: a, u: N}", str(typ.substitute({0: NUMBER, 1: NUMBER})))
		self.assertEqual({1}, typ.free_variables())

class SolverTests(unittest.TestCase):

	def test_fresh_variables_start_above_the_letters(self):
		s = solver()
		self.assertEqual(TypeVariable(FIRST_FRESH), s.fresh())
		self.assertEqual(TypeVariable(FIRST_FRESH + 1), s.fresh())

	def test_variables_defer_to_equations(self):
		s = solver()
		s.equate(TypeVariable(0), NUMBER)
		s.equate(TypeVariable(1), TypeVariable(1))
		self.assertEqual(["TYPE EQUALITIES:", "a = N"], s.equation_log())

	def test_mismatch_names_both_sides(self):
		with self.assertRaises(TypeMismatch) as cm:
			solver().equate(parse_type("N"), parse_type("C"))
		self.assertIn("N", str(cm.exception))
		self.assertIn("C", str(cm.exception))

	def test_rows_with_exclusive_labels_share_a_tail(self):
		s = solver()
		s.equate(parse_type("{x: N | r}"), parse_type("{y: C | q}"))
		shared = str(TypeVariable(FIRST_FRESH))
		self.assertEqual(
			["TYPE EQUALITIES:", "q = {x: N | %s}" % shared, "r = {y: C | %s}" % shared],
			s.equation_log(),
		)

	def test_closed_row_lacking_a_field(self):
		with self.assertRaises(TypeMismatch):
			solver().equate(parse_type("{x: N}"), parse_type("{x: N, y: N}"))

	def test_equal_recursive_types(self):
		s = solver()
		s.equate(parse_type("mu a. {t: a}"), parse_type("mu b. {t: {t: b}}"))
		self.assertEqual(["TYPE EQUALITIES:"], s.equation_log())

	def test_bottomless_recursion_diverges(self):
		with self.assertRaises(DivergenceError):
			solver().equate(parse_type("mu a. a"), NUMBER)

	def test_solving_binds_and_substitutes(self):
		s = solver()
		s.last_type = parse_type("{x: a, y: b}")
		s.equate(TypeVariable(0), NUMBER)
		s.equate(TypeVariable(1), TypeVariable(0))
		s.solve()
		self.assertEqual("{x: N, y: N}", str(s.last_type))
		self.assertEqual(["TYPE EQUALITIES:"], s.equation_log())

	def test_occurs_check_introduces_mu(self):
		s = solver()
		s.last_type = TypeVariable(0)
		s.equate(TypeVariable(0), parse_type("{next: a}"))
		s.solve()
		self.assertIsInstance(s.last_type, MuType)
		self.assertEqual("mu a. {next: a}", s.last_type.pretty())

	def test_idempotent_at_fixpoint(self):
		s = solver()
		s.last_type = parse_type("a -> b")
		s.equate(TypeVariable(0), parse_type("[b]"))
		s.solve()
		solved = s.last_type
		s.solve()
		self.assertEqual(solved, s.last_type)
		self.assertEqual(["TYPE EQUALITIES:"], s.equation_log())

	def test_label_order_does_not_matter(self):
		s = solver()
		s.equate(TypeVariable(0), parse_type("{a: N, b: C}"))
		s.equate(TypeVariable(0), parse_type("{b: C, a: N}"))
		self.assertEqual(["TYPE EQUALITIES:", "a = {a: N, b: C}"], s.equation_log())

	def test_pass_bound(self):
		def pending():
			s = solver()
			s.equate(TypeVariable(0), NUMBER)
			s.equate(TypeVariable(1), TypeVariable(0))
			return s
		slow = pending()
		with mock.patch("weblang.unification.MAX_PASSES", 1):
			with self.assertRaises(DivergenceError) as cm:
				slow.solve()
		self.assertEqual("Maximum iterations exceeded", str(cm.exception))
		with mock.patch("weblang.unification.MAX_PASSES", 2):
			pending().solve()

	def test_failed_step_rolls_back(self):
		s = solver()
		s.equate(TypeVariable(0), NUMBER)
		s.equate(TypeVariable(0), parse_type("C"))
		before = s.equation_log()
		with self.assertRaises(TypeMismatch):
			s.solve_step()
		self.assertEqual(before, s.equation_log())

class InferenceTests(unittest.TestCase):

	def test_examples(self):
		for text, expected in [
			("1 + 2", "N"),
			("x => x", "a -> a"),
			("'c'", "C"),
			('"abc"', "[C]"),
			("[1, 2]", "[N]"),
			("(1, 'c')", "(N, C)"),
			("{a: 1, b: this.a + 1}", "{a: N, b: N}"),
			("r => r.x", "{x: a | b} -> a"),
			("(r => r.x + 1) {x: 1, y: 'c'}", "N"),
			("#some", "a -> <some: a | b>"),
			("<t: x => x + 1, f: _ => 0> (#t 1)", "N"),
			("map (x => x * 2) (&3)", "[N]"),
			("fold (acc => x => acc + x) 0", "[N] -> N"),
			("filter (x => lt (x, 3))", "[N] -> [N]"),
			("let f = x => x; f 1", "N"),
			("let (a, b) = (1, 'c'); b", "C"),
			("import anything", "a"),
			("N : 1", "N"),
			("{b: 1, a: 'c'}", "{a: C, b: N}"),
		]:
			with self.subTest(text):
				self.assertEqual(expected, type_of(text))

	def test_recursive_record(self):
		self.assertEqual("{head: N, tail: mu a. {head: N, tail: a}}", type_of("{head: 1, tail: this}"))
		self.assertEqual("N", type_of("{head: 1, tail: this}.tail.tail.head"))

	def test_sealed_polymorphism(self):
		self.assertEqual("(N, C)", type_of("let id = forall a. a -> a : x => x; (id 1, id 'c')"))

	def test_monomorphic_let(self):
		self.assertIn("Type error", type_of("let id = x => x; (id 1, id 'c')"))

	def test_failures(self):
		for text, fragment in [
			("1 + 'c'", "Type error"),
			("x + 1", "Unbound variable: x"),
			("(r => r.x) {y: 1}", "Type error"),
			("<a: x => x> (#b 1)", "Type error"),
			("mu a. a : 1", "Recursive type unfolds without end"),
			("1 +", 'Parse error at: "+"'),
		]:
			with self.subTest(text):
				self.assertIn(fragment, type_of(text))

class SessionSolvingTests(unittest.TestCase):

	def test_step_by_step(self):
		session = Session()
		raw = session.type_of("1 + 2", solve=False)
		self.assertNotEqual("N", raw)
		self.assertEqual(["TYPE EQUALITIES:", "26 = N"], session.equation_log())
		self.assertEqual("N", session.solve_step())
		self.assertEqual(["TYPE EQUALITIES:"], session.equation_log())
		self.assertEqual("N", session.solve_full())

	def test_reset_forgets(self):
		session = Session()
		session.type_of("1 + 2", solve=False)
		session.reset()
		self.assertEqual(["TYPE EQUALITIES:"], session.equation_log())
		self.assertEqual("", session.solve_full())

if __name__ == '__main__':
	unittest.main()
