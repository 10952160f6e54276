import unittest
from weblang import combinators as c

digit = c.fmap(int, c.sat(r"[0-9]"))

class CombinatorTests(unittest.TestCase):

	def test_sat_is_anchored_and_skips_nothing(self):
		self.assertEqual([("12", "ab")], c.sat(r"[0-9]+")("12ab"))
		self.assertEqual([], c.sat(r"[0-9]+")(" 12"))
		self.assertEqual([], c.sat(r"[0-9]+")("ab12"))

	def test_token_skips_leading_whitespace(self):
		self.assertEqual([("12", " x")], c.token(r"[0-9]+")("  \n12 x"))

	def test_pure_and_fail(self):
		self.assertEqual([(7, "abc")], c.pure(7)("abc"))
		self.assertEqual([], c.fail()("abc"))

	def test_seq_then_skip(self):
		self.assertEqual([((1, 2), "3")], c.seq(digit, digit)("123"))
		self.assertEqual([(2, "3")], c.then(digit, digit)("123"))
		self.assertEqual([(1, "3")], c.skip(digit, digit)("123"))

	def test_bind_and_app(self):
		doubled = c.bind(digit, lambda n: c.pure(n * 2))
		self.assertEqual([(6, "x")], doubled("3x"))
		plus = c.fmap(lambda n: lambda m: n + m, digit)
		self.assertEqual([(7, "")], c.app(plus, digit)("34"))

	def test_choice_collects_every_reading(self):
		p = c.choice(c.sat("a"), c.sat("ab"))
		self.assertEqual([("a", "b"), ("ab", "")], p("ab"))

	def test_biased_choice_commits_to_the_first_success(self):
		p = c.biased_choice(c.sat("a"), c.sat("ab"))
		self.assertEqual([("a", "b")], p("ab"))
		self.assertEqual([("ab", "")], c.biased_choice(c.fail(), c.sat("ab"))("ab"))
		self.assertEqual([], c.biased_choice(c.sat("x"), c.sat("y"))("ab"))

	def test_many_is_greedy_and_may_be_empty(self):
		self.assertEqual([([1, 2, 3], "x")], c.many(digit)("123x"))
		self.assertEqual([([], "x")], c.many(digit)("x"))
		self.assertEqual([], c.many1(digit)("x"))

	def test_many_stops_when_nothing_is_consumed(self):
		self.assertEqual([([], "x")], c.many(c.sat(r"[0-9]*"))("x"))

	def test_separated_lists(self):
		comma_digits = c.sep_by(c.literal(","), digit)
		self.assertEqual([([1, 2, 3], "")], comma_digits("1,2,3"))
		self.assertEqual([([], "x")], comma_digits("x"))
		self.assertEqual([([1], ",")], comma_digits("1,"))

	def test_optional_supplies_a_default(self):
		self.assertEqual([("z", "x")], c.optional(c.sat("y"), "z")("x"))

	def test_brackets(self):
		self.assertEqual([(5, "")], c.brackets("(", c.then(c.WHITESPACE, digit), ")")("( 5 )"))

	def test_lazy_defers_construction(self):
		made = []
		def make():
			made.append(1)
			return digit
		p = c.lazy(make)
		self.assertEqual([], made)
		self.assertEqual([(4, "")], p("4"))
		self.assertEqual([1], made)

class ParseAllTests(unittest.TestCase):

	def test_whole_input_with_trailing_space(self):
		self.assertEqual(7, c.parse_all(digit, "7  \n"))

	def test_no_reading(self):
		with self.assertRaises(c.NoParse) as cm:
			c.parse_all(digit, "x")
		self.assertEqual("Parse error", str(cm.exception))

	def test_partial_reading_names_the_remainder(self):
		with self.assertRaises(c.PartialParse) as cm:
			c.parse_all(digit, "1  +")
		self.assertEqual('Parse error at: "+"', str(cm.exception))
		self.assertEqual("+", cm.exception.remainder)
		self.assertEqual(3, cm.exception.offset)

	def test_ambiguity_is_never_resolved_silently(self):
		ab = c.choice(c.sat("ab"), c.fmap(lambda p: p[0]+p[1], c.seq(c.sat("a"), c.sat("b"))))
		with self.assertRaises(c.AmbiguousParse) as cm:
			c.parse_all(ab, "ab")
		self.assertEqual(2, len(cm.exception.readings))

	def test_failures_share_a_base_class(self):
		for ex in c.NoParse, c.PartialParse, c.AmbiguousParse:
			with self.subTest(ex.__name__):
				self.assertTrue(issubclass(ex, c.ParseFailure))

if __name__ == '__main__':
	unittest.main()
