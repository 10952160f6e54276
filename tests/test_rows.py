import unittest
from weblang import rows
from weblang.values import LazyRecord, SelfReferentialField

class RowOperationTests(unittest.TestCase):

	def test_positional_labels(self):
		row = rows.positional("xyz")
		self.assertEqual({"0": "x", "1": "y", "2": "z"}, row)
		self.assertTrue(rows.is_positional(row))
		self.assertFalse(rows.is_positional({"0": 1, "2": 2}))
		self.assertTrue(rows.is_positional({}))

	def test_sorting_puts_positions_first_and_numerically(self):
		row = {"b": 1, "10": 2, "a": 3, "2": 4}
		self.assertEqual(["2", "10", "a", "b"], [k for k, v in rows.sorted_items(row)])
		self.assertEqual([4, 2, 3, 1], rows.sorted_values(row))

	def test_difference_and_intersection(self):
		left, right = {"a": 1, "b": 2}, {"b": 20, "c": 30}
		self.assertEqual({"a": 10}, rows.row_difference_with(lambda x: x * 10, left, right))
		self.assertEqual({"b": 22}, rows.row_intersect_with(lambda x, y: x + y, left, right))
		self.assertEqual({"a": 1, "b": 22, "c": 30}, rows.row_union_with(lambda x, y: x + y, left, right))

	def test_row_map_keeps_labels(self):
		self.assertEqual({"a": 2, "b": 4}, rows.row_map(lambda x: x * 2, {"a": 1, "b": 2}))

	def test_bracket(self):
		self.assertEqual("(x)", rows.bracket("x", True))
		self.assertEqual("x", rows.bracket("x", False))

class LazyRowTests(unittest.TestCase):

	def test_fields_compute_once_on_demand(self):
		calls = []
		def compute(init, row):
			calls.append(init)
			return init * 2
		row = rows.LazyRow({"a": 1, "b": 2}, compute)
		self.assertEqual([], calls)
		self.assertFalse(row.is_computed("a"))
		self.assertEqual(2, row["a"])
		self.assertEqual(2, row["a"])
		self.assertEqual([1], calls)
		self.assertTrue(row.is_computed("a"))
		self.assertFalse(row.is_computed("b"))

	def test_membership_does_not_compute(self):
		row = rows.LazyRow({"a": 1}, lambda init, row: 1/0)
		self.assertIn("a", row)
		self.assertNotIn("b", row)
		self.assertEqual(["a"], list(row))
		self.assertEqual(1, len(row))

	def test_a_field_may_be_its_own_row(self):
		row = rows.LazyRow({"me": None}, lambda init, row: row)
		self.assertIs(row, row["me"])
		self.assertIs(row, row["me"]["me"])

	def test_black_hole(self):
		row = LazyRecord({"a": "a"}, lambda label, row: row[label])
		with self.assertRaises(SelfReferentialField):
			row["a"]
		# The failure leaves the field as it was, so it fails the same way again.
		with self.assertRaises(SelfReferentialField):
			row["a"]

	def test_missing_label(self):
		with self.assertRaises(KeyError):
			rows.LazyRow({}, None)["x"]

	def test_identity_equality(self):
		a = rows.LazyRow({"x": 1}, lambda i, r: i)
		b = rows.LazyRow({"x": 1}, lambda i, r: i)
		self.assertEqual(a, a)
		self.assertNotEqual(a, b)

if __name__ == '__main__':
	unittest.main()
