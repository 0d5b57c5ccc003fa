from pathlib import Path
import unittest

from nought.evaluator import display
from _common import wire

base_folder = Path(__file__).parent.parent
examples = base_folder/"examples"
zoo_ok = base_folder/"zoo/ok"

def _good(path:Path) -> str:
	engine, parser, report, stream = wire()
	text = engine.render(str(path), display)
	assert report.ok(), stream.getvalue()
	return text

class ExampleSmokeTests(unittest.TestCase):
	""" Run all the examples; Test for no smoke. """

	def test_hello(self):
		self.assertEqual("Hello, world!", _good(examples/"hello.0"))

	def test_arithmetic(self):
		text = _good(examples/"arithmetic.0")
		self.assertIn("both: true", text)
		self.assertIn("fact: 120", text)
		self.assertIn("squares: 9", text)

	def test_zoo_of_ok(self):
		for name, expect in [
			("laziness", "3"),
			("higher_order", "41"),
		]:
			with self.subTest(name):
				self.assertEqual(expect, _good(zoo_ok/(name+".0")))

if __name__ == '__main__':
	unittest.main()
