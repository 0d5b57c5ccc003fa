import io
import unittest

from nought.diagnostics import (
	Report, Kind, row_col, find_term, syntax_error_offset,
	SEMANTIC_HIGHLIGHT, SYNTAX_HIGHLIGHT, PLAIN,
)
from boozetools.support.failureprone import SourceText

from nought.errors import ParseFault

ADDRESS = "/src/main.0"

def _report(text, verbose=False):
	stream = io.StringIO()
	return Report(verbose=verbose, sources={ADDRESS: text}, stream=stream), stream

class PositionTests(unittest.TestCase):

	def test_row_col_is_one_based(self):
		text = "ab\ncd\n"
		self.assertEqual((1, 1), row_col(SourceText(text), 0))
		self.assertEqual((1, 3), row_col(SourceText(text), 2))
		self.assertEqual((2, 2), row_col(SourceText(text), 4))
		self.assertEqual((3, 1), row_col(SourceText(text), len(text)))

	def test_find_whole_words_only(self):
		text = "foobar = 1\nx = foo + 2"
		self.assertEqual(text.index("foo +"), find_term(text, "foo"))
		self.assertIsNone(find_term(text, "fo"))

	def test_special_characters_are_escaped(self):
		text = "a = b.c + 1"
		self.assertEqual(text.index("+"), find_term(text, "+"))
		self.assertIsNone(find_term("a = bxc", "b.c"))

	def test_hint_wins_when_it_sits_on_the_term(self):
		text = "x = 1 + 2 + 3"
		self.assertEqual(10, find_term(text, "+", near=10))
		self.assertEqual(6, find_term(text, "+", near=3))

	def test_missing_closing_delimiter_points_at_end_of_line(self):
		text = "(1 + (2 * 3)"
		self.assertEqual(len(text), syntax_error_offset(text, text, ""))

	def test_trailing_blank_lines_and_spaces_do_not_count(self):
		text = "x = [1, 2,\n  3   \n\n   \n"
		position = syntax_error_offset(text, text, "")
		self.assertEqual((2, 4), row_col(SourceText(text), position))

	def test_naive_position_prefers_the_shortest_rest(self):
		text = "x = 1\ny = = 2"
		self.assertEqual(text.index("= 2"), syntax_error_offset(text, "y = = 2", "= 2"))
		self.assertEqual(text.index("y ="), syntax_error_offset(text, "y = = 2", None))

	def test_unterminated_string(self):
		text = 'x = "abc\n'
		self.assertEqual(8, syntax_error_offset(text, text, ""))

	def test_stray_closer_on_the_last_line(self):
		text = "x = f(\n  1, [2)\n"
		position = syntax_error_offset(text, text, "")
		self.assertEqual((2, 8), row_col(SourceText(text), position))

class ReportTests(unittest.TestCase):

	def test_undefined_name(self):
		report, stream = _report("foobar = 1\nx = foo + 2\n")
		report.undefined_name(ADDRESS, "foo", ["bar", "baz"])
		lines = stream.getvalue().splitlines()
		self.assertEqual("Error: Name not found: foo", lines[0])
		self.assertEqual(ADDRESS, lines[1])
		self.assertEqual("2:5: x = " + SEMANTIC_HIGHLIGHT + "foo" + PLAIN + " + 2", lines[2])
		self.assertEqual(" " * 9 + "bar", lines[3])
		self.assertEqual(" " * 9 + "baz", lines[4])
		self.assertEqual([Kind.SEMANTIC_NAMED], report.kinds)

	def test_generic_falls_back_when_the_term_is_absent(self):
		report, stream = _report("1 + 2")
		report.semantic_error(ADDRESS, "Something odd.", "nowhere", ["more detail"])
		self.assertEqual("Error: Something odd.\n%s\nmore detail\n" % ADDRESS, stream.getvalue())
		self.assertEqual([Kind.SEMANTIC_GENERIC], report.kinds)

	def test_plain_error(self):
		report, stream = _report("1")
		report.plain_error(ADDRESS, "Just a message.")
		self.assertEqual("Error: Just a message.\n%s\n" % ADDRESS, stream.getvalue())
		self.assertEqual([Kind.SEMANTIC_MESSAGE], report.kinds)

	def test_syntax_error_highlights_one_character(self):
		text = "x = 1\ny = = 2"
		report, stream = _report(text)
		report.syntax_error(ADDRESS, "y = = 2", "= 2")
		lines = stream.getvalue().splitlines()
		self.assertEqual("Syntax error.", lines[0])
		self.assertEqual("2:5: y = " + SYNTAX_HIGHLIGHT + "=" + PLAIN + " 2", lines[2])
		self.assertEqual([Kind.SYNTAX], report.kinds)

	def test_carriage_returns_stay_out_of_the_picture(self):
		text = "x = 1\r\ny = = 2\r\n"
		report, stream = _report(text)
		report.syntax_error(ADDRESS, "y = = 2\r\n", "= 2\r\n")
		lines = stream.getvalue().split("\n")
		self.assertEqual("2:5: y = " + SYNTAX_HIGHLIGHT + "=" + PLAIN + " 2", lines[2])

	def test_syntax_error_past_the_end_of_the_line(self):
		text = "(1 + (2 * 3)"
		report, stream = _report(text)
		report.syntax_error(ADDRESS, text, "")
		self.assertIn("1:13: (1 + (2 * 3)" + SYNTAX_HIGHLIGHT + " " + PLAIN, stream.getvalue())

	def test_internal_error_hides_the_stack_unless_verbose(self):
		fault = ParseFault("transformer blew up", "Traceback (most recent call last):\n  ...")
		report, stream = _report("")
		report.internal_error(ADDRESS, fault)
		self.assertEqual("Error: transformer blew up\n%s\n" % ADDRESS, stream.getvalue())
		report, stream = _report("", verbose=True)
		report.internal_error(ADDRESS, fault)
		self.assertIn("Traceback", stream.getvalue())
		self.assertEqual([Kind.INTERNAL], report.kinds)

	def test_info_only_when_verbose(self):
		report, stream = _report("")
		report.info("Loading", ADDRESS)
		self.assertEqual("", stream.getvalue())
		report, stream = _report("", verbose=True)
		report.info("Loading", ADDRESS)
		self.assertEqual("Loading %s\n" % ADDRESS, stream.getvalue())
		self.assertTrue(report.ok())

	def test_unexpected(self):
		report, stream = _report("")
		report.unexpected(OSError("disk on fire"))
		self.assertEqual("Error: disk on fire\n", stream.getvalue())
		try:
			raise OSError("disk on fire")
		except OSError as ex:
			report, stream = _report("", verbose=True)
			report.unexpected(ex)
		self.assertIn("Traceback", stream.getvalue())

if __name__ == '__main__':
	unittest.main()
