import io
import json
import unittest
from contextlib import redirect_stdout, redirect_stderr
from unittest import mock

from nought import cmdline
from nought.content import DEFAULT_CACHE_PATH
from _common import Workspace

class CommandLineTests(unittest.TestCase):
	files = {
		"main.0": 'lib "./lib.0"\nlib.double(lib.base)\n',
		"lib.0": "base = 21\ndouble = x => x * 2\n{ base: base, double: double }\n",
		"broken.0": "x = 1\nx + nope\n",
		"remote.0": 'far "https://example.com/far.0"\nfar + 1\n',
	}

	def setUp(self):
		self.workspace = Workspace(self.files)
		self.cache = self.workspace.root / "cache.json"

	def tearDown(self):
		self.workspace.cleanup()

	def run_with(self, *argv):
		args = cmdline.parser.parse_args(list(argv))
		out, err = io.StringIO(), io.StringIO()
		with redirect_stdout(out), redirect_stderr(err):
			code = cmdline.run(args)
		return code, out.getvalue(), err.getvalue()

	def test_success_prints_the_value(self):
		code, out, err = self.run_with(self.workspace.address("main.0"), "--cache", str(self.cache))
		self.assertEqual(0, code)
		self.assertEqual("42\n", out)
		self.assertEqual("", err)

	def test_failure_is_reported_and_cache_still_saved(self):
		code, out, err = self.run_with(self.workspace.address("broken.0"), "--cache", str(self.cache))
		self.assertEqual(1, code)
		self.assertEqual("", out)
		self.assertIn("Error: Name not found: nope", err)
		self.assertIn("2:5:", err)
		self.assertTrue(self.cache.exists())
		self.assertEqual({}, json.loads(self.cache.read_text(encoding="utf-8")))

	def test_missing_file_is_unexpected(self):
		code, out, err = self.run_with(self.workspace.address("absent.0"), "--no-cache")
		self.assertEqual(1, code)
		self.assertTrue(err.startswith("Error: "))
		self.assertNotIn("Traceback", err)

	def test_verbose_chatters_and_shows_tracebacks(self):
		code, out, err = self.run_with(self.workspace.address("absent.0"), "--no-cache", "-v")
		self.assertEqual(1, code)
		self.assertIn("Loading", err)
		self.assertIn("Traceback", err)

	def test_remote_text_is_persisted(self):
		response = mock.Mock(text="41\n")
		with mock.patch("nought.content.requests.get", return_value=response) as get:
			code, out, err = self.run_with(self.workspace.address("remote.0"), "--cache", str(self.cache))
			self.assertEqual(0, code)
			self.assertEqual("42\n", out)
			get.assert_called_once()
			code, out, err = self.run_with(self.workspace.address("remote.0"), "--cache", str(self.cache))
			self.assertEqual("42\n", out)
			get.assert_called_once()
		table = json.loads(self.cache.read_text(encoding="utf-8"))
		self.assertEqual({"https://example.com/far.0": "41\n"}, table)

	def test_cache_path_options(self):
		args = cmdline.parser.parse_args(["x.0"])
		self.assertEqual(DEFAULT_CACHE_PATH, cmdline.cache_path(args))
		args = cmdline.parser.parse_args(["x.0", "--no-cache"])
		self.assertIsNone(cmdline.cache_path(args))
		args = cmdline.parser.parse_args(["x.0", "--cache", str(self.cache)])
		self.assertEqual(self.cache, cmdline.cache_path(args))

if __name__ == '__main__':
	unittest.main()
