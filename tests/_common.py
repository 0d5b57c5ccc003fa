"""
Bits every test module seems to want: a scratch directory of module files
and a fully-wired engine that talks into a string instead of the console.
"""
import io
import tempfile
from pathlib import Path

from nought.content import ContentCache
from nought.diagnostics import Report
from nought.engine import Engine
from nought.evaluator import TreeWalker
from nought.modularity import ModuleParser

class Workspace:
	""" A temporary directory full of module files, keyed by relative name. """
	def __init__(self, files:dict):
		self._tmp = tempfile.TemporaryDirectory()
		self.root = Path(self._tmp.name)
		for name, text in files.items():
			path = self.root / name
			path.parent.mkdir(parents=True, exist_ok=True)
			path.write_text(text, encoding="utf-8")

	def address(self, name:str) -> str:
		return str(self.root / name)

	def cleanup(self):
		self._tmp.cleanup()

def wire(walker=None, grammar=None):
	""" Returns (engine, parser, report, stream) with nothing persisted anywhere. """
	cache = ContentCache(None)
	stream = io.StringIO()
	report = Report(sources=cache.loaded, stream=stream)
	if grammar is None:
		parser = ModuleParser(cache, report)
	else:
		parser = ModuleParser(cache, report, grammar=grammar)
	engine = Engine(parser, walker or TreeWalker(), report)
	return engine, parser, report, stream
