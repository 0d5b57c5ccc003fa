"""
Module source text, by address.

Remote text is fetched at most once per process, and a snapshot of what was
fetched survives between runs in a JSON file. Local files are always read fresh
from disk (once per process) so that editing them has the expected effect.
"""
import json
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import requests

from .addressing import is_remote

DEFAULT_CACHE_PATH = Path(__file__).parent / "nought_cache.json"
FETCH_TIMEOUT = 30

class ContentCache:
	"""
	Two tables: what gets persisted (remote text only) and everything
	this process has loaded so far, which diagnostics read from.
	"""
	def __init__(self, path:Optional[Path]=None, report=None):
		self.path = path
		self._report = report
		self._persisted:dict[str, str] = {}
		self.loaded:dict[str, str] = {}

	def __len__(self): return len(self._persisted)

	def _info(self, *args):
		if self._report is not None:
			self._report.info(*args)

	def load(self):
		""" Read the snapshot, if there is one. A missing file is just an empty cache. """
		if self.path is None or not self.path.exists():
			return
		with open(self.path, "r", encoding="utf-8") as fh:
			table = json.load(fh)
		if not isinstance(table, dict):
			raise ValueError("Cache file %s does not hold a JSON object." % self.path)
		self._persisted.update(table)
		self._info("Read", len(table), "cached entries from", self.path)

	def save(self):
		if self.path is None:
			return
		with open(self.path, "w", encoding="utf-8") as fh:
			json.dump(self._persisted, fh, indent=2, ensure_ascii=False)
		self._info("Saved", len(self._persisted), "cached entries to", self.path)

	def get_or_load(self, address:str) -> str:
		if address in self.loaded:
			return self.loaded[address]
		if address in self._persisted:
			text = self._persisted[address]
		elif is_remote(address):
			text = self._fetch(address)
			self._persisted[address] = text
		else:
			self._info("Loading", address)
			with open(address, "r", encoding="utf-8") as fh:
				text = fh.read()
		self.loaded[address] = text
		return text

	def text_of(self, address:str) -> str:
		""" Source text for something already loaded. Diagnostics need this. """
		return self.loaded[address]

	def _fetch(self, address:str) -> str:
		self._info("Fetching", address)
		response = requests.get(address, timeout=FETCH_TIMEOUT)
		response.raise_for_status()
		return response.text

	@classmethod
	@contextmanager
	def opened(cls, path:Optional[Path], report=None):
		""" Load on the way in; save on the way out, however we leave. """
		cache = cls(path, report)
		cache.load()
		try:
			yield cache
		finally:
			cache.save()
