"""
This is an interpreter for the nought expression language.

{0}

For example:

    nought program.0

will evaluate program.0 and everything it imports, then print the value,
or else try to explain why not.

    nought -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

parser = argparse.ArgumentParser(
	prog="nought",
	description="Lazy, module-aware interpreter for the nought expression language.",
)
parser.add_argument("program", help="address of the main module: a file path or an https:// URL.")
parser.add_argument('-v', "--verbose", action="store_true", help="Explain failures in gory detail, and chatter about progress.")
parser.add_argument("--cache", type=Path, default=None, help="Where to keep fetched remote modules between runs.")
parser.add_argument("--no-cache", action="store_true", help="Neither read nor write the cache file.")

def cache_path(args):
	from .content import DEFAULT_CACHE_PATH
	if args.no_cache: return None
	return args.cache or DEFAULT_CACHE_PATH

def run(args) -> int:
	from .content import ContentCache
	from .diagnostics import Report
	from .engine import Engine
	from .errors import Yuck
	from .evaluator import TreeWalker, display
	from .modularity import ModuleParser
	report = Report(verbose=args.verbose)
	try:
		with ContentCache.opened(cache_path(args), report) as cache:
			report.attach(cache.loaded)
			engine = Engine(ModuleParser(cache, report), TreeWalker(), report)
			print(engine.render(args.program, display))
	except Yuck:
		assert report.sick()
		return 1
	except Exception as ex:
		report.unexpected(ex)
		return 1
	return 0

def main():
	if len(sys.argv) > 1:
		sys.exit(run(parser.parse_args()))
	else:
		print(__doc__.strip().format(parser.format_usage()))
