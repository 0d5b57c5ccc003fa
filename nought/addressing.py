"""
Here find the rules for turning an import's specifier into an address.

Addresses are plain strings: either a filesystem path or an https URL.
Two addresses name the same module exactly when the strings are equal.
"""
import posixpath
from urllib.parse import urljoin, unquote

REMOTE_SCHEME = "https://"

def is_remote(address:str) -> bool:
	return address.startswith(REMOTE_SCHEME)

def resolve(importing:str, specifier:str) -> str:
	"""
	Relative specifiers work the way they do on a filesystem: "./", "../", or bare.
	Remote specifiers are always absolute and pass straight through.
	A relative importer yields a relative address, even one that climbs above
	the importer's own starting point; an absolute importer yields an absolute one.
	"""
	if is_remote(specifier):
		return specifier
	if is_remote(importing):
		return urljoin(importing, specifier)
	if not specifier:
		raise ValueError("An import needs somewhere to import from.")
	folder = posixpath.dirname(importing)
	return posixpath.normpath(posixpath.join(folder, unquote(specifier)))
