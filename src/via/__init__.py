"""
Via - compiler for a small declarative resource-definition language.

Parses ``.via`` sources into an IR of resources and generates backend model
code, request handlers and client type definitions from it.
"""

from via._version import __version__

__all__ = ["__version__"]
