"""
kbimport - Import documentation trees into a knowledge base.

Reads a tutorial project's table of contents, imports every referenced
markdown file as a knowledge record and mirrors its local images into
managed storage. Everything imported can be rolled back.
"""

from .core import KnowledgeImporter
from .summary import parse_summary

try:
    from importlib.metadata import version

    __version__ = version("kbimport")
except Exception:
    __version__ = "0.0.0"

__all__ = ["KnowledgeImporter", "parse_summary"]
