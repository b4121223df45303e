"""Parser package - Converts raw save-tool output into structured data.

Parsers do NOT run commands - they structure data from scanners.
"""

from fwchain.parser.tables_save import ChainDeclaration, SaveOutputParser

__all__ = ["ChainDeclaration", "SaveOutputParser"]
