"""Scanner package - Collects raw host state without interpreting it."""

from fwchain.scanner.facts import HostFactsScanner
from fwchain.scanner.tools import ToolLocator

__all__ = ["HostFactsScanner", "ToolLocator"]
