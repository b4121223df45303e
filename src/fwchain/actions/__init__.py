"""Actions package - Output produced on behalf of the CLI.

Every action is read-only: fwchain never changes firewall state.
"""

from fwchain.actions.reporters import get_reporter

__all__ = ["get_reporter"]
