"""Model package - Core data structures for fwchain."""

from fwchain.model.chain import (
    DELIMITER,
    ChainRecord,
    Family,
    Protocol,
    Provider,
)
from fwchain.model.host import HostFacts, ToolAvailability

__all__ = [
    "DELIMITER",
    "ChainRecord",
    "Family",
    "HostFacts",
    "Protocol",
    "Provider",
    "ToolAvailability",
]
