"""Engine package - Identity, provider selection, enumeration and reconciliation."""

from fwchain.engine.enumerator import ChainEnumerator, ChainInventory, FamilyFailure
from fwchain.engine.identity import ChainIndex
from fwchain.engine.providers import NoProviderSelected, ProviderSelector

__all__ = [
    "ChainEnumerator",
    "ChainIndex",
    "ChainInventory",
    "FamilyFailure",
    "NoProviderSelected",
    "ProviderSelector",
]
