"""Chain model dataclasses - Firewall chains as discovered on a host."""

from dataclasses import dataclass
from enum import Enum


DELIMITER = ":"

# Tables whose name is rendered differently inside a canonical name.
# `filter` is the implicit default table of every family and renders empty.
TABLE_ALIASES = {
    "filter": "",
    "nat": "NAT",
    "broute": "BROUTE",
}
TABLE_NAMES = {rendered: table for table, rendered in TABLE_ALIASES.items()}


class Protocol(Enum):
    """Protocol a chain filters, used as the canonical name suffix."""

    IPV4 = "IPv4"
    IPV6 = "IPv6"
    ETHERNET = "ethernet"


class Provider(Enum):
    """Backend governing a chain resource."""

    IPTABLES = "iptables_chain"
    IP6TABLES = "ip6tables_chain"
    EBTABLES = "ebtables_chain"


class Family(Enum):
    """Firewall tool family.

    Each family owns a runtime tool and a save tool, filters exactly one
    protocol and is governed by exactly one provider.
    """

    IPTABLES = "iptables"
    IP6TABLES = "ip6tables"
    EBTABLES = "ebtables"

    @property
    def tool(self) -> str:
        return self.value

    @property
    def save_tool(self) -> str:
        return f"{self.value}-save"

    @property
    def tools(self) -> tuple[str, str]:
        """Tools that must both resolve for the family to be usable."""
        return (self.tool, self.save_tool)

    @property
    def protocol(self) -> Protocol:
        return _FAMILY_PROTOCOLS[self]

    @property
    def provider(self) -> Provider:
        return _FAMILY_PROVIDERS[self]

    @classmethod
    def for_protocol(cls, protocol: Protocol) -> "Family":
        for family, proto in _FAMILY_PROTOCOLS.items():
            if proto is protocol:
                return family
        raise ValueError(f"No family filters protocol {protocol!r}")


_FAMILY_PROTOCOLS = {
    Family.IPTABLES: Protocol.IPV4,
    Family.IP6TABLES: Protocol.IPV6,
    Family.EBTABLES: Protocol.ETHERNET,
}

_FAMILY_PROVIDERS = {
    Family.IPTABLES: Provider.IPTABLES,
    Family.IP6TABLES: Provider.IP6TABLES,
    Family.EBTABLES: Provider.EBTABLES,
}


def render_table(table: str) -> str:
    """Render a table name as the first component of a canonical name."""
    return TABLE_ALIASES.get(table, table)


def table_from_component(component: str) -> str:
    """Inverse of render_table."""
    return TABLE_NAMES.get(component, component)


@dataclass(frozen=True)
class ChainRecord:
    """A chain discovered in one enumeration pass.

    Attributes:
        table: Table name as printed by the save tool (e.g. 'filter', 'nat').
        chain: Chain name, verbatim. May contain any non-whitespace
            character, including the ':' delimiter.
        protocol: Protocol implied by the family that reported the chain.
        provider: Backend governing the chain.
    """

    table: str
    chain: str
    protocol: Protocol
    provider: Provider

    @property
    def key(self) -> tuple[str, str, Protocol]:
        """Identity key, unique within one enumeration pass."""
        return (self.table, self.chain, self.protocol)

    @property
    def family(self) -> Family:
        return Family.for_protocol(self.protocol)

    @property
    def name(self) -> str:
        """Canonical name: `table:chain:protocol`."""
        return DELIMITER.join((render_table(self.table), self.chain, self.protocol.value))

    def __str__(self) -> str:
        return self.name
