"""Chain Identity Builder.

Maps (table, chain, family) tuples to ChainRecords and their canonical
names, and back. Canonical names look like `table:chain:protocol`:

    raw:PREROUTING:IPv4        table 'raw'
    NAT:POSTROUTING:IPv4       table 'nat'
    BROUTE:BROUTING:ethernet   table 'broute'
    :INPUT:IPv6                table 'filter' (the default table)

A chain may contain ':' itself, so a name is split at its FIRST delimiter
(table names never contain one) and its LAST delimiter (the protocol).
"""

import logging

from fwchain.model.chain import (
    DELIMITER,
    ChainRecord,
    Family,
    Protocol,
    render_table,
    table_from_component,
)

logger = logging.getLogger(__name__)

# Generic suffix accepted for both IP protocols
GENERIC_IP_SUFFIX = "IP"


def build(table: str, chain: str, family: Family) -> ChainRecord:
    """Build the record for a chain reported by a family's save tool."""
    return ChainRecord(
        table=table,
        chain=chain,
        protocol=family.protocol,
        provider=family.provider,
    )


def canonical_name(record: ChainRecord) -> str:
    return record.name


def parse_canonical_name(name: str) -> tuple[str, str, Protocol]:
    """Decompose a canonical name into (table, chain, protocol).

    Raises:
        ValueError: If the name has fewer than three components or an
            unknown protocol suffix.
    """
    first = name.find(DELIMITER)
    last = name.rfind(DELIMITER)
    if first == -1 or first == last:
        raise ValueError(f"Invalid canonical name {name!r}, must be TABLE:CHAIN:PROTOCOL")

    table = table_from_component(name[:first])
    chain = name[first + 1:last]
    try:
        protocol = Protocol(name[last + 1:])
    except ValueError:
        raise ValueError(f"Invalid protocol in {name!r}, must be one of IPv4, IPv6, ethernet") from None
    return table, chain, protocol


def from_canonical_name(name: str) -> ChainRecord:
    """Inverse of canonical_name."""
    table, chain, protocol = parse_canonical_name(name)
    return build(table, chain, Family.for_protocol(protocol))


def aliases(record: ChainRecord) -> list[str]:
    """Shorter names that also refer to a record.

    - `table:chain:` (protocol suffix dropped)
    - `table:chain` (protocol suffix and its delimiter dropped)
    - `table:chain:IP` for IPv4 and IPv6 records
    """
    base = DELIMITER.join((render_table(record.table), record.chain))
    names = [base + DELIMITER, base]
    if record.protocol in (Protocol.IPV4, Protocol.IPV6):
        names.append(base + DELIMITER + GENERIC_IP_SUFFIX)
    return names


class ChainIndex:
    """Lookup of discovered chains by canonical name or alias.

    Aliases are generated from the records, never parsed back, so chain
    names containing ':' cannot be mis-split during matching.
    """

    def __init__(self, records: list[ChainRecord] | None = None) -> None:
        self._records: dict[tuple, ChainRecord] = {}
        self._by_name: dict[str, ChainRecord] = {}
        self._by_alias: dict[str, list[ChainRecord]] = {}
        for record in records or []:
            self.add(record)

    def add(self, record: ChainRecord) -> bool:
        """Index a record. Returns False if its identity key is already present."""
        if record.key in self._records:
            logger.debug("Duplicate chain %s ignored", record.name)
            return False
        self._records[record.key] = record
        self._by_name[record.name] = record
        for alias in aliases(record):
            self._by_alias.setdefault(alias, []).append(record)
        return True

    @property
    def records(self) -> list[ChainRecord]:
        return list(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and bool(self.find(name))

    def find(self, name: str) -> list[ChainRecord]:
        """All records a name refers to, in enumeration order."""
        if name in self._by_name:
            return [self._by_name[name]]
        return list(self._by_alias.get(name, []))

