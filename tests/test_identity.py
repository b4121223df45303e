"""Tests for canonical chain names and alias matching."""

import pytest

from conftest import PUNCTUATION_CHAIN

from fwchain.engine import identity
from fwchain.engine.identity import ChainIndex
from fwchain.model.chain import ChainRecord, Family, Protocol, Provider


class TestBuild:
    def test_family_sets_protocol_and_provider(self):
        record = identity.build("raw", "PREROUTING", Family.IP6TABLES)

        assert record.protocol is Protocol.IPV6
        assert record.provider is Provider.IP6TABLES
        assert record.key == ("raw", "PREROUTING", Protocol.IPV6)

    @pytest.mark.parametrize(
        "table, chain, family, expected",
        [
            ("raw", "PREROUTING", Family.IPTABLES, "raw:PREROUTING:IPv4"),
            ("nat", "POSTROUTING", Family.IPTABLES, "NAT:POSTROUTING:IPv4"),
            ("filter", "INPUT", Family.IP6TABLES, ":INPUT:IPv6"),
            ("broute", "BROUTING", Family.EBTABLES, "BROUTE:BROUTING:ethernet"),
            ("filter", "filterdrop", Family.EBTABLES, ":filterdrop:ethernet"),
        ],
    )
    def test_canonical_name(self, table, chain, family, expected):
        record = identity.build(table, chain, family)

        assert identity.canonical_name(record) == expected
        assert str(record) == expected

    def test_default_table_is_empty_not_none(self):
        record = identity.build("filter", "INPUT", Family.EBTABLES)

        assert record.name.split(":")[0] == ""


class TestParseCanonicalName:
    def test_round_trip_with_delimiter_in_chain(self):
        record = identity.build("filter", PUNCTUATION_CHAIN, Family.IPTABLES)

        assert record.name == ":" + PUNCTUATION_CHAIN + ":IPv4"
        assert identity.parse_canonical_name(record.name) == ("filter", PUNCTUATION_CHAIN, Protocol.IPV4)
        assert identity.from_canonical_name(record.name) == record

    def test_round_trip_renamed_tables(self):
        for table in ("nat", "broute", "mangle", "security"):
            record = identity.build(table, "X", Family.EBTABLES)
            assert identity.from_canonical_name(record.name) == record

    @pytest.mark.parametrize("name", ["INPUT", "filter:INPUT", "raw:PREROUTING:IPv5"])
    def test_invalid_names(self, name):
        with pytest.raises(ValueError):
            identity.parse_canonical_name(name)


class TestAliases:
    def test_ip_record_aliases(self):
        record = identity.build("raw", "PREROUTING", Family.IPTABLES)

        assert identity.aliases(record) == ["raw:PREROUTING:", "raw:PREROUTING", "raw:PREROUTING:IP"]

    def test_ethernet_record_has_no_generic_ip_alias(self):
        record = identity.build("filter", "INPUT", Family.EBTABLES)

        assert ":INPUT:IP" not in identity.aliases(record)

    def test_aliases_match_same_record(self):
        record = identity.build("filter", PUNCTUATION_CHAIN, Family.IPTABLES)
        index = ChainIndex([record])

        for name in [record.name, *identity.aliases(record)]:
            assert record in index.find(name)


class TestChainIndex:
    def _records(self) -> list[ChainRecord]:
        return [
            identity.build("filter", "INPUT", Family.IP6TABLES),
            identity.build("filter", "INPUT", Family.IPTABLES),
            identity.build("filter", "INPUT", Family.EBTABLES),
        ]

    def test_exact_name_finds_one(self):
        index = ChainIndex(self._records())

        assert [r.protocol for r in index.find(":INPUT:IPv6")] == [Protocol.IPV6]
        assert ":INPUT:ethernet" in index
        assert ":OUTPUT:IPv4" not in index

    def test_shared_alias_finds_all(self):
        index = ChainIndex(self._records())

        assert len(index.find(":INPUT:")) == 3
        assert len(index.find(":INPUT:IP")) == 2
        assert [r.protocol for r in index.find(":INPUT")] == [Protocol.IPV6, Protocol.IPV4, Protocol.ETHERNET]
        assert index.find(":nope") == []

    def test_duplicate_key_is_ignored(self):
        index = ChainIndex()

        assert index.add(identity.build("raw", "OUTPUT", Family.IPTABLES)) is True
        assert index.add(identity.build("raw", "OUTPUT", Family.IPTABLES)) is False
        assert len(index) == 1
