"""Chain resources - Desired state declared by the user.

A resource is named like a discovered chain (`TABLE:CHAIN:PROTOCOL`) and is
validated against where built-in chains may live before a provider is
assigned to it.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from fwchain.engine.identity import GENERIC_IP_SUFFIX
from fwchain.engine.providers import ProviderSelector
from fwchain.model.chain import DELIMITER, Family, Protocol, Provider, render_table, table_from_component
from fwchain.model.host import HostFacts, ToolAvailability

BUILTIN_CHAINS = re.compile(r"^(PREROUTING|POSTROUTING|BROUTING|INPUT|FORWARD|OUTPUT)$")


class ResourceValidationError(ValueError):
    """A chain resource declaration is invalid."""


class ManifestError(ValueError):
    """A manifest file cannot be read or does not validate."""


class Ensure(Enum):
    PRESENT = "present"
    ABSENT = "absent"


class Policy(Enum):
    ACCEPT = "accept"
    DROP = "drop"
    QUEUE = "queue"
    RETURN = "return"


def split_resource_name(name: str) -> tuple[str, str, Protocol]:
    """Split a resource name into (table, chain, protocol).

    The protocol suffix may be `IPv4`, `IPv6`, `ethernet`, the generic `IP`,
    empty, or left out entirely; the last three mean IPv4. When the last
    component is not a known suffix it belongs to the chain name.

    Raises:
        ResourceValidationError: If the name has no table component.
    """
    if DELIMITER not in name:
        raise ResourceValidationError(f"Invalid name {name!r}, must be TABLE:CHAIN:PROTOCOL")

    table_part, rest = name.split(DELIMITER, 1)
    chain, suffix = rest, ""
    if DELIMITER in rest:
        head, last = rest.rsplit(DELIMITER, 1)
        if last in ("", GENERIC_IP_SUFFIX) or last in {p.value for p in Protocol}:
            chain, suffix = head, last

    if not chain:
        raise ResourceValidationError(f"Invalid name {name!r}, chain must not be empty")

    protocol = Protocol(suffix) if suffix not in ("", GENERIC_IP_SUFFIX) else Protocol.IPV4
    return table_from_component(table_part).lower(), chain, protocol


def validate_placement(table: str, chain: str, protocol: Protocol) -> None:
    """Check a chain may be declared in its table.

    Raises:
        ResourceValidationError: With the rule the declaration breaks.
    """
    if table in ("filter", "security") and chain in ("PREROUTING", "POSTROUTING", "BROUTING"):
        raise ResourceValidationError(
            f"INPUT, OUTPUT and FORWARD are the only inbuilt chains that can be used in table '{table}'"
        )
    if table == "mangle" and chain == "BROUTING":
        raise ResourceValidationError(
            "PREROUTING, POSTROUTING, INPUT, FORWARD and OUTPUT are the only inbuilt chains "
            "that can be used in table 'mangle'"
        )
    if table == "nat" and chain in ("BROUTING", "FORWARD"):
        raise ResourceValidationError(
            "PREROUTING, POSTROUTING, INPUT, and OUTPUT are the only inbuilt chains that can be used in table 'nat'"
        )
    if table == "raw" and chain in ("POSTROUTING", "BROUTING", "INPUT", "FORWARD"):
        raise ResourceValidationError("PREROUTING and OUTPUT are the only inbuilt chains in the table 'raw'")
    if table == "broute":
        if protocol is not Protocol.ETHERNET:
            raise ResourceValidationError("BROUTE is only valid with protocol 'ethernet'")
        if chain in ("PREROUTING", "POSTROUTING", "INPUT", "FORWARD", "OUTPUT"):
            raise ResourceValidationError("BROUTING is the only inbuilt chain allowed on table 'broute'")
    if chain == "BROUTING" and (protocol is not Protocol.ETHERNET or table != "broute"):
        raise ResourceValidationError(
            "BROUTING is the only inbuilt chain allowed on table 'broute' with protocol 'ethernet' "
            "i.e. 'BROUTE:BROUTING:ethernet'"
        )


@dataclass(frozen=True)
class ChainResource:
    """A validated, provider-bound chain declaration."""

    name: str
    table: str
    chain: str
    protocol: Protocol
    provider: Provider
    ensure: Ensure = Ensure.PRESENT
    policy: Policy | None = None

    @property
    def builtin(self) -> bool:
        return bool(BUILTIN_CHAINS.match(self.chain))

    @property
    def lookup_name(self) -> str:
        """The name with its table spelled as discovered chains render it.

        `filter:INPUT:IPv4` looks up `:INPUT:IPv4` and `nat:OUTPUT` looks up
        `NAT:OUTPUT`. The rest of the name is kept, so short forms stay aliases.
        """
        rest = self.name[self.name.index(DELIMITER):]
        return render_table(self.table) + rest


class ResourceFactory:
    """Materializes chain resources for one host and run.

    create() raises NoProviderSelected when the host has no usable provider.
    """

    def __init__(self, selector: ProviderSelector, facts: HostFacts, tools: ToolAvailability) -> None:
        self.selector = selector
        self.facts = facts
        self.tools = tools

    def create(
        self,
        name: str,
        ensure: Ensure | str = Ensure.PRESENT,
        policy: Policy | str | None = None,
        provider: Provider | str | None = None,
    ) -> ChainResource:
        table, chain, protocol = split_resource_name(name)
        validate_placement(table, chain, protocol)

        try:
            ensure = Ensure(ensure)
            policy = Policy(policy) if policy is not None else None
            requested = Provider(provider) if provider is not None else None
        except ValueError as e:
            raise ResourceValidationError(f"{name}: {e}") from e

        if policy is not None and not BUILTIN_CHAINS.match(chain):
            raise ResourceValidationError(f"{name}: policy can only be set on inbuilt chains")

        return ChainResource(
            name=name,
            table=table,
            chain=chain,
            protocol=protocol,
            provider=self._provider_for(protocol, requested),
            ensure=ensure,
            policy=policy,
        )

    def _provider_for(self, protocol: Protocol, requested: Provider | None) -> Provider:
        """Requested provider, else the protocol's own, else the run default."""
        default = self.selector.default(self.facts, self.tools)
        if requested is not None:
            return self.selector.select(self.facts, self.tools, requested)

        own = Family.for_protocol(protocol).provider
        if own in self.selector.suitable(self.facts, self.tools):
            return own
        return default


class ChainEntry(BaseModel):
    """One chain in a manifest."""

    name: str = Field(..., min_length=1, description="TABLE:CHAIN:PROTOCOL")
    ensure: Literal["present", "absent"] = "present"
    policy: Optional[Literal["accept", "drop", "queue", "return"]] = None
    provider: Optional[Literal["iptables_chain", "ip6tables_chain", "ebtables_chain"]] = None


class Manifest(BaseModel):
    """Desired chains for a host."""

    chains: list[ChainEntry] = Field(default_factory=list)


def load_manifest(path: Path | str) -> Manifest:
    """Load a YAML manifest with a top-level `chains:` list."""
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}") from e

    try:
        return Manifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"Invalid manifest {path}: {e}") from e


def create_resources(manifest: Manifest, factory: ResourceFactory) -> list[ChainResource]:
    return [
        factory.create(entry.name, ensure=entry.ensure, policy=entry.policy, provider=entry.provider)
        for entry in manifest.chains
    ]
