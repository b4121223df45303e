"""Provider Selector.

Decides which backend governs a chain resource. Candidates are tried in a
fixed priority order; the first whose confinement holds becomes the
default. A confinement is a plain predicate over the host facts and the
tool availability computed for the run.
"""

import logging
from dataclasses import dataclass

from fwchain.model.chain import Family, Provider
from fwchain.model.host import HostFacts, ToolAvailability

logger = logging.getLogger(__name__)

REQUIRED_KERNEL = "Linux"


class NoProviderSelected(RuntimeError):
    """No provider's confinement holds on this host."""


@dataclass(frozen=True)
class ProviderCandidate:
    """A provider together with what it needs from the host."""

    provider: Provider
    kernel: str
    commands: tuple[str, ...]

    def missing(self, tools: ToolAvailability) -> list[str]:
        return tools.missing(self.commands)

    def confined(self, facts: HostFacts, tools: ToolAvailability) -> bool:
        return facts.kernel == self.kernel and not self.missing(tools)


# Priority order
CANDIDATES = [
    ProviderCandidate(Provider.IPTABLES, REQUIRED_KERNEL, Family.IPTABLES.tools),
    ProviderCandidate(Provider.IP6TABLES, REQUIRED_KERNEL, Family.IP6TABLES.tools),
    ProviderCandidate(Provider.EBTABLES, REQUIRED_KERNEL, Family.EBTABLES.tools),
]


class ProviderSelector:
    """Selects the default provider for one reconciliation run.

    The selection is memorized for the (facts, tools) it was computed from.
    Different inputs recompute it, and reset() forgets it between runs.

    Example:
        >>> selector = ProviderSelector()
        >>> selector.default(HostFacts(kernel="Linux"), tools)
        <Provider.IPTABLES: 'iptables_chain'>
    """

    def __init__(self, candidates: list[ProviderCandidate] | None = None) -> None:
        self.candidates = list(candidates if candidates is not None else CANDIDATES)
        self._memo: tuple[HostFacts, ToolAvailability, Provider] | None = None

    def reset(self) -> None:
        """Forget the memorized default."""
        self._memo = None

    def suitable(self, facts: HostFacts, tools: ToolAvailability) -> list[Provider]:
        """Every provider whose confinement holds, in priority order."""
        return [c.provider for c in self.candidates if c.confined(facts, tools)]

    def default(self, facts: HostFacts, tools: ToolAvailability) -> Provider:
        """The first suitable provider in priority order.

        Raises:
            NoProviderSelected: If no candidate is confined to this host.
        """
        if self._memo is not None:
            memo_facts, memo_tools, provider = self._memo
            if memo_facts == facts and memo_tools == tools:
                return provider

        for candidate in self.candidates:
            if candidate.confined(facts, tools):
                logger.debug("Default provider is %s", candidate.provider.value)
                self._memo = (facts, tools, candidate.provider)
                return candidate.provider

        self._memo = None
        raise NoProviderSelected(self._explain(facts, tools))

    def select(
        self,
        facts: HostFacts,
        tools: ToolAvailability,
        requested: Provider | None = None,
    ) -> Provider:
        """Provider for a resource: the requested one if suitable, else the default."""
        if requested is None:
            return self.default(facts, tools)

        for candidate in self.candidates:
            if candidate.provider is requested:
                if candidate.confined(facts, tools):
                    return requested
                raise NoProviderSelected(self._explain(facts, tools, [candidate]))
        raise NoProviderSelected(f"Unknown provider {requested.value}")

    def _explain(
        self,
        facts: HostFacts,
        tools: ToolAvailability,
        candidates: list[ProviderCandidate] | None = None,
    ) -> str:
        reasons = []
        for candidate in candidates or self.candidates:
            if facts.kernel != candidate.kernel:
                reasons.append(f"{candidate.provider.value}: kernel {facts.kernel} is not {candidate.kernel}")
            else:
                missing = ", ".join(candidate.missing(tools))
                reasons.append(f"{candidate.provider.value}: missing {missing}")
        return "No suitable provider for firewallchain (" + "; ".join(reasons) + ")"
