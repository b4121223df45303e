"""Base Reporter Interface."""

from abc import ABC, abstractmethod

from rich.console import Console

from fwchain.engine.enumerator import ChainInventory
from fwchain.engine.reconcile import ReconcilePlan
from fwchain.model.chain import Provider
from fwchain.model.host import HostFacts, ToolAvailability


class BaseReporter(ABC):
    """Abstract base class for all reporters.

    report_* methods that judge the host return the process exit code.
    """

    def __init__(self, console: Console) -> None:
        self.console = console

    @abstractmethod
    def report_tools(
        self,
        facts: HostFacts,
        tools: ToolAvailability,
        provider: Provider | None,
        error: str | None = None,
    ) -> int:
        """Report tool availability and the default provider."""
        pass

    @abstractmethod
    def report_inventory(self, inventory: ChainInventory) -> int:
        """Report the discovered chains."""
        pass

    @abstractmethod
    def report_plan(self, plan: ReconcilePlan) -> int:
        """Report how declared chains compare with the host."""
        pass
