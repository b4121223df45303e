"""Plain Text Reporter Implementation."""

from fwchain.actions.reporters.base import BaseReporter
from fwchain.engine.enumerator import ChainInventory
from fwchain.engine.reconcile import ReconcilePlan
from fwchain.model.chain import Family, Provider
from fwchain.model.host import HostFacts, ToolAvailability


class PlainReporter(BaseReporter):
    """Generates clean, text-only output, one item per line."""

    def _line(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)

    def report_tools(
        self,
        facts: HostFacts,
        tools: ToolAvailability,
        provider: Provider | None,
        error: str | None = None,
    ) -> int:
        for family in Family:
            for tool in family.tools:
                self._line(f"{tool}: {tools.path(tool) or 'not found'}")
        self._line(f"kernel: {facts.kernel}")
        self._line(f"operatingsystem: {facts.operatingsystem}")
        if provider is None:
            self._line(f"provider: none ({error})")
            return 1
        self._line(f"provider: {provider.value}")
        return 0

    def report_inventory(self, inventory: ChainInventory) -> int:
        for record in inventory.records:
            self._line(record.name)
        for failure in inventory.failures:
            self._line(f"ERROR {failure}")
        return 0 if inventory.ok else 1

    def report_plan(self, plan: ReconcilePlan) -> int:
        for status in plan.statuses:
            self._line(f"{status.kind.value.upper()} {status.resource.name}")
        for record in plan.unmanaged:
            self._line(f"UNMANAGED {record.name}")
        return 0 if plan.in_sync else 1
