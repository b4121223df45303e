"""Rich Reporter Implementation."""

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from fwchain.actions.reporters.base import BaseReporter
from fwchain.engine.enumerator import ChainInventory
from fwchain.engine.reconcile import DriftKind, ReconcilePlan
from fwchain.model.chain import Family, Provider
from fwchain.model.host import HostFacts, ToolAvailability


class RichReporter(BaseReporter):
    """Generates high-fidelity terminal output using Rich."""

    def report_tools(
        self,
        facts: HostFacts,
        tools: ToolAvailability,
        provider: Provider | None,
        error: str | None = None,
    ) -> int:
        table = Table(title="Firewall Tools", show_lines=False)
        table.add_column("Family", style="bold")
        table.add_column("Tool")
        table.add_column("Path")

        for family in Family:
            for tool in family.tools:
                path = tools.path(tool)
                shown = f"[green]{escape(path)}[/]" if path else "[dim]not found[/]"
                table.add_row(family.value, tool, shown)

        self.console.print(table)
        self.console.print(f"   Kernel: {escape(facts.kernel)}   OS: {escape(facts.operatingsystem)}")

        if provider is None:
            self.console.print(Panel(escape(error or "No suitable provider"), title="[red]No provider[/]", border_style="red"))
            return 1

        self.console.print(f"   Default provider: [bold green]{provider.value}[/]")
        return 0

    def report_inventory(self, inventory: ChainInventory) -> int:
        table = Table(title=f"Chains ({len(inventory.records)})")
        table.add_column("Name", style="bold")
        table.add_column("Table")
        table.add_column("Chain")
        table.add_column("Protocol")
        table.add_column("Provider", style="dim")

        for record in inventory.records:
            table.add_row(
                escape(record.name),
                escape(record.table),
                escape(record.chain),
                record.protocol.value,
                record.provider.value,
            )
        self.console.print(table)

        for family in inventory.skipped:
            self.console.print(f"   [dim]Skipped {family.value}: tools not installed[/]")
        for failure in inventory.failures:
            self.console.print(f"   [bold red]Failed:[/] {escape(str(failure))}")

        return 0 if inventory.ok else 1

    def report_plan(self, plan: ReconcilePlan) -> int:
        table = Table(title="Chain Drift")
        table.add_column("Resource", style="bold")
        table.add_column("Ensure")
        table.add_column("Status")
        table.add_column("Matched")

        styles = {
            DriftKind.IN_SYNC: "[green]in sync[/]",
            DriftKind.MISSING: "[red]missing[/]",
            DriftKind.UNEXPECTED: "[yellow]unexpected[/]",
        }
        for status in plan.statuses:
            table.add_row(
                escape(status.resource.name),
                status.resource.ensure.value,
                styles[status.kind],
                escape(", ".join(r.name for r in status.records)) or "-",
            )
        self.console.print(table)

        if plan.unmanaged:
            self.console.print(f"   [dim]{len(plan.unmanaged)} unmanaged chain(s):[/]")
            for record in plan.unmanaged:
                self.console.print(f"      [dim]{escape(record.name)}[/]")

        if plan.in_sync:
            self.console.print("   [green][bold]PASS:[/] All declared chains are in sync.[/]")
            return 0
        return 1
