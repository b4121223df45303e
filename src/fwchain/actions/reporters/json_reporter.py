"""JSON Reporter Implementation."""

import json

from fwchain.actions.reporters.base import BaseReporter
from fwchain.engine.enumerator import ChainInventory
from fwchain.engine.reconcile import ReconcilePlan
from fwchain.model.chain import ChainRecord, Provider
from fwchain.model.host import HostFacts, ToolAvailability


def _record(record: ChainRecord) -> dict:
    return {
        "name": record.name,
        "table": record.table,
        "chain": record.chain,
        "protocol": record.protocol.value,
        "provider": record.provider.value,
    }


class JsonReporter(BaseReporter):
    """Generates machine-readable JSON output."""

    def _dump(self, data: object) -> None:
        # Chain names may contain '[' so rich markup must stay off
        self.console.print(json.dumps(data, indent=2), markup=False, highlight=False, soft_wrap=True)

    def report_tools(
        self,
        facts: HostFacts,
        tools: ToolAvailability,
        provider: Provider | None,
        error: str | None = None,
    ) -> int:
        self._dump({
            "facts": {"kernel": facts.kernel, "operatingsystem": facts.operatingsystem},
            "tools": tools.as_dict(),
            "families": [f.value for f in tools.available_families()],
            "provider": provider.value if provider else None,
            "error": error,
        })
        return 0 if provider else 1

    def report_inventory(self, inventory: ChainInventory) -> int:
        self._dump({
            "chains": [_record(r) for r in inventory.records],
            "skipped": [f.value for f in inventory.skipped],
            "failures": [
                {"family": f.family.value, "command": f.command, "exit_code": f.exit_code, "message": f.message}
                for f in inventory.failures
            ],
        })
        return 0 if inventory.ok else 1

    def report_plan(self, plan: ReconcilePlan) -> int:
        self._dump({
            "resources": [
                {
                    "name": s.resource.name,
                    "ensure": s.resource.ensure.value,
                    "provider": s.resource.provider.value,
                    "status": s.kind.value,
                    "matched": [r.name for r in s.records],
                }
                for s in plan.statuses
            ],
            "unmanaged": [r.name for r in plan.unmanaged],
        })
        return 0 if plan.in_sync else 1
