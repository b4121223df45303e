"""Chain Reconciler - Compares declared chains with discovered ones.

Read-only: the plan says what differs, nothing is ever changed on the host.
"""

from dataclasses import dataclass, field
from enum import Enum

from fwchain.engine.enumerator import ChainInventory
from fwchain.engine.resource import ChainResource, Ensure
from fwchain.model.chain import ChainRecord


class DriftKind(Enum):
    IN_SYNC = "in_sync"
    MISSING = "missing"  # wanted present, not found
    UNEXPECTED = "unexpected"  # wanted absent, found


@dataclass
class ResourceStatus:
    """How one declared resource compares with the host."""

    resource: ChainResource
    kind: DriftKind
    records: list[ChainRecord] = field(default_factory=list)


@dataclass
class ReconcilePlan:
    statuses: list[ResourceStatus] = field(default_factory=list)
    unmanaged: list[ChainRecord] = field(default_factory=list)

    def of_kind(self, kind: DriftKind) -> list[ResourceStatus]:
        return [s for s in self.statuses if s.kind is kind]

    @property
    def in_sync(self) -> bool:
        return all(s.kind is DriftKind.IN_SYNC for s in self.statuses)


class ChainReconciler:
    """Matches resources to an inventory by canonical name or alias."""

    def __init__(self, inventory: ChainInventory) -> None:
        self.inventory = inventory
        self.index = inventory.index()

    def plan(self, resources: list[ChainResource]) -> ReconcilePlan:
        plan = ReconcilePlan()
        matched: set[tuple] = set()

        for resource in resources:
            records = self.index.find(resource.lookup_name)
            matched.update(r.key for r in records)

            if resource.ensure is Ensure.PRESENT:
                kind = DriftKind.IN_SYNC if records else DriftKind.MISSING
            else:
                kind = DriftKind.UNEXPECTED if records else DriftKind.IN_SYNC
            plan.statuses.append(ResourceStatus(resource=resource, kind=kind, records=records))

        plan.unmanaged = [r for r in self.index.records if r.key not in matched]
        return plan
