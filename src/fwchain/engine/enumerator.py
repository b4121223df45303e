"""Chain Enumerator - The reconciliation read path.

Runs each available family's save tool, parses the dump and turns every
declaration into a ChainRecord. Families are processed one after another.
A failing family is recorded and skipped; it never hides another family's
chains.
"""

import logging
from dataclasses import dataclass, field

from fwchain.connector.base import Connector
from fwchain.engine import identity
from fwchain.engine.identity import ChainIndex
from fwchain.model.chain import ChainRecord, Family
from fwchain.model.host import ToolAvailability
from fwchain.parser.tables_save import SaveOutputParser

logger = logging.getLogger(__name__)


@dataclass
class FamilyFailure:
    """A save tool that could not be run or exited non-zero."""

    family: Family
    command: str
    exit_code: int
    message: str

    def __str__(self) -> str:
        return f"{self.family.value}: {self.command} exited {self.exit_code}: {self.message}"


@dataclass
class ChainInventory:
    """Everything one enumeration pass found."""

    records: list[ChainRecord] = field(default_factory=list)
    failures: list[FamilyFailure] = field(default_factory=list)
    skipped: list[Family] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def index(self) -> ChainIndex:
        return ChainIndex(self.records)

    def for_family(self, family: Family) -> list[ChainRecord]:
        return [r for r in self.records if r.protocol is family.protocol]


class ChainEnumerator:
    """Builds the current-state inventory of chains on one host.

    Example:
        >>> tools = ToolLocator(connector).scan()
        >>> for record in ChainEnumerator(connector, tools).enumerate():
        ...     print(record.name)
    """

    def __init__(
        self,
        connector: Connector,
        tools: ToolAvailability,
        families: list[Family] | None = None,
    ) -> None:
        self.connector = connector
        self.tools = tools
        self.families = list(families) if families is not None else list(Family)

    def enumerate(self) -> list[ChainRecord]:
        return self.scan().records

    def scan(self) -> ChainInventory:
        """Enumerate every available family. Records are built fresh on each call."""
        inventory = ChainInventory()
        index = ChainIndex()

        for family in self.families:
            if not self.tools.family_available(family):
                logger.debug("Skipping %s, tools unavailable", family.value)
                inventory.skipped.append(family)
                continue

            save_path = self.tools.path(family.save_tool)
            result = self.connector.execute([save_path])
            if not result.success:
                failure = FamilyFailure(
                    family=family,
                    command=result.command,
                    exit_code=result.exit_code,
                    message=result.stderr.strip() or "no output",
                )
                logger.warning("Could not enumerate %s chains: %s", family.value, failure)
                inventory.failures.append(failure)
                continue

            parser = SaveOutputParser()
            for declaration in parser.parse(result.stdout, family.protocol):
                record = identity.build(declaration.table, declaration.chain, family)
                if index.add(record):
                    inventory.records.append(record)

        return inventory
