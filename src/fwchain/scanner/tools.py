"""Tool Scanner - Locates firewall management executables on a host.

Absence of a tool is a normal outcome: a host may legitimately lack
ebtables or ip6tables. The locator never raises for a missing tool.
"""

import logging

from fwchain.connector.base import Connector
from fwchain.model.chain import Family
from fwchain.model.host import ToolAvailability

logger = logging.getLogger(__name__)


class ToolLocator:
    """Finds the runtime and save tool of every firewall family.

    Lookup order for each tool:
    1. `which <tool>` (the host PATH)
    2. `test -x` in the fixed sbin/bin locations, since PATH for
       non-root sessions often lacks /sbin
    """

    SEARCH_DIRS = [
        "/usr/sbin",
        "/sbin",
        "/usr/bin",
        "/bin",
    ]

    def __init__(self, connector: Connector) -> None:
        self.connector = connector

    def locate(self, name: str) -> str | None:
        """Return the path of a tool, or None if it is not installed."""
        result = self.connector.execute(["which", name], timeout=5)
        if result.success:
            path = result.stdout.strip().splitlines()[0] if result.stdout.strip() else ""
            if path.startswith("/"):
                return path

        for directory in self.SEARCH_DIRS:
            candidate = f"{directory}/{name}"
            if self.connector.execute(["test", "-x", candidate], timeout=5).success:
                return candidate

        return None

    def scan(self) -> ToolAvailability:
        """Locate every family member exactly once."""
        paths: dict[str, str | None] = {}
        for family in Family:
            for tool in family.tools:
                paths[tool] = self.locate(tool)
                if paths[tool] is None:
                    logger.debug("Tool %s not found", tool)

        availability = ToolAvailability.from_mapping(paths)
        for family in Family:
            if not availability.family_available(family):
                logger.debug("Family %s unavailable, missing %s", family.value, availability.missing(family.tools))
        return availability
