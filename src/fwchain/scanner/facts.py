"""Facts Scanner - Collects the host facts used for provider confinement."""

from fwchain.connector.base import Connector
from fwchain.model.host import HostFacts


class HostFactsScanner:
    """Scanner for kernel and operating system facts."""

    def __init__(self, connector: Connector) -> None:
        self.connector = connector

    def scan(self) -> HostFacts:
        return HostFacts(
            kernel=self.get_kernel(),
            operatingsystem=self.get_operatingsystem(),
        )

    def get_kernel(self) -> str:
        """Kernel name as reported by `uname -s` (e.g. 'Linux')."""
        result = self.connector.execute(["uname", "-s"], timeout=5)
        if result.success and result.stdout.strip():
            return result.stdout.strip()
        return "Unknown"

    def get_operatingsystem(self) -> str:
        """Operating system name, first word of NAME= in /etc/os-release."""
        content = self.connector.read_file("/etc/os-release")
        if not content:
            return "Unknown"

        for line in content.split("\n"):
            if line.startswith("NAME="):
                name = line.split("=", 1)[1].strip().strip('"')
                if name:
                    return name.split()[0]
        return "Unknown"
