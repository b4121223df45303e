"""Pytest configuration and fixtures for fwchain tests."""

import shlex

import pytest

from fwchain.connector.base import CommandResult, Connector
from fwchain.model.chain import Family
from fwchain.model.host import HostFacts, ToolAvailability


EBTABLES_SAVE = """
  *broute
  :BROUTING ACCEPT
  :broute ACCEPT

  *filter
  :INPUT ACCEPT
  :FORWARD ACCEPT
  :OUTPUT ACCEPT
  :filter ACCEPT
  :filterdrop DROP
  :filterreturn RETURN

  *nat
  :PREROUTING ACCEPT
  :OUTPUT ACCEPT
  :POSTROUTING ACCEPT
  """

IPTABLES_SAVE = """
  # Generated by iptables-save v1.4.9 on Mon Jan  2 01:20:06 2012
  *raw
  :PREROUTING ACCEPT [12:1780]
  :OUTPUT ACCEPT [19:1159]
  :raw - [0:0]
  COMMIT
  # Completed on Mon Jan  2 01:20:06 2012
  # Generated by iptables-save v1.4.9 on Mon Jan  2 01:20:06 2012
  *mangle
  :PREROUTING ACCEPT [12:1780]
  :INPUT ACCEPT [12:1780]
  :FORWARD ACCEPT [0:0]
  :OUTPUT ACCEPT [19:1159]
  :POSTROUTING ACCEPT [19:1159]
  :mangle - [0:0]
  COMMIT
  # Completed on Mon Jan  2 01:20:06 2012
  # Generated by iptables-save v1.4.9 on Mon Jan  2 01:20:06 2012
  *nat
  :PREROUTING ACCEPT [2242:639750]
  :OUTPUT ACCEPT [5176:326206]
  :POSTROUTING ACCEPT [5162:325382]
  COMMIT
  # Completed on Mon Jan  2 01:20:06 2012
  # Generated by iptables-save v1.4.9 on Mon Jan  2 01:20:06 2012
  *filter
  :INPUT ACCEPT [0:0]
  :FORWARD DROP [0:0]
  :OUTPUT ACCEPT [5673:420879]
  :$5()*&%'"^$):  - [0:0]
  COMMIT
  # Completed on Mon Jan  2 01:20:06 2012
  """

IP6TABLES_SAVE = """
  # Generated by ip6tables-save v1.4.9 on Mon Jan  2 01:31:39 2012
  *raw
  :PREROUTING ACCEPT [2173:489241]
  :OUTPUT ACCEPT [0:0]
  :ff - [0:0]
  COMMIT
  # Completed on Mon Jan  2 01:31:39 2012
  # Generated by ip6tables-save v1.4.9 on Mon Jan  2 01:31:39 2012
  *mangle
  :PREROUTING ACCEPT [2301:518373]
  :INPUT ACCEPT [0:0]
  :FORWARD ACCEPT [0:0]
  :OUTPUT ACCEPT [0:0]
  :POSTROUTING ACCEPT [0:0]
  :ff - [0:0]
  COMMIT
  # Completed on Mon Jan  2 01:31:39 2012
  # Generated by ip6tables-save v1.4.9 on Mon Jan  2 01:31:39 2012
  *filter
  :INPUT ACCEPT [0:0]
  :FORWARD DROP [0:0]
  :OUTPUT ACCEPT [20:1292]
  :test - [0:0]
  COMMIT
  # Completed on Mon Jan  2 01:31:39 2012
  """

PUNCTUATION_CHAIN = """$5()*&%'"^$):"""

ALL_TOOLS = {
    "iptables": "/sbin/iptables",
    "iptables-save": "/sbin/iptables-save",
    "ip6tables": "/sbin/ip6tables",
    "ip6tables-save": "/sbin/ip6tables-save",
    "ebtables": "/sbin/ebtables",
    "ebtables-save": "/sbin/ebtables-save",
}

OS_RELEASE = 'PRETTY_NAME="Debian GNU/Linux 12 (bookworm)"\nNAME="Debian GNU/Linux"\nVERSION_ID="12"\n'


class FakeHost(Connector):
    """In-memory host answering the commands fwchain runs.

    Args:
        binaries: Tool name -> installed path.
        outputs: Command path -> stdout, or a CommandResult for failures.
        on_path: Tools `which` can see. Defaults to every installed tool.
    """

    def __init__(
        self,
        binaries: dict[str, str] | None = None,
        outputs: dict[str, str | CommandResult] | None = None,
        on_path: set[str] | None = None,
        kernel: str = "Linux",
        os_release: str | None = OS_RELEASE,
    ) -> None:
        self.binaries = dict(binaries or {})
        self.outputs = dict(outputs or {})
        self.on_path = set(self.binaries) if on_path is None else on_path
        self.kernel = kernel
        self.os_release = os_release
        self.commands: list[str] = []

    def _result(self, command: str, stdout: str = "", exit_code: int = 0) -> CommandResult:
        return CommandResult(command=command, stdout=stdout, stderr="", exit_code=exit_code)

    def run(self, command: str, timeout: float | None = None) -> CommandResult:
        self.commands.append(command)
        argv = shlex.split(command)

        if argv[0] == "which":
            name = argv[1]
            if name in self.on_path and name in self.binaries:
                return self._result(command, self.binaries[name] + "\n")
            return self._result(command, exit_code=1)
        if argv[0] == "test":
            return self._result(command, exit_code=0 if argv[2] in self.binaries.values() else 1)
        if argv == ["uname", "-s"]:
            return self._result(command, self.kernel + "\n")
        if argv == ["cat", "/etc/os-release"]:
            if self.os_release is None:
                return self._result(command, exit_code=1)
            return self._result(command, self.os_release)

        output = self.outputs.get(argv[0])
        if isinstance(output, CommandResult):
            return output
        if output is not None:
            return self._result(command, output)
        return CommandResult(command=command, stdout="", stderr=f"{argv[0]}: not found", exit_code=127)


def tools_for(*families: Family) -> ToolAvailability:
    """Availability with exactly the tools of the given families."""
    paths = {tool: None for family in Family for tool in family.tools}
    for family in families:
        for tool in family.tools:
            paths[tool] = ALL_TOOLS[tool]
    return ToolAvailability.from_mapping(paths)


@pytest.fixture
def linux() -> HostFacts:
    return HostFacts(kernel="Linux", operatingsystem="Debian")


@pytest.fixture
def all_tools() -> ToolAvailability:
    return tools_for(*Family)


@pytest.fixture
def full_host() -> FakeHost:
    """A Debian host with all three families and the sample dumps."""
    return FakeHost(
        binaries=ALL_TOOLS,
        outputs={
            "/sbin/iptables-save": IPTABLES_SAVE,
            "/sbin/ip6tables-save": IP6TABLES_SAVE,
            "/sbin/ebtables-save": EBTABLES_SAVE,
        },
    )
