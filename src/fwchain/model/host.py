"""Host model dataclasses - Facts and tool availability for one host."""

from dataclasses import dataclass, field

from fwchain.model.chain import Family


@dataclass(frozen=True)
class HostFacts:
    """Host facts used to confine providers."""

    kernel: str = "Unknown"
    operatingsystem: str = "Unknown"


@dataclass(frozen=True)
class ToolAvailability:
    """Where each firewall tool lives on a host, if anywhere.

    Computed once per run by the ToolLocator and passed by value into the
    provider selector and the enumerator. A tool missing from `paths` (or
    mapped to None) is absent.
    """

    paths: tuple[tuple[str, str | None], ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, paths: dict[str, str | None]) -> "ToolAvailability":
        return cls(paths=tuple(sorted(paths.items())))

    def as_dict(self) -> dict[str, str | None]:
        return dict(self.paths)

    def path(self, name: str) -> str | None:
        return self.as_dict().get(name)

    def has(self, name: str) -> bool:
        return self.path(name) is not None

    def missing(self, names: tuple[str, ...] | list[str]) -> list[str]:
        return [name for name in names if not self.has(name)]

    def family_available(self, family: Family) -> bool:
        """A family is usable iff both its runtime and save tool resolve."""
        return not self.missing(family.tools)

    def available_families(self) -> list[Family]:
        return [family for family in Family if self.family_available(family)]
