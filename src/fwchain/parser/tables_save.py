"""Save-Output Parser.

Parses the output of `iptables-save`, `ip6tables-save` and `ebtables-save`
into the ordered list of (table, chain) declarations it contains.

IMPORTANT DESIGN NOTES:
1. Only table headers (`*table`) and chain declarations (`:chain ...`) matter.
   Rule lines, policies and counters are never inspected.
2. A chain name is everything between the leading ':' and the first
   whitespace. It may itself contain ':', quotes or shell metacharacters.
3. Parsing is permissive: the dump is machine generated, so a line that
   cannot be read is skipped instead of aborting the parse.
4. Output order is input order (tables outer, chains inner).
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from fwchain.model.chain import Protocol

logger = logging.getLogger(__name__)


class ChainDeclaration(NamedTuple):
    """A chain declared inside a table section."""

    table: str
    chain: str


class ParserState(Enum):
    """Where the parser is relative to table sections."""

    OUTSIDE_TABLE = "outside_table"
    IN_TABLE = "in_table"


@dataclass
class ParseContext:
    """Context during parsing to track current position."""

    state: ParserState = ParserState.OUTSIDE_TABLE
    table: str = ""
    line_number: int = 0
    declarations: list[ChainDeclaration] = field(default_factory=list)


class SaveOutputParser:
    """Parser for `*tables-save` output.

    A two-state machine: a `*table` header enters IN_TABLE, `COMMIT` returns
    to OUTSIDE_TABLE. Chain declarations are only honoured IN_TABLE.
    """

    COMMIT = "COMMIT"

    # `:<chain><whitespace>...` - the name stops at the first whitespace
    # Example: :PREROUTING ACCEPT [12:1780]
    CHAIN_RE = re.compile(r"^:(\S+)(?:\s|$)")

    def __init__(self) -> None:
        # Line numbers of declarations that could not be read
        self.skipped: list[int] = []

    def parse(self, raw_text: str, protocol: Protocol | None = None) -> list[ChainDeclaration]:
        """Parse a save dump.

        Args:
            raw_text: Full output of a save tool.
            protocol: Protocol of the family that produced the dump. It does
                not change how the dump is read.

        Returns:
            Chain declarations in input order. Empty for empty input.
        """
        self.skipped = []
        ctx = ParseContext()

        for line_number, line in enumerate(raw_text.splitlines(), start=1):
            ctx.line_number = line_number
            self._feed(ctx, line.strip())

        logger.debug(
            "Parsed %d chain(s) from %s dump, skipped %d line(s)",
            len(ctx.declarations),
            protocol.value if protocol else "unknown",
            len(self.skipped),
        )
        return ctx.declarations

    def _feed(self, ctx: ParseContext, line: str) -> None:
        """Advance the state machine by one stripped line."""
        if not line or line.startswith("#"):
            return

        if line == self.COMMIT:
            ctx.state = ParserState.OUTSIDE_TABLE
            ctx.table = ""
            return

        if line.startswith("*"):
            table = line[1:].strip()
            if table:
                ctx.state = ParserState.IN_TABLE
                ctx.table = table
            else:
                ctx.state = ParserState.OUTSIDE_TABLE
                ctx.table = ""
                self.skipped.append(ctx.line_number)
            return

        if line.startswith(":"):
            if ctx.state is not ParserState.IN_TABLE:
                self.skipped.append(ctx.line_number)
                return
            match = self.CHAIN_RE.match(line)
            if not match:
                self.skipped.append(ctx.line_number)
                return
            ctx.declarations.append(ChainDeclaration(table=ctx.table, chain=match.group(1)))
            return

        # Rule lines (-A ...) and anything else carry no declarations
