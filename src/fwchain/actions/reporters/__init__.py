"""Reporters - Render scan results as rich, plain or JSON output."""

from rich.console import Console

from fwchain.actions.reporters.base import BaseReporter
from fwchain.actions.reporters.json_reporter import JsonReporter
from fwchain.actions.reporters.plain_reporter import PlainReporter
from fwchain.actions.reporters.rich_reporter import RichReporter

REPORTERS: dict[str, type[BaseReporter]] = {
    "rich": RichReporter,
    "plain": PlainReporter,
    "json": JsonReporter,
}


def get_reporter(fmt: str, console: Console) -> BaseReporter:
    return REPORTERS[fmt](console)


__all__ = ["BaseReporter", "JsonReporter", "PlainReporter", "RichReporter", "get_reporter"]
