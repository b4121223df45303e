"""Shared scan + reconcile pipeline.

Public API:
    run_host_scan(connector) -> HostScan
    run_check(scan, manifest) -> ReconcilePlan
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from fwchain.connector.base import Connector
from fwchain.engine.enumerator import ChainEnumerator, ChainInventory
from fwchain.engine.providers import NoProviderSelected, ProviderSelector
from fwchain.engine.reconcile import ChainReconciler, ReconcilePlan
from fwchain.engine.resource import ResourceFactory, create_resources, load_manifest
from fwchain.model.chain import Family, Provider
from fwchain.model.host import HostFacts, ToolAvailability
from fwchain.scanner.facts import HostFactsScanner
from fwchain.scanner.tools import ToolLocator


@dataclass
class HostScan:
    """Result from run_host_scan()."""

    facts: HostFacts
    tools: ToolAvailability
    inventory: ChainInventory
    provider: Provider | None = None
    provider_error: str | None = None


def run_host_scan(
    connector: Connector,
    *,
    selector: ProviderSelector | None = None,
    families: list[Family] | None = None,
    log_fn: Callable[[str], None] | None = None,
) -> HostScan:
    """Run one reconciliation read pass against a host.

    Tool availability is computed once here and handed by value to the
    selector and the enumerator.

    Args:
        connector: Open connector to the host.
        selector: Provider selector for this run. A fresh one by default.
        families: Restrict enumeration to these families.
        log_fn: Optional callback for progress messages.
    """
    def _log(msg: str) -> None:
        if log_fn:
            log_fn(msg)

    selector = selector or ProviderSelector()

    _log("Collecting host facts...")
    facts = HostFactsScanner(connector).scan()

    _log("Locating firewall tools...")
    tools = ToolLocator(connector).scan()

    provider = None
    provider_error = None
    try:
        provider = selector.default(facts, tools)
    except NoProviderSelected as e:
        provider_error = str(e)

    _log("Enumerating chains...")
    inventory = ChainEnumerator(connector, tools, families=families).scan()

    return HostScan(
        facts=facts,
        tools=tools,
        inventory=inventory,
        provider=provider,
        provider_error=provider_error,
    )


def run_check(
    scan: HostScan,
    manifest_path: Path | str,
    *,
    selector: ProviderSelector | None = None,
) -> ReconcilePlan:
    """Compare the chains declared in a manifest with a host scan.

    Raises:
        ManifestError: If the manifest cannot be loaded.
        ResourceValidationError: If a declared chain is invalid.
        NoProviderSelected: If the host has no usable provider.
    """
    manifest = load_manifest(manifest_path)
    factory = ResourceFactory(selector or ProviderSelector(), scan.facts, scan.tools)
    resources = create_resources(manifest, factory)
    return ChainReconciler(scan.inventory).plan(resources)
