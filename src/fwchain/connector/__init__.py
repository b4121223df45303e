"""Connector package - Command execution on the local or a remote host."""

from fwchain.connector.base import CommandResult, Connector
from fwchain.connector.local import LocalConnector
from fwchain.connector.ssh import SSHConfig, SSHConnector

__all__ = ["CommandResult", "Connector", "LocalConnector", "SSHConfig", "SSHConnector"]
