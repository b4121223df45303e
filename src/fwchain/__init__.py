"""fwchain: discovers firewall chains from iptables, ip6tables and ebtables."""

__version__ = "0.1.0"
