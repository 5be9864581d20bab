"""Count IPv4 addresses in access logs, filtered by subnet and time window."""

__version__ = "0.1.0"
