"""Building blocks for a caching HTTP proxy: URL plugins, byte intervals, sockets and utilities."""

__version__ = "0.1.0"