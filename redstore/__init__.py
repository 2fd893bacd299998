"""Building blocks for a Redis-style in-memory store: protocol, parser, data structures and pub/sub."""

__version__ = "0.1.0"