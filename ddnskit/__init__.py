"""Building blocks for a dynamic DNS client: request signers, IP caching, network helpers and self-update."""

__version__ = "0.1.0"