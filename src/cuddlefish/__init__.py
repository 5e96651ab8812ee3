"""cuddlefish: version metadata from git describe."""

__version__ = "0.1.0"
