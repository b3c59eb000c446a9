"""dayblocks: per-day calendar block scheduling engine."""

__version__ = "0.1.0"
