"""dupsweep: prune near-duplicate images from a directory."""

__version__ = "0.1.0"
