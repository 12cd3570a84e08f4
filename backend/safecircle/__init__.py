"""SafeCircle: friends and SOS alerts."""

__version__ = "0.1.0"
