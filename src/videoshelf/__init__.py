"""videoshelf: video metadata registry with a download passthrough."""

__version__ = "0.1.0"
