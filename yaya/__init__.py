"""Convert images into yayagram puzzle boards."""

__version__ = "0.1.0"
