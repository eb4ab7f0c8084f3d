"""Property bridge between Python callers and a locally running media player."""

__version__ = "1.0.0"
