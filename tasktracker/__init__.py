"""Personal task tracker: task state engine and HTTP API."""

__version__ = "0.1.0"
