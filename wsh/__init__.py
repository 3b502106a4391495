"""wsh - a small Unix shell with pipelines, history and shell variables."""

__version__ = "0.1.0"
