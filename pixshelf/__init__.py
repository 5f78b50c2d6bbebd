"""A small self-hosted image shelf with a JSON API over HTTP."""

__version__ = "0.1.0"