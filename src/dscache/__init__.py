"""dscache — a taggable cache backend for document stores."""

__version__ = "0.1.0"
