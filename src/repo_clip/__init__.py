"""Concatenate a directory tree into a token-bounded payload for LLM context windows."""

__version__ = "0.1.0"
