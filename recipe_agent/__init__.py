"""Conversational recipe-retrieval agent."""

__version__ = "0.1.0"
