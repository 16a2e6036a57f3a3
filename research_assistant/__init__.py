"""Research assistant toolkit: biostatistics, tolerant LLM response parsing and project storage."""

__version__ = "0.1.0"
