"""file_forge: scan a project tree with layered filters and export it for LLMs."""

__version__ = "0.1.0"
