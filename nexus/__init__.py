"""Task core with typed channels, logging and a shared-memory record exchange."""

__version__ = "0.1.0"