"""Build, broadcast and inspect CosmWasm chain transactions."""

__version__ = "0.1.0"