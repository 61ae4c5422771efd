"""Command-line control and JSON-RPC client for Snapcast servers."""

__version__ = "1.0.0"