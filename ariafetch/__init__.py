"""Download files through an aria2c daemon controlled over JSON-RPC."""

__version__ = "0.1.0"