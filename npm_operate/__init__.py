"""npm-operate — package.json normalization and dependency operations."""

__version__ = "0.1.0"
