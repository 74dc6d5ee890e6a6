"""Parsers for macOS Unified Log catalog and firehose structures, with format-string lookup."""

__version__ = "0.5.1"