"""Parsing, querying, JSON conversion, editing, merging and splitting of KiCad s-expression files, and parsing and analysis of device tree sources."""

__version__ = "0.1.0"