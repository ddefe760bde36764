"""Business reporting dashboard: spreadsheet exports to report bundles."""

__version__ = "0.1.0"
