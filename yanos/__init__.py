"""Generate a categorized, cross-linked HTML site from Markdown posts."""

__version__ = "0.1.0"
