"""Linkshelf: a shelf of reusable links and text snippets, grouped in modes."""

__version__ = "0.1.0"
