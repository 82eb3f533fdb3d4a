"""Draft state engine for authoring job postings."""

__version__ = "0.1.0"
