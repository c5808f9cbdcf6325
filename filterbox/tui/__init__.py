"""Textual front end for the filter list."""
