"""Shared helpers: errors, logging, validation and console rendering."""
