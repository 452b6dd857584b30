"""Shared helpers: logging, HTTP and properties files."""
