"""Bundled seed content."""
