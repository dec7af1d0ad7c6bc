"""Shared helpers: number parsing, formatting constants, configuration."""
