"""Concrete implementations of the installer ports."""
