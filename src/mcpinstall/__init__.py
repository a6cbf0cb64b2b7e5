"""Provision MCP server registrations for newly created projects."""

__version__ = "0.3.0"
