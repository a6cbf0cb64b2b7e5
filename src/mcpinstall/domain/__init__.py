"""Domain model for MCP installation."""
