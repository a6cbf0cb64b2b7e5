"""Port definitions for collaborators owned by the host application."""
